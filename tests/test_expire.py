from datetime import datetime, timedelta, timezone

from vaultswap.expire import Checker, Result, expired_results, format_results


class FakeLogical:
    def __init__(self, data=None, error=None):
        self.data = data
        self.error = error
        self.paths = []

    def read(self, path):
        self.paths.append(path)
        if self.error:
            raise self.error
        return self.data


def rfc3339_nano(moment):
    return moment.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def metadata(ttl, created):
    return {
        "current_version": 1,
        "delete_version_after": ttl,
        "versions": {"1": {"created_time": created}},
    }


def test_no_metadata_is_error():
    res = Checker(FakeLogical(None), "ns1").check_path("app/db")
    assert str(res.error) == "no metadata found at app/db"
    assert res.namespace == "ns1"


def test_reads_metadata_path():
    client = FakeLogical(None)
    Checker(client).check_path("app/db")
    assert client.paths == ["secret/metadata/app/db"]


def test_with_ttl_not_expired():
    created = rfc3339_nano(datetime.now(timezone.utc) - timedelta(hours=10))
    res = Checker(FakeLogical(metadata("24h", created)), "ns1").check_path("app/db")
    assert res.error is None
    assert res.ttl == timedelta(hours=24)
    assert res.expired is False
    assert res.no_ttl is False
    assert res.expires_at - res.created_at == timedelta(hours=24)


def test_expired_with_nanosecond_timestamp():
    data = metadata("1h30m", "2024-01-01T00:00:00.123456789Z")
    res = Checker(FakeLogical(data)).check_path("app/db")
    assert res.ttl == timedelta(minutes=90)
    assert res.expired is True
    assert res.expires_at == datetime(2024, 1, 1, 1, 30, 0, 123456, tzinfo=timezone.utc)


def test_zero_ttl_means_no_ttl():
    res = Checker(FakeLogical(metadata("0s", "2024-01-01T00:00:00Z"))).check_path("p")
    assert res.no_ttl is True
    assert res.ttl == timedelta(0)


def test_invalid_ttl_ignored():
    res = Checker(FakeLogical(metadata("soon", "2024-01-01T00:00:00Z"))).check_path("p")
    assert res.no_ttl is True
    assert res.error is None


def test_read_failure_is_wrapped():
    res = Checker(FakeLogical(error=ConnectionError("refused"))).check_path("app/db")
    assert str(res.error) == "read metadata app/db: refused"


def test_check_paths_returns_all_results_in_order():
    paths = ["a/b", "c/d", "e/f"]
    results = Checker(FakeLogical(None), "ns1").check_paths(paths)
    assert [r.path for r in results] == paths


def test_expired_results_filters():
    results = [Result("a", expired=True), Result("b"), Result("c", expired=True)]
    assert [r.path for r in expired_results(results)] == ["a", "c"]


def test_format_no_ttl():
    out = format_results([Result(path="secret/foo", no_ttl=True)])
    assert out == "[NO TTL]  secret/foo: no expiry metadata\n"


def test_format_expired():
    res = Result(
        path="secret/bar",
        ttl=timedelta(hours=24),
        expires_at=datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc),
        expired=True,
    )
    out = format_results([res])
    assert out == "[EXPIRED] secret/bar: expired at 2024-06-01T10:00:00Z (ttl: 24h0m0s)\n"


def test_format_ok():
    res = Result(
        path="secret/baz",
        ttl=timedelta(hours=48),
        expires_at=datetime.now(timezone.utc) + timedelta(hours=24),
    )
    out = format_results([res])
    assert out.startswith("[OK]      secret/baz: expires at ")
    assert "(in 2" in out


def test_format_error():
    out = format_results([Result(path="secret/missing", error=LookupError("not found"))])
    assert out == "[ERROR]   secret/missing: not found\n"


def test_format_empty():
    assert format_results([]) == "no paths checked\n"