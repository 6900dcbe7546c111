import pytest

from vaultswap.cascade import Cascader


class FakeLogical:
    def __init__(self, secrets=None, read_error=None, write_error=None):
        self.secrets = secrets or {}
        self.read_error = read_error
        self.write_error = write_error
        self.writes = {}

    def read(self, path):
        if self.read_error:
            raise self.read_error
        return self.secrets.get(path)

    def write(self, path, data):
        if self.write_error:
            raise self.write_error
        self.writes[path] = data


def kv_path(name):
    return "/".join(["secret", "data", name])


def source(data):
    return FakeLogical({kv_path("source/secret"): {"data": data}})


def test_dry_run_does_not_write():
    client = source({"color": "blue"})
    results = Cascader(client, True).cascade_path("source/secret", ["dest/a", "dest/b"])
    assert len(results) == 2
    assert all(r.error is None and r.dry_run for r in results)
    assert client.writes == {}


def test_success_writes_every_destination():
    client = source({"api_key": "placeholder"})
    results = Cascader(client, False).cascade_path(
        "source/secret", ["dest/a", "dest/b", "dest/c"]
    )
    assert len(results) == 3
    assert all(r.error is None and r.source == "source/secret" for r in results)
    assert [r.dest for r in results] == ["dest/a", "dest/b", "dest/c"]
    assert client.writes[kv_path("dest/b")] == {"data": {"api_key": "placeholder"}}
    assert len(client.writes) == 3


def test_returns_all_results():
    client = FakeLogical({kv_path("shared/config"): {"data": {"token": "token"}}})
    dests = ["env/prod", "env/staging", "env/dev"]
    results = Cascader(client, False).cascade_path("shared/config", dests)
    assert len(results) == len(dests)


def test_read_error_marks_every_destination():
    client = FakeLogical(read_error=ConnectionError("refused"))
    results = Cascader(client, False).cascade_path("source/secret", ["a", "b"])
    assert [str(r.error) for r in results] == ["read source: refused"] * 2


def test_missing_source_reports_not_found():
    client = FakeLogical()
    results = Cascader(client, True).cascade_path("nowhere", ["a"])
    assert str(results[0].error) == "source path not found: nowhere"
    assert results[0].dry_run is True


def test_write_error_is_reported_per_destination():
    client = source({"color": "blue"})
    client.write_error = PermissionError("denied")
    results = Cascader(client, False).cascade_path("source/secret", ["dest/a"])
    assert str(results[0].error) == "write dest dest/a: denied"


@pytest.mark.parametrize("dry_run", [True, False])
def test_no_destinations_gives_no_results(dry_run):
    assert Cascader(source({"a": "1"}), dry_run).cascade_path("source/secret", []) == []