from vaultswap.dedup import Deduper


class FakeKV:
    def __init__(self, store, put_error=None):
        self.store = store
        self.put_error = put_error

    def get(self, path):
        if path not in self.store:
            raise KeyError(path)
        return dict(self.store[path])

    def put(self, path, data):
        if self.put_error:
            raise self.put_error
        self.store[path] = dict(data)


def test_no_duplicates_skipped():
    client = FakeKV({"myapp/config": {"alpha": "one", "beta": "two"}})
    res = Deduper(client, False).deduplicate_path("myapp/config")
    assert res.skipped is True
    assert res.removed == 0


def test_removes_duplicates():
    store = {"myapp/config": {"alpha": "same", "beta": "same", "gamma": "unique"}}
    res = Deduper(FakeKV(store), False).deduplicate_path("myapp/config")
    assert res.error is None
    assert res.removed == 1
    assert res.duplicates == ["beta"]
    assert store["myapp/config"] == {"alpha": "same", "gamma": "unique"}


def test_dry_run_does_not_write():
    store = {"myapp/secrets": {"x": "dup", "y": "dup"}}
    res = Deduper(FakeKV(store), True).deduplicate_path("myapp/secrets")
    assert res.dry_run is True
    assert res.removed == 1
    assert len(store["myapp/secrets"]) == 2


def test_deduplicate_paths_returns_all_results():
    store = {"a": {"k1": "v", "k2": "v"}, "b": {"k1": "unique"}}
    results = Deduper(FakeKV(store), False).deduplicate_paths(["a", "b"])
    assert len(results) == 2
    assert [r.path for r in results] == ["a", "b"]
    assert results[0].removed == 1
    assert results[1].skipped is True


def test_values_compared_by_rendered_text():
    store = {"p": {"n": 1, "s": "1"}}
    res = Deduper(FakeKV(store), False).deduplicate_path("p")
    assert res.duplicates == ["s"]


def test_read_error_reported():
    res = Deduper(FakeKV({}), False).deduplicate_path("missing")
    assert str(res.error).startswith("read:")


def test_write_error_reported():
    client = FakeKV({"p": {"a": "x", "b": "x"}}, put_error=PermissionError("denied"))
    res = Deduper(client, False).deduplicate_path("p")
    assert str(res.error) == "write: denied"