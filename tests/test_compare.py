import pytest

from vaultswap.compare import Comparer, Result, format_results, print_results
from vaultswap.diff import ChangeType, compare


class FakeVault:
    def __init__(self, data=None, error=None):
        self.data = data
        self.error = error

    def read_secret(self, path):
        if self.error:
            raise self.error
        return self.data


def test_compare_path_no_diff():
    vault = FakeVault({"key": "value"})
    result = Comparer(vault, vault, False).compare_path("secret/myapp")
    assert result.has_diff is False
    assert [c.type for c in result.diff] == [ChangeType.UNCHANGED]


def test_compare_path_with_diff():
    src = FakeVault({"key": "value1"})
    dst = FakeVault({"key": "value2"})
    result = Comparer(src, dst, False).compare_path("secret/myapp")
    assert result.has_diff is True
    assert result.diff[0].type is ChangeType.MODIFIED
    assert result.diff[0].old_val == "value1"
    assert result.diff[0].new_val == "value2"


def test_compare_paths_returns_single_result():
    vault = FakeVault({"a": "1"})
    results = Comparer(vault, vault, False).compare_paths(["secret/foo"])
    assert len(results) == 1
    assert results[0].path == "secret/foo"


def test_compare_path_unreachable_src():
    src = FakeVault(error=ConnectionError("connection refused"))
    dst = FakeVault({})
    with pytest.raises(RuntimeError, match="read source"):
        Comparer(src, dst, False).compare_path("secret/foo")


def test_compare_path_unreadable_dst():
    src = FakeVault({"a": "1"})
    dst = FakeVault(error=PermissionError("denied"))
    with pytest.raises(RuntimeError, match='read destination "secret/foo": denied'):
        Comparer(src, dst, False).compare_path("secret/foo")


def test_compare_paths_stops_on_error():
    src = FakeVault(error=ConnectionError("down"))
    with pytest.raises(RuntimeError, match="read source"):
        Comparer(src, FakeVault({}), False).compare_paths(["a", "b"])


def test_format_results_no_changes():
    out = format_results([Result(path="secret/a")], True)
    assert out == "[=] secret/a — no changes\n"


def test_format_results_masked():
    result = Result(path="secret/a", diff=compare({"key": "value1"}, {"key": "value2"}))
    out = format_results([result], True)
    assert out.startswith("[~] secret/a\n    ")
    assert "******** → ********" in out
    assert "value1" not in out


def test_format_results_unmasked():
    result = Result(path="secret/a", diff=compare({"key": "value1"}, {"key": "value2"}))
    out = format_results([result], False)
    assert "value1 → value2" in out
    assert all(line.startswith("    ") for line in out.splitlines()[1:])


def test_print_results_writes_stdout(capsys):
    print_results([Result(path="p")], False)
    assert capsys.readouterr().out == "[=] p — no changes\n"