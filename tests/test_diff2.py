from vaultswap.diff2 import Comparer, Result, format_results, print_results


def test_compare_added():
    res = Comparer(False).compare("secret/path", {}, {"newkey": "newval"})
    assert res.has_changes()
    assert res.added == {"newkey": "newval"}


def test_compare_removed():
    res = Comparer(False).compare("secret/path", {"oldkey": "oldval"}, {})
    assert res.removed == {"oldkey": "oldval"}


def test_compare_changed():
    res = Comparer(False).compare("secret/path", {"key": "old"}, {"key": "new"})
    assert res.changed["key"] == ("old", "new")


def test_compare_unchanged():
    res = Comparer(False).compare("secret/path", {"key": "val"}, {"key": "val"})
    assert not res.has_changes()
    assert res.path == "secret/path"


def test_compare_mask_values():
    res = Comparer(True).compare("secret/path", {"key": "hidden"}, {"key": "other"})
    assert res.changed["key"] == ("******", "*****")


def test_has_changes_false_on_empty_result():
    assert not Result(path="p").has_changes()


def test_format_no_diff():
    out = format_results([Result(path="secret/a")])
    assert out == "[no diff] secret/a\n"


def test_format_with_added():
    out = format_results([Result(path="secret/b", added={"foo": "bar"})])
    assert out == "[diff] secret/b\n  \033[32m+ foo = bar\033[0m\n"


def test_format_with_error():
    out = format_results([Result(path="secret/c", error=RuntimeError("read failed"))])
    assert out == "[error] secret/c: read failed\n"


def test_format_changed_and_removed():
    out = format_results(
        [Result(path="secret/d", removed={"gone": "val"}, changed={"k": ("old", "new")})]
    )
    assert "\033[31m- gone = val\033[0m" in out
    assert "\033[33m~ k: old -> new\033[0m" in out


def test_format_sorts_keys():
    out = format_results([Result(path="p", added={"b": "2", "a": "1"})])
    assert out.index("+ a = 1") < out.index("+ b = 2")


def test_print_results(capsys):
    print_results([Result(path="secret/a")])
    assert capsys.readouterr().out == "[no diff] secret/a\n"