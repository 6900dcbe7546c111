import pytest

from vaultswap.namespace import FilterOptions, Lister, apply_filters, filter_namespaces


class _FakeClient:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.paths = []

    def list(self, path):
        self.paths.append(path)
        if self.error is not None:
            raise self.error
        return self.response


def test_apply_filters_no_options_returns_all():
    namespaces = ["dev", "staging", "prod"]
    assert apply_filters(namespaces, FilterOptions()) == namespaces


def test_apply_filters_prefix():
    result = apply_filters(["dev-us", "dev-eu", "prod-us", "staging"], FilterOptions(prefix="dev"))
    assert result == ["dev-us", "dev-eu"]


def test_apply_filters_substring():
    result = apply_filters(["dev-us", "prod-us", "prod-eu", "staging"], FilterOptions(substring="us"))
    assert result == ["dev-us", "prod-us"]


def test_apply_filters_exclude():
    result = apply_filters(["dev", "staging", "prod"], FilterOptions(exclude=["staging", "prod"]))
    assert result == ["dev"]


def test_apply_filters_prefix_and_exclude():
    result = apply_filters(
        ["team-alpha", "team-beta", "team-gamma", "infra"],
        FilterOptions(prefix="team", exclude=["team-beta"]),
    )
    assert result == ["team-alpha", "team-gamma"]


def test_apply_filters_empty_input():
    assert apply_filters([], FilterOptions(substring="dev")) == []


def test_apply_filters_exclude_with_whitespace():
    result = apply_filters(["dev", "staging", "prod"], FilterOptions(exclude=[" staging "]))
    assert result == ["dev", "prod"]


def test_list_returns_namespaces():
    client = _FakeClient({"keys": ["team-a/", "team-b/", "team-c/"]})
    assert Lister(client).list("") == ["team-a", "team-b", "team-c"]
    assert client.paths == ["sys/namespaces"]


def test_list_empty_response():
    assert Lister(_FakeClient({})).list("") == []


def test_list_no_data():
    assert Lister(_FakeClient(None)).list("") == []


def test_list_under_parent_trims_slashes():
    client = _FakeClient({"keys": ["child/"]})
    assert Lister(client).list("/team/") == ["child"]
    assert client.paths == ["team/sys/namespaces"]


def test_list_skips_non_string_keys():
    assert Lister(_FakeClient({"keys": ["a/", 3, "b"]})).list() == ["a", "b"]


def test_list_wraps_client_error():
    with pytest.raises(RuntimeError, match="listing namespaces at 'sys/namespaces': boom"):
        Lister(_FakeClient(error=OSError("boom"))).list("")


def test_list_rejects_unexpected_keys_type():
    with pytest.raises(TypeError, match="unexpected type for namespace keys"):
        Lister(_FakeClient({"keys": "team-a"})).list("")


def test_filter_by_substring():
    result = filter_namespaces(["team-a", "team-b", "infra", "infra-prod"], "infra")
    assert result == ["infra", "infra-prod"]


def test_filter_empty_substring_returns_all():
    namespaces = ["team-a", "team-b"]
    assert filter_namespaces(namespaces, "") == namespaces