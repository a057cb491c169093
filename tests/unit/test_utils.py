import pytest

from restgraph.core import querystring
from restgraph.core.utils import (
    clean_object,
    find_header,
    json_flat_stringify,
    to_camel_case,
    to_pascal_case,
    url_join,
)


@pytest.mark.parametrize("name, expected", [
    ("pubsub_topic", "pubsubTopic"),
    ("request_base_body", "requestBaseBody"),
    ("field", "field"),
])
def test_to_camel_case(name, expected):
    assert to_camel_case(name) == expected


@pytest.mark.parametrize("name, expected", [
    ("query", "Query"),
    ("subscription", "Subscription"),
    ("user_updated", "UserUpdated"),
    ("Mutation", "Mutation"),
])
def test_to_pascal_case(name, expected):
    assert to_pascal_case(name) == expected


def test_clean_object_drops_none_recursively():
    data = {"a": 1, "b": None, "c": {"d": None, "e": 0}, "f": [1, None, {"g": None}], "h": False, "i": ""}

    assert clean_object(data) == {"a": 1, "c": {"e": 0}, "f": [1, None, {}], "h": False, "i": ""}


def test_clean_object_is_idempotent_and_leaves_input_untouched():
    data = {"a": {"b": None}, "c": [None]}
    snapshot = {"a": {"b": None}, "c": [None]}

    once = clean_object(data)

    assert clean_object(once) == once
    assert data == snapshot


def test_clean_object_keeps_list_positions():
    cleaned = clean_object({"ids": [1, None, 3], "rows": [{"a": None, "b": 2}]})

    assert cleaned == {"ids": [1, None, 3], "rows": [{"b": 2}]}
    assert querystring.stringify(cleaned).startswith("ids%5B0%5D=1&ids%5B1%5D=&ids%5B2%5D=3")


def test_clean_object_passes_scalars_through():
    assert clean_object(5) == 5
    assert clean_object(None) is None


def test_find_header_is_case_insensitive():
    headers = {"Content-Type": "application/json", "X-Empty": ""}

    assert find_header(headers, "content-type") == "application/json"
    assert find_header(headers, "x-empty") is None
    assert find_header(headers, "accept") is None


def test_json_flat_stringify_is_compact():
    assert json_flat_stringify({"name": "Zoë", "ids": [1, 2]}) == '{"name":"Zoë","ids":[1,2]}'


@pytest.mark.parametrize("parts, expected", [
    (("https://api.example.com/", "/users/1"), "https://api.example.com/users/1"),
    (("https://api.example.com", "users?x=1"), "https://api.example.com/users?x=1"),
    (("https://api.example.com/v1", "?page=2"), "https://api.example.com/v1?page=2"),
    (("", "/users"), "/users"),
    (("https://api.example.com", ""), "https://api.example.com"),
    (("https://api.example.com", "/users/"), "https://api.example.com/users/"),
])
def test_url_join(parts, expected):
    assert url_join(*parts) == expected
