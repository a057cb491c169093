"""
End-to-end execution through graphql-core with a bound schema.
"""

import pytest
from graphql import graphql

from tests.helpers import BASE_URL, FakeFetch, FakeResponse

USER = {"type": "query", "field": "user", "path": "/users/{args.id}"}
USERS = {"type": "query", "field": "users", "path": "/users"}
CREATE_USER = {"type": "mutation", "field": "createUser", "path": "/users"}
USER_OR_ERROR = {"type": "query", "field": "userOrError", "path": "/users/{args.id}"}


@pytest.mark.asyncio
async def test_query_returns_upstream_object(bind, schema, fetch):
    fetch.response = FakeResponse(body='{"id":42,"name":"Ada"}')
    bind(USER)

    result = await graphql(schema, "{ user(id: 42) { id name } }")

    assert result.errors is None
    assert result.data == {"user": {"id": "42", "name": "Ada"}}


@pytest.mark.asyncio
async def test_http_error_is_a_field_error(bind, schema, fetch):
    fetch.response = FakeResponse(status=404, status_text="Not Found", body='{"message":"not found"}')
    bind(USER)

    result = await graphql(schema, "{ user(id: 1) { id } }")

    assert result.data == {"user": None}
    error = result.errors[0]
    assert error.message == "HTTP Error: 404"
    assert error.path == ["user"]
    assert error.extensions["status"] == 404
    assert error.extensions["statusText"] == "Not Found"
    assert error.extensions["url"] == f"{BASE_URL}/users/1"


@pytest.mark.asyncio
async def test_single_object_for_list_field_is_wrapped(bind, schema, fetch):
    fetch.response = FakeResponse(body='{"id":1,"name":"Ada"}')
    bind(USERS)

    result = await graphql(schema, "{ users { name } }")

    assert result.data == {"users": [{"name": "Ada"}]}


@pytest.mark.asyncio
async def test_mutation_posts_cleaned_input(bind, schema, fetch):
    fetch.response = FakeResponse(body='{"id":9,"name":"Ada"}')
    bind(CREATE_USER)

    result = await graphql(
        schema,
        "mutation($input: UserInput) { createUser(input: $input) { id } }",
        variable_values={"input": {"name": "Ada", "email": None}},
    )

    assert result.data == {"createUser": {"id": "9"}}
    assert fetch.last.method == "POST"
    assert fetch.last.body == '{"name":"Ada"}'


@pytest.mark.asyncio
async def test_per_request_fetch_from_context(bind, schema, fetch):
    bind(USER)
    per_request = FakeFetch(FakeResponse(body='{"id":3}'))

    result = await graphql(schema, "{ user(id: 3) { id } }", context_value={"fetch": per_request})

    assert result.data == {"user": {"id": "3"}}
    assert fetch.calls == []
    assert per_request.last.url == f"{BASE_URL}/users/3"


@pytest.mark.asyncio
async def test_union_field_receives_error_payload(bind, schema, fetch):
    fetch.response = FakeResponse(status=404, status_text="Not Found", body='{"error":"missing"}')
    bind(USER_OR_ERROR)
    schema.get_type("UserResult").resolve_type = (
        lambda value, info, union: "NotFound" if "error" in value else "User"
    )

    result = await graphql(schema, "{ userOrError(id: 1) { ... on NotFound { error } } }")

    assert result.errors is None
    assert result.data == {"userOrError": {"error": "missing"}}
