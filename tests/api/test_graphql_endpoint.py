"""
Integration tests for the HTTP query endpoint
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from mediagraph.api.app import create_app
from mediagraph.resolution import QueryExecutor, ResolverContext, build_registry


@pytest.fixture
def app(executor):
    return create_app(executor=executor)


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.mark.integration
@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_books_query(client):
    response = await client.post(
        "/graphql", json={"query": "query Library { books { name genre id authorId } }"}
    )

    assert response.status_code == 200
    body = response.json()
    assert "errors" not in body
    assert len(body["data"]["books"]) == 6
    assert body["data"]["books"][3] == {
        "name": "The Long Earth",
        "genre": "Sci-Fi",
        "id": "3",
        "authorId": "3",
    }
    assert response.headers["x-request-id"]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_request_id_is_echoed(client):
    response = await client.post(
        "/graphql",
        json={"query": "{ authors { id } }"},
        headers={"X-Request-ID": "req-123"},
    )

    assert response.headers["x-request-id"] == "req-123"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_variables_and_nested_author(client):
    response = await client.post(
        "/graphql",
        json={
            "query": "query Book($id: ID!) { book(id: $id) { name author { name age id } } }",
            "variables": {"id": "6"},
            "operationName": "Book",
        },
    )

    assert response.json() == {
        "data": {
            "book": {
                "name": "The Light Fantastic",
                "author": {"name": "Terry Pratchett", "age": 66, "id": "3"},
            }
        }
    }


@pytest.mark.integration
@pytest.mark.asyncio
async def test_partial_success(client):
    response = await client.post(
        "/graphql",
        json={"query": '{ book(id: "does-not-exist") { name } authors { name } }'},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["data"]["book"] is None
    assert len(body["data"]["authors"]) == 3
    assert body["errors"] == [
        {
            "message": "Book with id 'does-not-exist' not found",
            "path": ["book"],
            "extensions": {"code": "NOT_FOUND"},
        }
    ]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_upstream_failure(failing_search_client, store):
    executor = QueryExecutor(
        build_registry(), ResolverContext(store=store, search=failing_search_client)
    )
    transport = ASGITransport(app=create_app(executor=executor))

    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/graphql", json={"query": '{ songs(name: "Imagine") { name } }'}
        )

    assert response.status_code == 200
    body = response.json()
    assert body["data"] == {"songs": None}
    assert body["errors"][0]["extensions"]["code"] == "UPSTREAM_UNAVAILABLE"
    assert body["errors"][0]["path"] == ["songs"]


@pytest.mark.integration
@pytest.mark.asyncio
@pytest.mark.parametrize(
    "query,code",
    [
        ('{ artists(name: "  ") { name } }', "INVALID_ARGUMENT"),
        ("{ book { name } }", "INVALID_ARGUMENT"),
        ('{ book(id: "1") { publisher } }', "UNKNOWN_FIELD"),
        ("{ books }", "INVALID_SELECTION"),
        ('mutation { addBook(name: "x") { id } }', "INVALID_OPERATION"),
        ("{ books {", "GRAPHQL_PARSE_FAILED"),
    ],
)
async def test_request_errors(client, search_requests, query, code):
    response = await client.post("/graphql", json={"query": query})

    assert response.status_code == 400
    body = response.json()
    assert body["data"] is None
    assert body["errors"][0]["extensions"]["code"] == code
    assert search_requests == []


@pytest.mark.integration
@pytest.mark.asyncio
async def test_unknown_field_names_type_and_field(client):
    response = await client.post("/graphql", json={"query": '{ book(id: "1") { publisher } }'})

    assert "Book.publisher" in response.json()["errors"][0]["message"]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_schema_sdl(client):
    response = await client.get("/graphql/schema")

    assert response.status_code == 200
    assert "type Book {" in response.text
    assert "author(id: ID!): Author" in response.text


@pytest.mark.integration
@pytest.mark.asyncio
async def test_integer_id_literal(client):
    response = await client.post("/graphql", json={"query": "{ book(id: 3) { name authorId } }"})

    assert response.status_code == 200
    assert response.json() == {"data": {"book": {"name": "The Long Earth", "authorId": "3"}}}


@pytest.mark.integration
@pytest.mark.asyncio
async def test_integer_id_variable(client):
    response = await client.post(
        "/graphql",
        json={
            "query": "query ($i: ID!) { author(id: $i) { name } }",
            "variables": {"i": 3},
        },
    )

    assert response.status_code == 200
    assert response.json() == {"data": {"author": {"name": "Terry Pratchett"}}}


@pytest.mark.integration
@pytest.mark.asyncio
async def test_root_typename(client):
    response = await client.post("/graphql", json={"query": "{ __typename authors { name } }"})

    assert response.status_code == 200
    body = response.json()
    assert body["data"]["__typename"] == "Query"
    assert len(body["data"]["authors"]) == 3
