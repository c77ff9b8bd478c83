"""Assertions for container listings served as JSON-LD."""

import json
from typing import Any

from lws_conformance.assertions.catalog import catalog
from lws_conformance.assertions.checks import check, check_status
from lws_conformance.client import HttpResponse, TestClient
from lws_conformance.errors import AssertionFailure


def _listing(response: HttpResponse) -> dict[str, Any]:
    try:
        body = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise AssertionFailure(f"Container listing is not valid JSON: {e}") from e
    check(isinstance(body, dict), "Container listing should be a JSON object")
    return body


@catalog.register
async def container_jsonld(client: TestClient) -> None:
    """Containers are served as JSON-LD."""
    response = await client.get("/")

    check_status(response, 200, "Status should be 200")
    content_type = response.headers.get("Content-Type", "")
    check(
        "application/ld+json" in content_type,
        "Content-Type should be application/ld+json",
    )
    _listing(response)


@catalog.register
async def container_context(client: TestClient) -> None:
    """Listings declare a JSON-LD context with a vocabulary."""
    body = _listing(await client.get("/"))

    context = body.get("@context")
    check(context, "Should have @context")
    has_vocab = "@vocab" in body or (
        isinstance(context, dict) and "@vocab" in context
    )
    check(has_vocab, "Should have @vocab")


@catalog.register
async def container_contains(client: TestClient) -> None:
    """Listings enumerate children in a ``contains`` array."""
    await client.create_resource("/test-container-item.json", {"test": True})

    body = _listing(await client.get("/"))

    check("contains" in body, "Should have contains property")
    check(isinstance(body["contains"], list), "contains should be an array")


@catalog.register
async def container_trailing_slash(client: TestClient) -> None:
    """Container identifiers end with a slash."""
    response = await client.get("/")
    check_status(response, 200, "Status should be 200")

    container_id = _listing(response).get("@id")
    check(
        isinstance(container_id, str) and container_id.endswith("/"),
        "Container @id should end with /",
    )
