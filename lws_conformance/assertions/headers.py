"""Assertions for CORS, Allow, Link and Location headers."""

from lws_conformance.assertions._paths import unique_path
from lws_conformance.assertions.catalog import catalog
from lws_conformance.assertions.checks import check, check_status, require_header
from lws_conformance.client import TestClient


@catalog.register
async def cors_allow_origin(client: TestClient) -> None:
    response = await client.get("/")

    require_header(response, "Access-Control-Allow-Origin")


@catalog.register
async def cors_allow_methods(client: TestClient) -> None:
    response = await client.options("/", headers={"Origin": "https://example.com"})

    require_header(response, "Access-Control-Allow-Methods")


@catalog.register
async def allow_header(client: TestClient) -> None:
    response = await client.options("/")

    allow = require_header(response, "Allow")
    check("GET" in allow, "Allow should include GET")


@catalog.register
async def link_resource(client: TestClient) -> None:
    path = "/test-link-resource.json"
    await client.create_resource(path, {"test": True})

    response = await client.get(path)

    link = require_header(response, "Link")
    check("ldp#Resource" in link, "Link header should include ldp#Resource")


@catalog.register
async def link_container(client: TestClient) -> None:
    response = await client.get("/")

    link = require_header(response, "Link")
    check("ldp#Container" in link, "Link header should include ldp#Container")


@catalog.register
async def location_header(client: TestClient) -> None:
    """A PUT that creates a resource points at it with Location."""
    path = unique_path("test-location")

    response = await client.put(
        path, {"test": True}, headers={"Content-Type": "application/json"}
    )
    if response.status == 201:
        client.track(path)

    check_status(response, 201, "Status should be 201")
    location = require_header(response, "Location")
    check(path in location, "Location should include resource path")
