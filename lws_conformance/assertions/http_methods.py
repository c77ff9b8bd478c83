"""Assertions for the basic HTTP methods on resources and containers."""

from lws_conformance.assertions._paths import path_of, unique_path
from lws_conformance.assertions.catalog import catalog
from lws_conformance.assertions.checks import check, check_status, require_header
from lws_conformance.client import TestClient
from lws_conformance.errors import Inapplicable

LDP_BASIC_CONTAINER = '<http://www.w3.org/ns/ldp#BasicContainer>; rel="type"'


@catalog.register
async def get_resource(client: TestClient) -> None:
    """GET returns 200 with ETag and Link headers for an existing resource."""
    path = "/test-get-resource.json"
    await client.create_resource(path, {"data": "test"})

    response = await client.get(path)

    check_status(response, 200, "Status should be 200")
    require_header(response, "ETag")
    require_header(response, "Link")
    check(response.body, "Body should not be empty")


@catalog.register
async def get_404(client: TestClient) -> None:
    """GET returns 404 for a resource that does not exist."""
    response = await client.get("/nonexistent-resource.json")

    check_status(response, 404, "Status should be 404")


@catalog.register
async def get_container(client: TestClient) -> None:
    """GET on the root container returns a JSON-LD listing."""
    response = await client.get("/")

    check_status(response, 200, "Status should be 200")
    content_type = response.headers.get("Content-Type", "")
    check(
        "application/ld+json" in content_type,
        "Content-Type should be application/ld+json",
    )
    link = response.headers.get("Link", "")
    check("Container" in link, "Link header should include Container")


@catalog.register
async def head_resource(client: TestClient) -> None:
    """HEAD returns the GET headers without a body."""
    path = "/test-head-resource.json"
    await client.create_resource(path, {"test": "data"})

    response = await client.head(path)

    check_status(response, 200, "Status should be 200")
    require_header(response, "ETag")
    require_header(response, "Content-Type")
    require_header(response, "Link")
    check(response.body == b"", "Body should be empty")


@catalog.register
async def put_create(client: TestClient) -> None:
    """PUT to a new path creates the resource."""
    path = unique_path("test-put-create")

    response = await client.put(
        path, {"test": True}, headers={"Content-Type": "application/json"}
    )
    if response.status == 201:
        client.track(path)

    check_status(response, 201, "Status should be 201 for new resource")
    require_header(response, "Location")


@catalog.register
async def put_update(client: TestClient) -> None:
    """PUT to an existing path replaces the resource."""
    path = "/test-put-update.json"
    await client.create_resource(path, {"version": 1})

    response = await client.put(
        path, {"version": 2}, headers={"Content-Type": "application/json"}
    )

    check_status(response, 204, "Status should be 204 for update")


@catalog.register
async def put_if_none_match(client: TestClient) -> None:
    """PUT with ``If-None-Match: *`` creates once and then refuses."""
    path = unique_path("test-put-if-none-match")
    headers = {"Content-Type": "application/json", "If-None-Match": "*"}

    first = await client.put(path, {"test": True}, headers=headers)
    if first.status == 201:
        client.track(path)
    check_status(first, 201, "Should create new resource")

    second = await client.put(path, {"test": False}, headers=headers)
    check_status(second, 412, "Should return 412 when resource exists")


@catalog.register
async def post_slug(client: TestClient) -> None:
    """POST honours the Slug header when naming the new resource."""
    response = await client.post(
        "/",
        {"posted": True},
        headers={
            "Content-Type": "application/json",
            "Slug": unique_path("test-slug", suffix="").lstrip("/"),
        },
    )

    check_status(response, 201, "Status should be 201")
    location = require_header(response, "Location")
    client.track(path_of(client.base_url, location))
    check("test-slug" in location, "Location should include slug")


@catalog.register
async def post_container(client: TestClient) -> None:
    """POST with a BasicContainer link creates a container."""
    response = await client.post(
        "/",
        headers={
            "Slug": unique_path("test-container", suffix="").lstrip("/"),
            "Link": LDP_BASIC_CONTAINER,
        },
    )
    if response.status in (405, 501):
        raise Inapplicable("Container creation with POST is not supported")

    check_status(response, 201, "Status should be 201")
    location = require_header(response, "Location")
    client.track(path_of(client.base_url, location))
    check(location.endswith("/"), "Container URI should end with /")


@catalog.register
async def delete_resource(client: TestClient) -> None:
    """DELETE removes the resource so a later GET returns 404."""
    path = "/test-delete-resource.json"
    await client.create_resource(path, {"test": True})

    response = await client.delete(path)
    check_status(response, 204, "Status should be 204")

    verify = await client.get(path)
    check_status(verify, 404, "Resource should be deleted")


@catalog.register
async def delete_404(client: TestClient) -> None:
    """DELETE returns 404 for a resource that does not exist."""
    response = await client.delete("/nonexistent-resource.json")

    check_status(response, 404, "Status should be 404")


@catalog.register
async def options_resource(client: TestClient) -> None:
    """OPTIONS answers a CORS preflight with 204 and the CORS headers."""
    response = await client.options("/", headers={"Origin": "https://example.com"})

    check_status(response, 204, "Status should be 204")
    require_header(response, "Access-Control-Allow-Origin")
    require_header(response, "Access-Control-Allow-Methods")
