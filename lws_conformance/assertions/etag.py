"""Assertions for ETag generation and conditional requests."""

from lws_conformance.assertions._paths import unique_path
from lws_conformance.assertions.catalog import catalog
from lws_conformance.assertions.checks import check_status, require_header
from lws_conformance.client import TestClient

JSON_HEADERS = {"Content-Type": "application/json"}


@catalog.register
async def etag_generation(client: TestClient) -> None:
    """Resources carry a non-empty ETag."""
    path = "/test-etag-generation.json"
    await client.create_resource(path, {"test": True})

    response = await client.get(path)

    require_header(response, "ETag")


@catalog.register
async def if_match_success(client: TestClient) -> None:
    """PUT with a matching If-Match updates the resource."""
    path = "/test-if-match-success.json"
    await client.create_resource(path, {"version": 1})
    etag = require_header(await client.get(path), "ETag")

    response = await client.put(
        path, {"version": 2}, headers={**JSON_HEADERS, "If-Match": etag}
    )

    check_status(response, 204, "Should update with matching ETag")


@catalog.register
async def if_match_fail(client: TestClient) -> None:
    """PUT with a stale If-Match is refused with 412."""
    path = "/test-if-match-fail.json"
    await client.create_resource(path, {"version": 1})

    response = await client.put(
        path, {"version": 2}, headers={**JSON_HEADERS, "If-Match": '"wrong-etag"'}
    )

    check_status(response, 412, "Should return 412 Precondition Failed")


@catalog.register
async def if_none_match_create(client: TestClient) -> None:
    """PUT with ``If-None-Match: *`` creates a missing resource."""
    path = unique_path("test-if-none-match-create")

    response = await client.put(
        path, {"created": True}, headers={**JSON_HEADERS, "If-None-Match": "*"}
    )
    if response.status == 201:
        client.track(path)

    check_status(response, 201, "Should create with If-None-Match: *")


@catalog.register
async def if_none_match_prevent(client: TestClient) -> None:
    """PUT with ``If-None-Match: *`` does not overwrite an existing resource."""
    path = "/test-if-none-match-prevent.json"
    await client.create_resource(path, {"exists": True})

    response = await client.put(
        path, {"overwrite": True}, headers={**JSON_HEADERS, "If-None-Match": "*"}
    )

    check_status(response, 412, "Should return 412 when resource exists")
