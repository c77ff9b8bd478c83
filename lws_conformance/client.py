"""HTTP client used by assertion bodies to exercise the subject."""

import json
import logging
from collections.abc import AsyncGenerator, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

import aiohttp
from multidict import CIMultiDictProxy

from lws_conformance.context import RunContext
from lws_conformance.errors import AssertionFailure
from lws_conformance.models.config import RunConfig

log = logging.getLogger(__name__)

type Body = str | bytes | Mapping[str, Any] | list[Any] | None


@dataclass(frozen=True, kw_only=True)
class HttpResponse:
    """A fully read response from the subject."""

    status: int
    headers: CIMultiDictProxy[str]
    body: bytes
    url: str

    def text(self) -> str:
        """Decode the body as UTF-8."""
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Decode the body as JSON."""
        return json.loads(self.body)


@dataclass(kw_only=True)
class TestClient:
    """Issues requests against the subject and tracks created fixtures."""

    __test__ = False

    base_url: str
    session: aiohttp.ClientSession = field(repr=False)
    context: RunContext = field(default_factory=RunContext)
    created_resources: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: RunConfig, context: RunContext
    ) -> AsyncGenerator["TestClient", None]:
        """Create a client with managed session lifecycle."""
        headers = config.authentication.headers() if config.authentication else {}
        async with aiohttp.ClientSession(headers=headers) as session:
            yield cls(base_url=config.base_url, session=session, context=context)

    async def get(self, path: str, **kwargs: Any) -> HttpResponse:
        return await self.request("GET", path, **kwargs)

    async def put(self, path: str, body: Body = None, **kwargs: Any) -> HttpResponse:
        return await self.request("PUT", path, body=body, **kwargs)

    async def post(self, path: str, body: Body = None, **kwargs: Any) -> HttpResponse:
        return await self.request("POST", path, body=body, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> HttpResponse:
        return await self.request("DELETE", path, **kwargs)

    async def head(self, path: str, **kwargs: Any) -> HttpResponse:
        return await self.request("HEAD", path, **kwargs)

    async def options(self, path: str, **kwargs: Any) -> HttpResponse:
        return await self.request("OPTIONS", path, **kwargs)

    async def request(
        self,
        method: str,
        path: str,
        body: Body = None,
        headers: Mapping[str, str] | None = None,
    ) -> HttpResponse:
        """Send a request to ``base_url + path`` and read the whole response.

        Mapping and list bodies are JSON-encoded and default to an
        ``application/json`` content type.
        """
        url = self.base_url + path
        request_headers = dict(headers or {})

        data: str | bytes | None
        if isinstance(body, Mapping | list):
            data = json.dumps(body)
            request_headers.setdefault("Content-Type", "application/json")
        else:
            data = body

        if self.context.verbose:
            log.info("%s %s", method, url)

        async with self.session.request(
            method, url, data=data, headers=request_headers, allow_redirects=False
        ) as response:
            payload = await response.read()
            result = HttpResponse(
                status=response.status,
                headers=response.headers,
                body=payload,
                url=url,
            )

        if self.context.verbose:
            log.info("Response: %d", result.status)

        return result

    async def create_resource(
        self,
        path: str,
        content: Body,
        content_type: str = "application/json",
    ) -> str:
        """Create a fixture with PUT and track it for cleanup.

        Returns:
            The ``Location`` header, or the resource URL when absent

        Raises:
            AssertionFailure: If the subject does not answer 201 or 204

        """
        if isinstance(content, Mapping | list):
            content = json.dumps(content)

        response = await self.put(
            path, content, headers={"Content-Type": content_type}
        )
        if response.status not in (201, 204):
            raise AssertionFailure(f"Failed to create resource: {response.status}")

        self.track(path)
        return response.headers.get("Location", self.base_url + path)

    def track(self, path: str) -> None:
        """Record a resource created on the subject so cleanup deletes it."""
        if path not in self.created_resources:
            self.created_resources.append(path)

    async def cleanup(self) -> None:
        """Delete every tracked resource, continuing past failures."""
        for path in self.created_resources:
            try:
                response = await self.delete(path)
            except (aiohttp.ClientError, TimeoutError) as e:
                log.warning("Failed to delete %s during cleanup: %s", path, e)
                continue
            if response.status >= 400 and response.status != 404:
                log.warning(
                    "Failed to delete %s during cleanup: status %d",
                    path,
                    response.status,
                )
        self.created_resources.clear()
