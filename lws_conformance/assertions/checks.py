"""Helpers for writing assertion bodies."""

from lws_conformance.client import HttpResponse
from lws_conformance.errors import AssertionFailure


def check(condition: object, message: str) -> None:
    """Fail the current test with ``message`` unless ``condition`` holds."""
    if not condition:
        raise AssertionFailure(message)


def check_status(response: HttpResponse, expected: int, message: str) -> None:
    """Fail unless the response has the expected status code."""
    if response.status != expected:
        raise AssertionFailure(
            f"{message} (expected {expected}, got {response.status})"
        )


def require_header(response: HttpResponse, name: str) -> str:
    """Return a response header, failing when it is missing or empty."""
    value = response.headers.get(name)
    if not value:
        raise AssertionFailure(f"Should have {name} header")
    return value
