"""Protocol assertions run against the subject.

Importing this package registers every bundled assertion in ``catalog``.
"""

from lws_conformance.assertions import containers, etag, headers, http_methods
from lws_conformance.assertions.catalog import (
    AssertionCatalog,
    AssertionFn,
    build_registry,
    catalog,
)

__all__ = [
    "AssertionCatalog",
    "AssertionFn",
    "build_registry",
    "catalog",
    "containers",
    "etag",
    "headers",
    "http_methods",
]
