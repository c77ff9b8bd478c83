"""Static catalog of assertion implementations.

Assertion modules register their functions with ``catalog.register`` at import
time. Each function is addressed by ``"<module>:<function>"`` relative to the
assertions package, which is the form manifests use in
``lws:testImplementation``.
"""

import logging
from collections.abc import Awaitable, Callable, Iterator, Mapping, Sequence

from lws_conformance.client import TestClient
from lws_conformance.models.test_case import TestCase

log = logging.getLogger(__name__)

type AssertionFn = Callable[[TestClient], Awaitable[None]]

PACKAGE_PREFIX = "lws_conformance.assertions."


class AssertionCatalog(Mapping[str, AssertionFn]):
    """Mapping of implementation references to assertion functions."""

    def __init__(self) -> None:
        self._entries: dict[str, AssertionFn] = {}

    def register(self, fn: AssertionFn) -> AssertionFn:
        """Add an assertion function under its module-relative reference."""
        ref = reference_for(fn)
        if ref in self._entries:
            raise ValueError(f"Assertion {ref!r} is already registered")
        self._entries[ref] = fn
        return fn

    def __getitem__(self, ref: str) -> AssertionFn:
        return self._entries[ref]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def reference_for(fn: AssertionFn) -> str:
    """Return the catalog reference for an assertion function."""
    module = fn.__module__.removeprefix(PACKAGE_PREFIX)
    return f"{module}:{fn.__name__}"


def build_registry(
    tests: Sequence[TestCase], catalog: Mapping[str, AssertionFn]
) -> dict[str, AssertionFn]:
    """Bind each test id to its assertion before execution starts.

    Tests whose implementation is not in the catalog are left out; the
    executor reports them as failed. A repeated test id keeps the binding of
    its first occurrence.
    """
    registry: dict[str, AssertionFn] = {}
    for test in tests:
        if (fn := catalog.get(test.implementation)) is None:
            log.warning(
                "No assertion registered for test %s (%s)",
                test.id,
                test.implementation,
            )
            continue
        if test.id in registry:
            log.warning("Duplicate test id %s, keeping its first binding", test.id)
            continue
        registry[test.id] = fn
    return registry


catalog = AssertionCatalog()
