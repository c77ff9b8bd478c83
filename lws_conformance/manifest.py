"""Parse W3C test-manifest Turtle documents into test cases."""

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError
from rdflib import Graph, Namespace
from rdflib.collection import Collection
from rdflib.namespace import RDFS
from rdflib.plugins.parsers.notation3 import BadSyntax
from rdflib.term import Node

from lws_conformance.errors import ManifestError
from lws_conformance.models.test_case import DEFAULT_CATEGORY, TestCase

log = logging.getLogger(__name__)

MF = Namespace("http://www.w3.org/2001/sw/DataAccess/tests/test-manifest#")
LWS = Namespace("https://w3c.github.io/lws-protocol/test-vocab#")


class ManifestParser:
    """Reads a root manifest and the manifests it includes.

    Entries are returned in document order: the root manifest's entries first,
    then those of each included manifest in the order of its ``mf:include``
    list. Included manifests are resolved by file name next to the root.
    Test ids must be unique across manifests; later duplicates are dropped.
    """

    def __init__(self, manifest_path: Path) -> None:
        self.manifest_path = manifest_path

    async def parse(self) -> Sequence[TestCase]:
        """Parse the manifests.

        Raises:
            ManifestError: If a manifest is missing or is not valid Turtle

        """
        return await asyncio.to_thread(self._parse)

    def _parse(self) -> list[TestCase]:
        root = self._load(self.manifest_path)
        graphs = [root]

        for include_list in root.objects(None, MF.include):
            for item in Collection(root, include_list):
                filename = str(item).rsplit("/", 1)[-1]
                graphs.append(self._load(self.manifest_path.parent / filename))

        tests: dict[str, TestCase] = {}
        for graph in graphs:
            for entries in graph.objects(None, MF.entries):
                for node in Collection(graph, entries):
                    if (test := self._extract_test(graph, node)) is None:
                        continue
                    if test.id in tests:
                        log.warning(
                            "Duplicate test id %s at %s, skipping", test.id, node
                        )
                        continue
                    tests[test.id] = test

        log.info("Loaded %d test(s) from %d manifest(s)", len(tests), len(graphs))
        return list(tests.values())

    def _load(self, path: Path) -> Graph:
        if not path.is_file():
            raise ManifestError(f"Manifest not found: {path}")

        graph = Graph()
        try:
            graph.parse(path, format="turtle", publicID=path.resolve().as_uri())
        except (OSError, UnicodeDecodeError, BadSyntax) as e:
            raise ManifestError(f"Cannot parse manifest {path}: {e}") from e
        return graph

    def _extract_test(self, graph: Graph, node: Node) -> TestCase | None:
        def value(predicate: Node) -> str | None:
            obj = graph.value(node, predicate)
            return str(obj) if obj is not None else None

        uri = str(node)
        test_id = uri.split("#", 1)[1] if "#" in uri else uri

        implementation = value(LWS.testImplementation)
        if not implementation:
            log.warning("Test %s has no implementation", test_id)
            return None

        try:
            return TestCase(
                id=test_id,
                name=value(MF.name) or test_id,
                comment=value(RDFS.comment),
                spec_section=value(LWS.specSection),
                conformance_level=(value(LWS.conformanceLevel) or "MUST").upper(),
                category=value(LWS.category) or DEFAULT_CATEGORY,
                implementation=implementation,
            )
        except ValidationError as e:
            log.warning("Skipping invalid test %s: %s", test_id, e)
            return None
