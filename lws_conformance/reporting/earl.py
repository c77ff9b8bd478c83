"""EARL 1.0 conformance reports serialized as Turtle."""

from dataclasses import dataclass

from rdflib import BNode, Graph, Literal, Namespace, URIRef
from rdflib.namespace import DCTERMS, DOAP, RDF, XSD

from lws_conformance.reporting.base import ReportSink

EARL = Namespace("http://www.w3.org/ns/earl#")
SCHEMA = Namespace("http://schema.org/")

HARNESS_NAME = "LWS Protocol Test Suite"
HARNESS_HOMEPAGE = "https://github.com/linkedwebstorage/test-suite"
TEST_BASE = "https://w3c.github.io/lws-protocol/tests#"


@dataclass(kw_only=True)
class EarlReporter(ReportSink):
    """Describes each result as an ``earl:Assertion`` about the subject."""

    subject_name: str
    subject_url: str | None = None
    version: str | None = None

    def build_graph(self) -> Graph:
        graph = Graph()
        graph.bind("earl", EARL)
        graph.bind("doap", DOAP)
        graph.bind("dc", DCTERMS)
        graph.bind("xsd", XSD)

        harness = BNode()
        graph.add((harness, RDF.type, EARL.Software))
        graph.add((harness, RDF.type, DOAP.Project))
        graph.add((harness, DOAP.name, Literal(HARNESS_NAME)))
        graph.add((harness, DOAP.homepage, URIRef(HARNESS_HOMEPAGE)))

        subject = BNode()
        graph.add((subject, RDF.type, EARL.TestSubject))
        graph.add((subject, RDF.type, DOAP.Project))
        graph.add((subject, DOAP.name, Literal(self.subject_name)))
        if self.subject_url:
            graph.add((subject, DOAP.homepage, URIRef(self.subject_url)))
        if self.version:
            release = BNode()
            graph.add((subject, DOAP.release, release))
            graph.add((release, DOAP.revision, Literal(self.version)))

        for result in self.results:
            assertion = BNode()
            graph.add((assertion, RDF.type, EARL.Assertion))
            graph.add((assertion, EARL.assertedBy, harness))
            graph.add((assertion, EARL.subject, subject))
            graph.add((assertion, EARL.test, URIRef(TEST_BASE + result.test.id)))

            outcome = BNode()
            graph.add((assertion, EARL.result, outcome))
            graph.add((outcome, RDF.type, EARL.TestResult))
            graph.add((outcome, EARL.outcome, EARL[result.outcome]))
            graph.add((outcome, DCTERMS.date, Literal(result.timestamp)))
            duration = Literal(result.duration_ms, datatype=XSD.integer)
            graph.add((outcome, SCHEMA.duration, duration))
            if result.error:
                graph.add((outcome, DCTERMS.description, Literal(result.error)))

        return graph

    def render(self) -> str:
        return self.build_graph().serialize(format="turtle")
