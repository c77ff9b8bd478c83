"""Test factories for generating test data."""

from typing import Any

from polyfactory import Use
from polyfactory.factories import DataclassFactory
from polyfactory.factories.pydantic_factory import ModelFactory

from lws_conformance.models.config import RunConfig
from lws_conformance.models.result import TestResult
from lws_conformance.models.test_case import TestCase


class TestCaseFactory(ModelFactory[TestCase]):
    """Factory for TestCase."""

    __test__ = False

    category = "General"
    conformance_level = "MUST"


class TestResultFactory(DataclassFactory[TestResult]):
    """Factory for TestResult."""

    __test__ = False
    __model__ = TestResult

    test = Use(TestCaseFactory.build)
    outcome = "passed"
    error = None


def build_run_config(**overrides: Any) -> RunConfig:
    """Build an external-subject config as it would appear in a config file."""
    data: dict[str, Any] = {
        "name": "test-subject",
        "version": "1.0.0",
        "homepage": "https://example.com/test-subject",
        "baseUrl": "http://localhost:4000",
        "type": "external",
        "server": {
            "startupTimeout": 2000,
            "healthCheck": {
                "url": "http://localhost:4000/health",
                "expectedStatus": 200,
            },
        },
    }
    data.update(overrides)
    return RunConfig.model_validate(data)
