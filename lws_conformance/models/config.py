"""Models for the per-subject run configuration file."""

from collections.abc import Mapping, Sequence
from typing import Literal

from pydantic import AliasChoices, Field, SecretStr, model_validator

from lws_conformance.models.base import ConfigModel


class HealthCheck(ConfigModel):
    """Check used to decide whether the subject is ready."""

    url: str
    expected_status: int = 200


class ServerSpec(ConfigModel):
    """How to launch (or reach) the subject server."""

    command: str | None = None
    args: Sequence[str] = Field(default_factory=list)
    env: Mapping[str, str] = Field(default_factory=dict)
    startup_timeout_ms: int = Field(
        default=30_000,
        gt=0,
        validation_alias=AliasChoices(
            "startupTimeout", "startupTimeoutMs", "startup_timeout_ms"
        ),
    )
    health_check: HealthCheck


class Authentication(ConfigModel):
    """Credentials attached to every request made by the test client."""

    type: Literal["bearer", "cookie"]
    token: SecretStr | None = None
    cookie: SecretStr | None = None

    def headers(self) -> dict[str, str]:
        """Return the request headers carrying these credentials."""
        if self.type == "bearer" and self.token is not None:
            return {"Authorization": f"Bearer {self.token.get_secret_value()}"}
        if self.type == "cookie" and self.cookie is not None:
            return {"Cookie": self.cookie.get_secret_value()}
        return {}


class CleanupSpec(ConfigModel):
    """Scratch storage removed once the subject has stopped."""

    data_directory: str | None = None


class RunConfig(ConfigModel):
    """Configuration for one conformance run against one subject."""

    subject_name: str = Field(
        validation_alias=AliasChoices("name", "subjectName", "subject_name")
    )
    version: str | None = None
    homepage: str | None = None
    base_url: str
    type: Literal["managed", "external"] = "external"
    authentication: Authentication | None = None
    server: ServerSpec
    cleanup: CleanupSpec = Field(default_factory=CleanupSpec)

    @property
    def is_managed(self) -> bool:
        """Whether the harness owns the subject process."""
        return self.type == "managed"

    @model_validator(mode="after")
    def _require_command_when_managed(self) -> "RunConfig":
        if self.is_managed and not self.server.command:
            raise ValueError("server.command is required for managed subjects")
        return self
