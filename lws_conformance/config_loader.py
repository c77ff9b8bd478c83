"""Load run configuration files for conformance subjects."""

import asyncio
import logging
from pathlib import Path

from pydantic import ValidationError

from lws_conformance.context import RunContext
from lws_conformance.errors import ConfigLoadError
from lws_conformance.models.config import RunConfig

log = logging.getLogger(__name__)


def default_config_path(context: RunContext, subject: str) -> Path:
    """Return the conventional config location for a subject."""
    return context.resolve(Path("config") / f"{subject}.config.json")


async def load_run_config(
    context: RunContext,
    subject: str,
    config_path: Path | None = None,
) -> RunConfig:
    """Load and validate the configuration for a subject.

    Args:
        context: Run context used to resolve relative paths
        subject: Subject name, used to locate the default config file
        config_path: Explicit config file overriding the default location

    Returns:
        Validated run configuration

    Raises:
        ConfigLoadError: If the file is missing, unreadable or invalid

    """
    path = (
        context.resolve(config_path)
        if config_path is not None
        else default_config_path(context, subject)
    )
    log.info("Loading configuration from %s", path)

    try:
        content = await asyncio.to_thread(path.read_text, encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigLoadError(f"Config file not found: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigLoadError(f"Cannot read config file {path}: {e}") from e

    try:
        return RunConfig.model_validate_json(content)
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid config file {path}: {e}") from e
