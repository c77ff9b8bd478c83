"""Ordered teardown of everything a run created."""

import asyncio
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from lws_conformance.client import TestClient
from lws_conformance.server import SubjectServer

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class CleanupCoordinator:
    """Deletes client fixtures, stops the subject, then removes scratch data.

    The order is fixed: fixtures can only be deleted while the subject is
    still reachable, and the data directory may only be removed once the
    subject no longer writes to it. ``run()`` is safe to call repeatedly.
    """

    client: TestClient
    server: SubjectServer
    data_directory: Path | None = None

    async def run(self) -> None:
        if self.client.created_resources:
            log.info(
                "Deleting %d resource(s) created during the run",
                len(self.client.created_resources),
            )
        await self.client.cleanup()

        await self.server.stop()

        if self.data_directory is not None and self.data_directory.exists():
            log.info("Removing data directory %s", self.data_directory)
            await asyncio.to_thread(
                shutil.rmtree, self.data_directory, ignore_errors=True
            )
