"""Lifecycle management for the subject server under test."""

import asyncio
import contextlib
import enum
import logging
import os
import signal
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

import aiohttp

from lws_conformance.context import RunContext
from lws_conformance.errors import (
    HealthCheckError,
    StartupTimeout,
    SubjectLaunchError,
)
from lws_conformance.models.config import RunConfig

log = logging.getLogger(__name__)

POLL_INTERVAL = 0.2
GRACE_PERIOD = 5.0
DRAIN_CHUNK_SIZE = 65536
KILL_WAIT = 0.5


class ServerState(enum.StrEnum):
    """Lifecycle states of the subject server."""

    NOT_STARTED = "not-started"
    STARTING = "starting"
    READY = "ready"
    FAILED = "failed"
    STOPPING = "stopping"
    STOPPED = "stopped"


@dataclass(frozen=True, kw_only=True)
class ProcessHandle:
    """A spawned subject process together with its background tasks."""

    process: asyncio.subprocess.Process
    exited: asyncio.Future[int]
    drains: tuple[asyncio.Task[None], ...]

    async def close(self) -> None:
        """Cancel the background tasks owned by this handle."""
        tasks = [*self.drains, self.exited]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)


@dataclass(kw_only=True)
class SubjectServer:
    """Starts, health-checks and stops the subject implementation.

    A managed subject is spawned as a child process and owned by this object
    until ``stop()``. An external subject is only checked once for liveness.
    """

    config: RunConfig
    context: RunContext
    poll_interval: float = POLL_INTERVAL
    grace_period: float = GRACE_PERIOD
    state: ServerState = field(default=ServerState.NOT_STARTED, init=False)
    _handle: ProcessHandle | None = field(default=None, init=False, repr=False)

    async def start(self) -> None:
        """Bring the subject to the ready state.

        Raises:
            HealthCheckError: If an external subject fails its health check
            SubjectLaunchError: If the managed subject cannot be spawned
            StartupTimeout: If a managed subject is not healthy in time

        """
        self.state = ServerState.STARTING

        async with aiohttp.ClientSession() as session:
            if not self.config.is_managed:
                await self._check_external(session)
            else:
                await self._start_managed(session)

        self.state = ServerState.READY

    async def _check_external(self, session: aiohttp.ClientSession) -> None:
        health = self.config.server.health_check
        log.info("Checking external subject at %s", health.url)

        timeout = aiohttp.ClientTimeout(
            total=self.config.server.startup_timeout_ms / 1000
        )
        try:
            async with session.get(health.url, timeout=timeout) as response:
                status = response.status
        except (aiohttp.ClientError, TimeoutError) as e:
            self.state = ServerState.FAILED
            raise HealthCheckError(
                f"Health check failed for external server at {health.url}: {e}"
            ) from e

        if status != health.expected_status:
            self.state = ServerState.FAILED
            raise HealthCheckError(
                f"Health check failed for external server at {health.url}: "
                f"expected status {health.expected_status}, got {status}"
            )

        log.info("External server health check passed")

    async def _start_managed(self, session: aiohttp.ClientSession) -> None:
        spec = self.config.server
        command = [spec.command or "", *spec.args]
        log.info("Starting server: %s", " ".join(command))

        self._handle = await self._spawn(command, spec.env)

        timeout = spec.startup_timeout_ms / 1000
        if not await self._wait_for_health(session, timeout):
            await self.stop()
            self.state = ServerState.FAILED
            raise StartupTimeout(
                f"Server failed to start within {spec.startup_timeout_ms}ms"
            )

        log.info("Server started successfully")

    async def _spawn(
        self, command: Sequence[str], env: Mapping[str, str]
    ) -> ProcessHandle:
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                env={**os.environ, **env},
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except OSError as e:
            self.state = ServerState.FAILED
            raise SubjectLaunchError(
                f"Cannot launch server {command[0]!r}: {e}"
            ) from e
        assert process.stdout is not None
        assert process.stderr is not None

        exited = asyncio.ensure_future(process.wait())
        exited.add_done_callback(_log_exit)

        drains = (
            asyncio.create_task(self._drain(process.stdout, "server")),
            asyncio.create_task(self._drain(process.stderr, "server error")),
        )
        return ProcessHandle(process=process, exited=exited, drains=drains)

    async def _drain(self, stream: asyncio.StreamReader, label: str) -> None:
        """Consume a child output stream so the child never blocks on a full pipe."""
        level = logging.INFO if self.context.verbose else logging.DEBUG
        while chunk := await stream.read(DRAIN_CHUNK_SIZE):
            for line in chunk.decode(errors="replace").splitlines():
                log.log(level, "[%s] %s", label, line)

    async def _wait_for_health(
        self, session: aiohttp.ClientSession, timeout: float
    ) -> bool:
        """Poll the health endpoint until it answers or the timeout elapses."""
        health = self.config.server.health_check
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout

        while (remaining := deadline - loop.time()) > 0:
            check_timeout = aiohttp.ClientTimeout(total=remaining)
            try:
                async with session.get(health.url, timeout=check_timeout) as response:
                    if response.status == health.expected_status:
                        return True
                    log.debug("Health check returned %d", response.status)
            except (aiohttp.ClientError, TimeoutError) as e:
                log.debug("Server not ready yet: %s", e)

            await asyncio.sleep(min(self.poll_interval, max(deadline - loop.time(), 0)))

        return False

    async def stop(self) -> None:
        """Terminate the owned subject process, escalating to a kill.

        Does nothing when no process is owned. Never raises.
        """
        handle, self._handle = self._handle, None
        if handle is None:
            return

        self.state = ServerState.STOPPING
        log.info("Stopping server...")
        process = handle.process

        if process.returncode is None:
            _signal_group(process, signal.SIGTERM)
            try:
                await asyncio.wait_for(asyncio.shield(handle.exited), self.grace_period)
            except TimeoutError:
                log.warning(
                    "Server did not exit within %.1fs, killing it", self.grace_period
                )
                _signal_group(process, signal.SIGKILL)
                with contextlib.suppress(TimeoutError):
                    await asyncio.wait_for(asyncio.shield(handle.exited), KILL_WAIT)

        await handle.close()
        self.state = ServerState.STOPPED
        log.info("Server stopped")


def _log_exit(exited: asyncio.Future[int]) -> None:
    if exited.cancelled() or exited.exception() is not None:
        return
    code = exited.result()
    # Negative codes are signal terminations, expected during stop().
    if code > 0:
        log.error("Server process exited with code %d", code)


def _signal_group(process: asyncio.subprocess.Process, sig: signal.Signals) -> None:
    """Signal the subject and every process it started.

    The subject runs in its own session, so its pid is also its process group.
    """
    with contextlib.suppress(ProcessLookupError):
        os.killpg(process.pid, sig)
