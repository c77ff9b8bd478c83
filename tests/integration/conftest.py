"""Fixtures for integration tests."""

import shlex
import socket
import sys
import textwrap
from collections.abc import AsyncGenerator, Callable
from pathlib import Path

import pytest
from aiohttp import web

from lws_conformance.testing.subject import InMemorySubject, RunningSubject

SUBJECT_SCRIPT = textwrap.dedent(
    """
    import http.server
    import signal
    import sys
    import time

    port, delay, mode = int(sys.argv[1]), float(sys.argv[2]), sys.argv[3]
    if mode == "ignore-term":
        signal.signal(signal.SIGTERM, signal.SIG_IGN)
    print("subject booting", flush=True)
    if mode == "crash":
        sys.exit(3)
    time.sleep(delay)


    class Handler(http.server.BaseHTTPRequestHandler):
        def do_GET(self):
            self.send_response(200)
            self.end_headers()
            self.wfile.write(b"ok")

        def log_message(self, format, *args):
            pass


    http.server.HTTPServer(("127.0.0.1", port), Handler).serve_forever()
    """
)

type SubjectCommand = Callable[..., list[str]]


@pytest.fixture
def free_port() -> int:
    """Return a TCP port that is currently unused on the loopback interface."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def subject_command(tmp_path: Path) -> SubjectCommand:
    """Return a function building the command line of a scripted subject.

    The subject sleeps for ``delay`` seconds before serving ``GET`` with 200.
    ``mode`` is ``"normal"``, ``"ignore-term"`` or ``"crash"`` (exit code 3).
    With ``wrapped`` the subject runs as a background child of a shell that
    ignores SIGTERM, like a server started through a launcher script.
    """
    script = tmp_path / "subject.py"
    script.write_text(SUBJECT_SCRIPT)

    def _command(
        port: int, *, delay: float = 0.0, mode: str = "normal", wrapped: bool = False
    ) -> list[str]:
        command = [sys.executable, str(script), str(port), str(delay), mode]
        if wrapped:
            return ["sh", "-c", f"trap '' TERM; {shlex.join(command)} & wait"]
        return command

    return _command


@pytest.fixture
async def running_subject(
    request: pytest.FixtureRequest, free_port: int
) -> AsyncGenerator[RunningSubject, None]:
    """Serve an in-memory subject; parametrize indirectly to disable ETags."""
    subject = InMemorySubject(etags=getattr(request, "param", True))
    runner = web.AppRunner(subject.application())
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", free_port)
    await site.start()
    try:
        yield RunningSubject(subject=subject, base_url=f"http://127.0.0.1:{free_port}")
    finally:
        await runner.cleanup()
