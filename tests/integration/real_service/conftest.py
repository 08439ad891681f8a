"""Shared live-server runner for real-service integration tests."""

from __future__ import annotations

from collections.abc import Generator
from collections.abc import Mapping
from contextlib import contextmanager
from dataclasses import dataclass
import os
from pathlib import Path
import socket
import subprocess
import sys
import time

import httpx
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[3]


@dataclass(frozen=True, slots=True)
class LiveServer:
    """Endpoints for one launched coordinator process."""

    base_url: str
    ws_base_url: str


def _pick_free_port() -> int:
    """Reserve a free localhost TCP port for the live test server."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return int(sock.getsockname()[1])


def _wait_for_server_ready(*, base_url: str, process: subprocess.Popen[str], timeout_seconds: float) -> None:
    """Poll /health until the live server starts accepting requests."""
    deadline = time.monotonic() + timeout_seconds
    while time.monotonic() < deadline:
        if process.poll() is not None:
            raise RuntimeError("uvicorn exited before becoming ready")

        try:
            response = httpx.get(f"{base_url}/health", timeout=0.3, trust_env=False)
            if response.status_code == 200:
                return
        except httpx.HTTPError:
            pass

        time.sleep(0.1)

    raise RuntimeError("uvicorn did not become ready before timeout")


@contextmanager
def run_live_server(
    *,
    env_overrides: Mapping[str, str] | None = None,
    startup_timeout_seconds: float = 10.0,
) -> Generator[LiveServer, None, None]:
    """Launch uvicorn and yield HTTP/WS endpoints for the test duration."""
    port = _pick_free_port()
    base_url = f"http://127.0.0.1:{port}"
    ws_base_url = f"ws://127.0.0.1:{port}"

    env = os.environ.copy()
    if env_overrides:
        env.update(env_overrides)

    process = subprocess.Popen(
        [
            sys.executable,
            "-m",
            "uvicorn",
            "roomcoord.main:app",
            "--host",
            "127.0.0.1",
            "--port",
            str(port),
            "--log-level",
            "warning",
        ],
        cwd=str(PROJECT_ROOT),
        env=env,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        text=True,
    )

    _wait_for_server_ready(base_url=base_url, process=process, timeout_seconds=startup_timeout_seconds)

    try:
        yield LiveServer(base_url=base_url, ws_base_url=ws_base_url)
    finally:
        process.terminate()
        try:
            process.wait(timeout=5)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait(timeout=5)


@pytest.fixture
def live_server() -> Generator[LiveServer, None, None]:
    """Start one real uvicorn process per test case."""
    with run_live_server(
        env_overrides={
            "ROOMCOORD_START_GRACE_SECONDS": "0.2",
            "ROOMCOORD_HEARTBEAT_INTERVAL_SECONDS": "1",
            "ROOMCOORD_HEARTBEAT_PONG_TIMEOUT_SECONDS": "0.5",
            "ROOMCOORD_HEARTBEAT_MAX_MISSED_PONGS": "2",
        },
    ) as server:
        yield server
