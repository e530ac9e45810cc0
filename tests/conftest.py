"""
Shared fixtures: the ASGI client and a fake yt-dlp.

yt-dlp is never executed. `SubprocessExecutor.run` and
`SubprocessExecutor.spawn` are replaced with fakes whose pipes are plain
`asyncio.StreamReader` objects.
"""

import asyncio
import itertools
import json
import os
from typing import Any, Callable, Dict, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient

from mediavault.main import app
from mediavault.services.ytdlp import CompletedProcess, SubprocessExecutor


class FakeProcess:
    """Stands in for asyncio.subprocess.Process"""

    _pids = itertools.count(900000)

    def __init__(
        self,
        stdout: bytes = b"",
        stderr: bytes = b"",
        returncode: int = 0,
        hang: bool = False,
    ):
        self.stdout = asyncio.StreamReader()
        self.stderr = asyncio.StreamReader()
        if stdout:
            self.stdout.feed_data(stdout)
        if stderr:
            self.stderr.feed_data(stderr)

        self.pid = next(self._pids)
        self.returncode: Optional[int] = None
        self.killed = False
        self._exit_code = returncode
        self._exited = asyncio.Event()

        # A hanging process keeps its pipes open until killed
        if not hang:
            self._finish()

    def _finish(self) -> None:
        self.stdout.feed_eof()
        self.stderr.feed_eof()
        self._exited.set()

    def kill(self) -> None:
        self.killed = True
        self._exit_code = -9
        self._finish()

    async def wait(self) -> int:
        await self._exited.wait()
        self.returncode = self._exit_code
        return self.returncode


class FakeYtDlp:
    """Records invocations and answers them like yt-dlp would"""

    def __init__(self):
        self.metadata: Any = None
        self.info_returncode = 0
        self.info_stderr = b""
        self.version = b"2025.01.01\n"
        self.process_factory: Callable[[], FakeProcess] = lambda: FakeProcess(stdout=b"media-bytes")
        self.spawn_error: Optional[Exception] = None
        self.run_calls: List[List[str]] = []
        self.spawn_calls: List[List[str]] = []
        self.processes: List[FakeProcess] = []

    @property
    def calls(self) -> List[List[str]]:
        return self.run_calls + self.spawn_calls

    async def run(self, cmd: List[str], timeout: Optional[float] = None) -> CompletedProcess:
        self.run_calls.append(cmd)
        if "--version" in cmd:
            return CompletedProcess(returncode=0, stdout=self.version, stderr=b"")

        if isinstance(self.metadata, bytes):
            stdout = self.metadata
        else:
            stdout = json.dumps(self.metadata).encode()
        return CompletedProcess(returncode=self.info_returncode, stdout=stdout, stderr=self.info_stderr)

    async def spawn(self, cmd: List[str]) -> FakeProcess:
        self.spawn_calls.append(cmd)
        if self.spawn_error is not None:
            raise self.spawn_error
        process = self.process_factory()
        self.processes.append(process)
        return process


def sample_metadata() -> Dict[str, Any]:
    return {
        "id": "abc123",
        "title": "Test Video",
        "duration": 120,
        "thumbnail": "https://i.ytimg.com/vi/abc123/hqdefault.jpg",
        "uploader": "Test Uploader",
        "channel": "Test Channel",
        "description": "A short description",
        "view_count": 1500,
        "like_count": 10,
        "formats": [
            {"format_id": "139", "ext": "m4a", "vcodec": "none", "acodec": "mp4a.40.5", "filesize": 1000},
            {"format_id": "18", "ext": "mp4", "vcodec": "avc1.42001E", "acodec": "mp4a.40.2",
             "format_note": "360p", "height": 360, "filesize": 5242880},
            {"format_id": "22", "ext": "mp4", "vcodec": "avc1.64001F", "acodec": "mp4a.40.2", "height": 720},
            {"format_id": "137", "ext": "mp4", "vcodec": "avc1.640028", "acodec": "none", "height": 1080},
            {"format_id": "43", "ext": "webm", "vcodec": "vp8.0", "acodec": "vorbis",
             "format_note": "medium", "filesize": 1234567},
        ],
    }


@pytest.fixture
def metadata() -> Dict[str, Any]:
    """yt-dlp --dump-single-json document with three muxed formats"""
    return sample_metadata()


@pytest.fixture
def ytdlp(monkeypatch, metadata) -> FakeYtDlp:
    fake = FakeYtDlp()
    fake.metadata = metadata
    monkeypatch.setattr(SubprocessExecutor, "run", fake.run)
    monkeypatch.setattr(SubprocessExecutor, "spawn", fake.spawn)
    return fake


@pytest.fixture
def client() -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.fixture(autouse=True)
def killed_groups(monkeypatch) -> List[int]:
    """Fake pids must never reach the real os.killpg"""
    groups: List[int] = []

    def killpg(pgid: int, sig: int) -> None:
        groups.append(pgid)

    monkeypatch.setattr(os, "killpg", killpg, raising=False)
    return groups
