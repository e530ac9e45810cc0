import asyncio
import os
import signal
from typing import AsyncIterator, List, NamedTuple, Optional
from collections import deque
from contextlib import suppress
from mediavault.config.settings import config
from mediavault.core.errors import StreamAborted
from mediavault.models.internal import UpstreamError
from mediavault.services.ytdlp import SubprocessExecutor

STDERR_SETTLE_SECONDS = 5.0


class MediaStream:
    """
    A running yt-dlp process whose stdout is the response body.

    Owns the process and its pipes: `aclose()` kills the process (and its
    process group when it leads one) if it is still running, reaps it and
    stops the stderr drain. `iter_chunks()` always ends in `aclose()`,
    including when the consumer is cancelled because the client went away.
    """

    def __init__(
        self,
        process: asyncio.subprocess.Process,
        chunk_size: int,
        stderr_max_lines: int,
        process_group: bool = False
    ):
        self.process = process
        self.process_group = process_group
        self.chunk_size = chunk_size
        self._stderr_lines = deque(maxlen=stderr_max_lines)
        self._stderr_task = asyncio.create_task(self._drain_stderr())
        self._pending = b""
        self._closed = False

    async def _drain_stderr(self) -> None:
        """Drain stderr to prevent buffer deadlock"""
        while True:
            try:
                line = await self.process.stderr.readline()
            except ValueError:
                # line longer than the pipe buffer limit
                self._stderr_lines.append("[stderr line truncated]")
                continue
            if not line:
                break
            self._stderr_lines.append(line.decode(errors="replace").rstrip())

    @property
    def stderr_summary(self) -> str:
        return "\n".join(line for line in self._stderr_lines if line)

    async def _settle_stderr(self) -> None:
        """Wait briefly for the stderr pipe to hit EOF after the process exits"""
        with suppress(asyncio.TimeoutError):
            await asyncio.wait_for(asyncio.shield(self._stderr_task), timeout=STDERR_SETTLE_SECONDS)

    def _failure_message(self, returncode: int) -> str:
        summary = self.stderr_summary
        return summary[-500:] if summary else f"yt-dlp exited with code {returncode}"

    async def prime(self) -> Optional[UpstreamError]:
        """
        Read the first chunk before any header is sent, so a yt-dlp run
        that dies without output can still be reported as a JSON error.
        """
        first = await self.process.stdout.read(self.chunk_size)
        if first:
            self._pending = first
            return None

        returncode = await self.process.wait()
        await self._settle_stderr()
        if returncode != 0:
            return UpstreamError(self._failure_message(returncode), returncode)
        return UpstreamError("yt-dlp produced no output", returncode)

    async def iter_chunks(self) -> AsyncIterator[bytes]:
        """Forward stdout chunk by chunk; raises StreamAborted on a failed exit"""
        try:
            if self._pending:
                chunk, self._pending = self._pending, b""
                yield chunk

            while True:
                chunk = await self.process.stdout.read(self.chunk_size)
                if not chunk:
                    break
                yield chunk

            returncode = await self.process.wait()
            if returncode != 0:
                await self._settle_stderr()
                raise StreamAborted(self._failure_message(returncode))
        finally:
            await self.aclose()

    def _kill(self) -> None:
        # yt-dlp leads its group; ffmpeg children go down with it
        if self.process_group and hasattr(os, "killpg"):
            with suppress(ProcessLookupError, PermissionError):
                os.killpg(self.process.pid, signal.SIGKILL)
        with suppress(ProcessLookupError):
            self.process.kill()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True

        if self.process.returncode is None:
            self._kill()
            await self.process.wait()

        self._stderr_task.cancel()
        with suppress(asyncio.CancelledError):
            await self._stderr_task


class StreamResult(NamedTuple):
    """Either an open, primed stream or the error that prevented it"""
    stream: Optional[MediaStream] = None
    error: Optional[UpstreamError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class StreamService:
    """Media streaming service"""

    @staticmethod
    async def open(cmd: List[str]) -> StreamResult:
        """
        Spawn yt-dlp and wait for its first bytes.
        Never raises for yt-dlp failures; on error the process is already cleaned up.
        """
        try:
            process = await SubprocessExecutor.spawn(cmd)
        except OSError as e:
            return StreamResult(error=UpstreamError(f"Could not run yt-dlp: {e}"))

        stream = MediaStream(
            process,
            config.ytdlp.chunk_size,
            config.ytdlp.stderr_max_lines,
            process_group=True
        )
        try:
            error = await stream.prime()
        except BaseException:
            await stream.aclose()
            raise

        if error is not None:
            await stream.aclose()
            return StreamResult(error=error)

        return StreamResult(stream=stream)
