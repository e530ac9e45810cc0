from typing import List, Optional, NamedTuple, Sequence
import asyncio
from mediavault.config.settings import config

class CompletedProcess(NamedTuple):
    """Subprocess result"""
    returncode: int
    stdout: bytes
    stderr: bytes

class SubprocessExecutor:
    """Execute subprocess with consistent error handling"""

    @staticmethod
    async def run(
        cmd: List[str],
        timeout: Optional[float] = None
    ) -> CompletedProcess:
        """
        Run subprocess to completion and collect its output.
        The process is killed if the wait times out or is cancelled.
        """
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            stdin=asyncio.subprocess.DEVNULL
        )

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(),
                timeout=timeout
            )

            return CompletedProcess(
                returncode=process.returncode,
                stdout=stdout,
                stderr=stderr
            )

        except BaseException:
            if process.returncode is None:
                process.kill()
                await process.wait()
            raise

    @staticmethod
    async def spawn(cmd: List[str]) -> asyncio.subprocess.Process:
        """
        Start a long-running process with piped stdout/stderr.
        It leads its own process group so the ffmpeg children it starts
        can be killed together with it.
        """
        return await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            stdin=asyncio.subprocess.DEVNULL,
            start_new_session=True
        )


class YTDLPCommandBuilder:
    """Build yt-dlp commands"""

    @staticmethod
    def build_version_command() -> List[str]:
        return [config.ytdlp.binary, '--version']

    @staticmethod
    def build_info_command(url: str) -> List[str]:
        """Build command for dumping video metadata as one JSON document"""
        return [
            config.ytdlp.binary,
            '--dump-single-json',
            '--no-check-certificates',
            '--no-warnings',
            '--prefer-free-formats',
            '--',
            url,
        ]

    @staticmethod
    def video_args() -> List[str]:
        return ['-f', config.ytdlp.video_format]

    @staticmethod
    def audio_args() -> List[str]:
        return [
            '-x',
            '--audio-format', config.ytdlp.audio_format,
            '--audio-quality', config.ytdlp.audio_quality,
        ]

    @staticmethod
    def build_stream_command(url: str, media_args: Sequence[str]) -> List[str]:
        """Build command that writes the media to stdout"""
        cmd = [config.ytdlp.binary, *media_args, '-o', '-']

        # Keep stdout clean: only media bytes may go there
        cmd.append('--no-progress')
        cmd.append('--quiet')

        # The url is never parsed as an option
        cmd.extend(['--', url])

        return cmd
