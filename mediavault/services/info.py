import asyncio
import json
from typing import List
from pydantic import ValidationError
from mediavault.config.settings import config
from mediavault.models.internal import FormatDescriptor, MediaMetadata, MetadataResult, UpstreamError
from mediavault.models.response import FormatEntry, VideoDetails
from mediavault.services.ytdlp import YTDLPCommandBuilder, SubprocessExecutor

MAX_FORMATS = 5
DESCRIPTION_MAX_CHARS = 200
STDERR_MAX_CHARS = 500

def format_quality(fmt: FormatDescriptor) -> str:
    if fmt.format_note:
        return fmt.format_note
    if fmt.height:
        return f"{fmt.height}p"
    return "Unknown"

def format_size(fmt: FormatDescriptor) -> str:
    if not fmt.filesize:
        return "Unknown"
    return f"{fmt.filesize / (1024 * 1024):.2f} MB"

def select_formats(formats: List[FormatDescriptor], limit: int = MAX_FORMATS) -> List[FormatEntry]:
    """First `limit` muxed formats, in the order yt-dlp listed them"""
    muxed = [f for f in formats if f.is_muxed]
    return [
        FormatEntry(
            quality=format_quality(f),
            itag=f.format_id,
            container=f.ext,
            size=format_size(f),
        )
        for f in muxed[:limit]
    ]

def build_video_details(metadata: MediaMetadata) -> VideoDetails:
    """Project yt-dlp metadata onto the /api/info response"""
    return VideoDetails(
        title=metadata.title,
        duration=metadata.duration,
        thumbnail=metadata.thumbnail,
        author=metadata.uploader or metadata.channel,
        videoId=metadata.id,
        description=(metadata.description or "")[:DESCRIPTION_MAX_CHARS],
        viewCount=str(metadata.view_count) if metadata.view_count is not None else "0",
        formats=select_formats(metadata.formats),
    )

class VideoInfoService:
    """Video metadata fetching service"""

    @staticmethod
    def parse(stdout: bytes) -> MetadataResult:
        """
        Validate yt-dlp's JSON dump.
        Non-JSON output, a non-object document or wrongly typed known
        fields are upstream errors; missing fields fall back to defaults.
        """
        try:
            data = json.loads(stdout.decode(errors="replace"))
        except json.JSONDecodeError as e:
            return MetadataResult(error=UpstreamError(f"yt-dlp returned invalid JSON: {e}"))

        if not isinstance(data, dict):
            return MetadataResult(error=UpstreamError("yt-dlp returned unexpected JSON (expected an object)"))

        try:
            return MetadataResult(metadata=MediaMetadata.model_validate(data))
        except ValidationError as e:
            return MetadataResult(error=UpstreamError(f"yt-dlp metadata failed validation: {e.error_count()} error(s)"))

    @staticmethod
    async def fetch(url: str) -> MetadataResult:
        """Run the metadata dump once. Never raises for yt-dlp failures."""
        cmd = YTDLPCommandBuilder.build_info_command(url)

        try:
            result = await SubprocessExecutor.run(cmd, timeout=config.ytdlp.info_timeout_seconds)
        except asyncio.TimeoutError:
            return MetadataResult(error=UpstreamError(
                f"yt-dlp timed out after {config.ytdlp.info_timeout_seconds}s"
            ))
        except OSError as e:
            return MetadataResult(error=UpstreamError(f"Could not run yt-dlp: {e}"))

        if result.returncode != 0:
            error_msg = result.stderr.decode(errors="replace").strip()
            return MetadataResult(error=UpstreamError(
                error_msg[-STDERR_MAX_CHARS:] or f"yt-dlp exited with code {result.returncode}",
                result.returncode
            ))

        return VideoInfoService.parse(result.stdout)
