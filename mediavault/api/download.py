import asyncio
from typing import AsyncIterator, Optional
from fastapi import APIRouter, Request, Query
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask
from mediavault.models.internal import MediaKind
from mediavault.services.info import VideoInfoService
from mediavault.services.stream import MediaStream, StreamService
from mediavault.services.ytdlp import YTDLPCommandBuilder
from mediavault.core.errors import InvalidInput, StreamAborted, UpstreamFailure
from mediavault.core.logging import log_info, log_error, log_warning
from mediavault.utils.filename import attachment_filename
from mediavault.utils.urls import safe_url_for_log

router = APIRouter()

VIDEO = MediaKind(
    name="video",
    ext="mp4",
    media_type="video/mp4",
    error_label="Download failed",
    log_label="Download request",
    ytdlp_args=tuple(YTDLPCommandBuilder.video_args()),
)

AUDIO = MediaKind(
    name="audio",
    ext="mp3",
    media_type="audio/mpeg",
    error_label="Audio extraction failed",
    log_label="Audio extraction",
    ytdlp_args=tuple(YTDLPCommandBuilder.audio_args()),
)


class DownloadService:
    """Metadata lookup for the filename, then yt-dlp output streamed back"""

    @staticmethod
    async def open(kind: MediaKind, url: str, request: Request) -> tuple[MediaStream, dict]:
        """
        Everything that can fail before headers are committed.
        Returns (stream, headers); raises UpstreamFailure.
        """
        info = await VideoInfoService.fetch(url)
        if not info.ok:
            raise UpstreamFailure(kind.error_label, info.error.message)

        filename = attachment_filename(info.metadata.title, kind.ext)
        log_info(request, f"Filename resolved: {filename}")

        cmd = YTDLPCommandBuilder.build_stream_command(url, kind.ytdlp_args)
        opened = await StreamService.open(cmd)
        if not opened.ok:
            raise UpstreamFailure(kind.error_label, opened.error.message)

        headers = {
            'Content-Disposition': f'attachment; filename="{filename}"',
            'X-Content-Type-Options': 'nosniff',
            'Cache-Control': 'no-cache',
        }
        return opened.stream, headers


async def serve_media(kind: MediaKind, url: Optional[str], request: Request) -> StreamingResponse:
    if not url:
        raise InvalidInput("URL is required", "query parameter 'url' is missing")

    log_info(request, f"{kind.log_label}: {safe_url_for_log(url)}")

    try:
        stream, headers = await DownloadService.open(kind, url, request)
    except UpstreamFailure as e:
        log_error(request, f"{kind.name} error: {e.message}")
        raise

    async def body() -> AsyncIterator[bytes]:
        sent = 0
        try:
            async for chunk in stream.iter_chunks():
                sent += len(chunk)
                yield chunk
        except StreamAborted as e:
            # Headers are gone; all we can do is end the connection
            log_error(request, f"{kind.name} stream aborted after {sent} bytes: {e.message}")
            raise
        except (asyncio.CancelledError, GeneratorExit):
            log_warning(request, f"{kind.name} client went away after {sent} bytes, yt-dlp stopped")
            raise
        else:
            log_info(request, f"{kind.name} stream finished ({sent} bytes)")
        finally:
            await stream.aclose()

    return StreamingResponse(
        body(),
        media_type=kind.media_type,
        headers=headers,
        background=BackgroundTask(stream.aclose)
    )


@router.get("/download")
async def download_video(request: Request, url: Optional[str] = Query(None, description="YouTube video URL")):
    """Stream the video as MP4"""
    return await serve_media(VIDEO, url, request)


@router.get("/audio")
async def download_audio(request: Request, url: Optional[str] = Query(None, description="YouTube video URL")):
    """Stream the audio track as MP3"""
    return await serve_media(AUDIO, url, request)
