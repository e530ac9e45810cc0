from pydantic import BaseModel, ConfigDict, Field
from typing import List, NamedTuple, Optional, Tuple, Union

class FormatDescriptor(BaseModel):
    """One entry of yt-dlp's formats[] list"""
    model_config = ConfigDict(extra="ignore")

    format_id: Optional[str] = None
    ext: Optional[str] = None
    vcodec: Optional[str] = None
    acodec: Optional[str] = None
    format_note: Optional[str] = None
    height: Optional[int] = None
    filesize: Optional[Union[int, float]] = None

    @property
    def is_muxed(self) -> bool:
        """Both a video and an audio track in one container"""
        return (
            self.vcodec is not None and self.vcodec != "none"
            and self.acodec is not None and self.acodec != "none"
        )

class MediaMetadata(BaseModel):
    """Subset of `yt-dlp --dump-single-json` the gateway relies on"""
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    title: Optional[str] = None
    duration: Optional[Union[int, float]] = None
    thumbnail: Optional[str] = None
    uploader: Optional[str] = None
    channel: Optional[str] = None
    description: Optional[str] = None
    view_count: Optional[int] = None
    formats: List[FormatDescriptor] = Field(default_factory=list)

class UpstreamError(NamedTuple):
    """yt-dlp failure, returned instead of raised"""
    message: str
    returncode: Optional[int] = None

class MetadataResult(NamedTuple):
    """Either metadata or the error that prevented fetching it"""
    metadata: Optional[MediaMetadata] = None
    error: Optional[UpstreamError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

class MediaKind(NamedTuple):
    """Download profile of a streaming endpoint"""
    name: str
    ext: str
    media_type: str
    error_label: str
    log_label: str
    ytdlp_args: Tuple[str, ...]
