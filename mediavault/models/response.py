from typing import Dict, List, Optional, Union

from pydantic import BaseModel


class FormatEntry(BaseModel):
    """Muxed format offered to the client"""
    quality: str
    itag: Optional[str] = None
    container: Optional[str] = None
    size: str


class VideoDetails(BaseModel):
    """Video information response"""
    success: bool = True
    title: Optional[str] = None
    duration: Optional[Union[int, float]] = None
    thumbnail: Optional[str] = None
    author: Optional[str] = None
    videoId: Optional[str] = None
    description: str = ""
    viewCount: str = "0"
    formats: List[FormatEntry] = []


class ServiceStatus(BaseModel):
    status: str
    version: str
    engine: str
    endpoints: Dict[str, str]


class HealthStatus(BaseModel):
    status: str
    timestamp: str
    uptime: float


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    message: str = ""
