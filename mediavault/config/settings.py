from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

class YtDlpConfig(BaseModel):
    binary: str = Field(default="yt-dlp", description="yt-dlp executable")
    video_format: str = Field(default="best[ext=mp4]/best", description="Format selector for video downloads")
    audio_format: str = Field(default="mp3", description="Target format for audio extraction")
    audio_quality: str = Field(default="0", description="Audio quality for extraction (0 is best)")
    chunk_size: int = Field(default=64 * 1024, ge=1024, description="Bytes read from yt-dlp stdout per chunk")
    stderr_max_lines: int = Field(default=50, ge=1, description="stderr lines kept for diagnostics")
    info_timeout_seconds: Optional[float] = Field(default=None, gt=0, description="Metadata dump timeout (none = wait forever)")

class LoggingConfig(BaseModel):
    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="[%(request_id)s] %(message)s", description="Log format")
    enable_rich: bool = Field(default=True, description="Enable rich console logging")

    @field_validator('level')
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()

class ApiConfig(BaseModel):
    title: str = Field(default="MediaVault Pro API", description="API title")
    description: str = Field(default="Metadata and media downloads backed by yt-dlp", description="API description")
    version: str = Field(default="2.0.0", description="API version")
    cors_origins: list = Field(default=["*"], description="CORS allowed origins")
    debug: bool = Field(default=False, description="Enable debug mode")

class Config(BaseSettings):
    """Gateway configuration, read from the environment (YTDLP__BINARY, LOGGING__LEVEL, ...)"""
    model_config = SettingsConfigDict(env_nested_delimiter="__", extra="ignore")

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3000, ge=1, le=65535, description="HTTP port (env PORT)")
    ytdlp: YtDlpConfig = Field(default_factory=YtDlpConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)

config = Config()
