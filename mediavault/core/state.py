import time
from dataclasses import dataclass, field

@dataclass
class RuntimeState:
    """Centralized runtime state"""
    started_at: float = field(default_factory=time.monotonic)
    ytdlp_version: str = "unknown"

    @property
    def uptime(self) -> float:
        return time.monotonic() - self.started_at

state = RuntimeState()
