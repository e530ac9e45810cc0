from pydantic import BaseModel, Field
from typing import Optional

class InfoRequest(BaseModel):
    # Validated by the endpoint so a missing url gets the gateway's own 400
    url: Optional[str] = Field(None, description="YouTube video URL")
