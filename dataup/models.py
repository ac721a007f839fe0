# dataup/models.py
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class VideoState(str, Enum):
    PROCESSING = "PROCESSING"
    READY = "READY"


class Video(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # 0 means "let the server pick"
    id: int = Field(0, ge=0)
    title: str | None = None
    duration: int = 0
    location: str | None = None
    subject: str | None = None
    content_type: str = Field("video/mpeg", alias="contentType")
    data_url: str | None = Field(None, alias="dataUrl")

    @field_validator("title", "location", "subject", mode="before")
    @classmethod
    def _number_as_text(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("duration", mode="before")
    @classmethod
    def _truncate_duration(cls, v):
        # fractional durations are truncated, not rejected
        if isinstance(v, float):
            return int(v)
        return v


class VideoStatus(BaseModel):
    state: VideoState
