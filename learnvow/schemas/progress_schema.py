from pydantic import BaseModel, Field
from datetime import datetime

# Range checks live in the ProgressStore write path, not here,
# so out-of-range values reach it and are rejected with a 400.
# Strict fields accept JSON numbers only: true and "50" are a 422, not 1.0 and 50.0.

class ProgressUpdate(BaseModel):
    progress: float = Field(..., strict=True, description="Completion percentage, 0 to 100 inclusive")


class PositionUpdate(BaseModel):
    position: float = Field(..., strict=True, description="Current page (ebooks) or playback second (audiobooks)")
    total: float = Field(..., strict=True, description="Total pages or total duration in seconds")


class ProgressValue(BaseModel):
    content_id: int
    progress: float = Field(0.0, description="0 when nothing has been recorded yet")


class ProgressDisplay(BaseModel):
    id: int
    user_id: int
    content_id: int
    progress: float
    last_accessed: datetime

    class Config:
        from_attributes = True
