from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class UserSettingsUpdate(BaseModel):
    """Request body for PUT /api/v1/settings.

    ``openai_api_key`` is write-only; an empty string clears it.
    """

    ai_features_enabled: Optional[bool] = None
    openai_api_key: Optional[str] = Field(None, max_length=500)


class UserSettingsOut(BaseModel):
    ai_features_enabled: bool = False
    has_api_key: bool = False
    usage_count: int = 0
    last_used_at: Optional[datetime] = None
