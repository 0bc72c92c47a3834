from typing import Optional

from pydantic import BaseModel, ConfigDict


class SavedAdCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    singleAdId: str
    userEmail: str


class FeedbackCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    feedbackBy: str
    message: Optional[str] = None
