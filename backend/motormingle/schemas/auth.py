from pydantic import BaseModel, ConfigDict


class TokenRequest(BaseModel):
    """Identity claims to sign. ``email`` is what protected routes read back."""

    model_config = ConfigDict(extra="allow")

    email: str


class TokenResponse(BaseModel):
    token: str
