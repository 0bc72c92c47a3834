from pydantic import BaseModel, ConfigDict


class BidCreate(BaseModel):
    """A buyer's offer. Bidder and amount fields pass through as sent."""

    model_config = ConfigDict(extra="allow")

    productId: str
