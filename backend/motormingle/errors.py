class MarketplaceError(Exception):
    """Base for failures surfaced to callers as ``{"message": ...}`` with a fixed status."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class Unauthorized(MarketplaceError):
    status_code = 401
    message = "Unauthorized"


class Forbidden(MarketplaceError):
    status_code = 403
    message = "Forbidden access!"


class NotFound(MarketplaceError):
    status_code = 404
    message = "Not found"


class ValidationError(MarketplaceError):
    status_code = 400
    message = "Invalid request"


class StoreUnavailable(MarketplaceError):
    status_code = 503
    message = "Requires MongoDB"
