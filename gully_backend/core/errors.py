# gully_backend/core/errors.py
"""
Domain errors raised by the settlement and ranking services.

Each error carries the HTTP status it maps to; ``main.py`` registers a single
handler for ``GullyError`` so routers never build error responses by hand.
"""


class GullyError(Exception):
    status_code = 500
    default_detail = "Something went wrong"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotFound(GullyError):
    """Match, tournament, team, player or user is missing."""
    status_code = 404
    default_detail = "Not found"


class BadRequest(GullyError):
    """Missing or malformed scoreboard, missing date, invalid permission."""
    status_code = 400
    default_detail = "Bad request"


class AlreadyExists(GullyError):
    """Duplicate match or challenge."""
    status_code = 409
    default_detail = "Already exists"


class ServerError(GullyError):
    """Uncaught failure while aggregating statistics."""
    status_code = 500
    default_detail = "Internal server error"
