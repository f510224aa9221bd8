"""
Domain failures raised by the matching core.

Each error carries an HTTP-style ``status_code`` so the route layer can map
it without the core importing anything from Flask.
"""


class MatchingError(Exception):
    status_code = 400
    default_message = "Matching request failed"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(MatchingError):
    """A referenced user, sport or match does not exist."""

    status_code = 404
    default_message = "Not found"


class Forbidden(MatchingError):
    """The acting user may not perform this transition."""

    status_code = 403
    default_message = "You are not allowed to do that"


class Conflict(MatchingError):
    """A live match already exists for this pair and sport."""

    status_code = 409
    default_message = "A match request already exists between these users for this sport"


class InvalidState(MatchingError):
    """The requested transition is not legal from the current state."""

    status_code = 400
    default_message = "This match cannot be changed from its current status"
