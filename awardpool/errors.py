"""
Error taxonomy for the award pool core.

Services raise these synchronously; the application factory renders any
PoolError as ``{"error": message}`` with the class's HTTP status code.
"""


class PoolError(Exception):
    """Base class for errors surfaced to API callers"""

    status_code = 500
    default_message = "Unexpected error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(PoolError):
    """Missing or malformed input, including incomplete prediction sets"""

    status_code = 400
    default_message = "Invalid input"


class Forbidden(PoolError):
    """Caller is not allowed to perform the mutation"""

    status_code = 403
    default_message = "Not authorized"


class NotFound(PoolError):
    """Lobby, category, nominee or participant does not exist"""

    status_code = 404
    default_message = "Not found"


class Conflict(PoolError):
    """Uniqueness violation (participant name, nominee name, username)"""

    status_code = 409
    default_message = "Already exists"


class StateConflict(PoolError):
    """Operation not allowed in the lobby's current status"""

    status_code = 409
    default_message = "Operation not allowed in the current lobby state"


class LimitExceeded(PoolError):
    """A configured capacity limit has been reached"""

    status_code = 429
    default_message = "Limit reached"
