"""HTTP status and header constants for TMDB requests.

Statuses named here are the ones the error taxonomy and the retry policy
branch on.
"""


class HTTPStatusCodes:
    """Statuses with dedicated handling."""

    UNAUTHORIZED = 401
    NOT_FOUND = 404
    TOO_MANY_REQUESTS = 429

    @staticmethod
    def is_success(code: int) -> bool:
        """2xx."""
        return 200 <= code < 300

    @staticmethod
    def is_error(code: int) -> bool:
        """4xx or 5xx."""
        return code >= 400

    @staticmethod
    def is_server_error(code: int) -> bool:
        """5xx and above."""
        return code >= 500


class HTTPHeaders:
    """Request header names set on the client session."""

    ACCEPT = "Accept"
    USER_AGENT = "User-Agent"
