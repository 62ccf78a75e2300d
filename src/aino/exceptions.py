"""
Aino exceptions.

Only wiring mistakes raise. Malformed input (bad cookies, unparsable bodies,
unknown routes) is represented as context state instead.
"""

from typing import Iterable, List


class AinoError(RuntimeError):
    """Base class for all Aino errors"""


class IncompleteResponseError(AinoError):
    """The pipeline finished without setting status, headers and body"""

    def __init__(self, missing_keys: Iterable[str]):
        self.missing_keys: List[str] = list(missing_keys)
        super().__init__(f"Context is missing required keys - {self.missing_keys}")


class SessionNotLoadedError(AinoError):
    """Session data was accessed before being decoded"""

    def __init__(self, action: str = "use the session"):
        super().__init__(
            f"Make sure to decode session data before trying to {action}. "
            "See aino.session.decode"
        )


class FlashNotLoadedError(AinoError):
    """Flash messages were read before being loaded"""

    def __init__(self):
        super().__init__(
            "Make sure to load flash data before trying to fetch flash messages. "
            "See aino.session.flash.load"
        )


class RouteNotFoundError(AinoError, LookupError):
    """No route carries the requested name"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No route named {name!r}")


class MissingRouteParameterError(AinoError, LookupError):
    """A named path segment was not given a value"""

    def __init__(self, route_name: str, param: str):
        self.route_name = route_name
        self.param = param
        super().__init__(f"Route {route_name!r} requires a value for {param!r}")


class CSRFTokenMissingError(AinoError):
    """The session carries no CSRF token to embed"""

    def __init__(self, reason: str):
        super().__init__(f"CSRF token unavailable: {reason}. Run aino.security.csrf.set first")


__all__ = [
    'AinoError', 'IncompleteResponseError', 'SessionNotLoadedError',
    'FlashNotLoadedError', 'RouteNotFoundError', 'MissingRouteParameterError',
    'CSRFTokenMissingError'
]
