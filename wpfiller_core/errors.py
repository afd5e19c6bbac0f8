"""
Error types and user-facing error descriptions.

Run-fatal errors (login, navigation, save) propagate to the caller.
Field-level problems never leave the orchestrator; they end up as
FillResult entries instead.
"""

import logging
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class WpFillerError(Exception):
    """Base class for all wpfiller errors"""
    pass


class MappingError(WpFillerError):
    """Selector mapping cannot be loaded or is inconsistent"""
    pass


class AuthError(WpFillerError):
    """Login did not reach the dashboard"""
    pass


class NavigationError(WpFillerError):
    """The new-entry editor never became reachable"""
    pass


class SaveError(WpFillerError):
    """Save/publish control could not be triggered"""
    pass


class PayloadError(WpFillerError):
    """Incoming landing-page payload failed validation"""

    def __init__(self, details: List[Dict[str, str]]):
        self.details = details
        summary = "; ".join(f"{d['field']}: {d['message']}" for d in details)
        super().__init__(f"Invalid payload: {summary}")


def describe_error(error: Exception, technical_details: Optional[str] = None) -> Dict:
    """
    Convert an exception into a caller-friendly description.

    Returns:
        {
            "message": str,
            "suggestion": str,
            "technical": str,
            "severity": str,     # "critical", "error", "warning"
            "can_retry": bool
        }
    """
    error_str = str(error)
    for error_type, key in TYPE_MAPPINGS:
        if isinstance(error, error_type):
            result = dict(ERROR_MAPPINGS[key])
            result["technical"] = technical_details or error_str
            return result

    # untyped errors (Playwright, network) fall back to message text
    for pattern in TEXT_PATTERNS:
        if pattern in error_str.lower():
            result = dict(ERROR_MAPPINGS[pattern])
            result["technical"] = technical_details or error_str
            logger.debug(f"Mapped error to description: {result['message']}")
            return result

    return {
        "message": "Unexpected error while creating the landing page",
        "suggestion": "Check the server log and retry",
        "technical": technical_details or error_str,
        "severity": "error",
        "can_retry": True,
    }


# run-fatal error types, checked before any message text
TYPE_MAPPINGS = (
    (AuthError, "login"),
    (NavigationError, "editor"),
    (SaveError, "save"),
)

TEXT_PATTERNS = ("timeout", "target closed", "net::err")

# description key (lowercase text pattern for untyped errors) -> description
ERROR_MAPPINGS = {
    "login": {
        "message": "Could not log in to WordPress",
        "suggestion": "Verify WP_USERNAME / WP_PASSWORD; repeated attempts may lock the account",
        "severity": "critical",
        "can_retry": False,
    },
    "editor": {
        "message": "The landing page editor could not be opened",
        "suggestion": "Check WP_ADMIN_URL and WP_POST_TYPE and that the user can create entries",
        "severity": "error",
        "can_retry": True,
    },
    "save": {
        "message": "The landing page could not be saved",
        "suggestion": "Open the editor manually and check for blocking notices",
        "severity": "error",
        "can_retry": True,
    },
    "timeout": {
        "message": "WordPress took too long to respond",
        "suggestion": "Check that the site is reachable and retry",
        "severity": "warning",
        "can_retry": True,
    },
    "target closed": {
        "message": "The browser closed during the run",
        "suggestion": "Retry the request",
        "severity": "error",
        "can_retry": True,
    },
    "net::err": {
        "message": "Network error while talking to WordPress",
        "suggestion": "Check WP_ADMIN_URL and network access from the server",
        "severity": "error",
        "can_retry": True,
    },
}
