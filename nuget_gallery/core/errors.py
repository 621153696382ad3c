# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Custom exceptions for the NuGet gallery engine.

All exceptions inherit from GalleryError for consistent error handling.
"""

from typing import Optional


class GalleryError(Exception):
    """Base exception for all gallery errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[dict] = None
    ):
        """
        Initialize gallery error.

        Args:
            message: Human-readable error message
            status_code: HTTP status code
            details: Additional error details
        """
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert error to dictionary for API response."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "status_code": self.status_code,
            "details": self.details
        }


class NotFoundError(GalleryError):
    """Resource not found."""

    def __init__(self, resource: str, identifier: str, details: Optional[dict] = None):
        """
        Initialize not found error.

        Args:
            resource: Type of resource (e.g., "Package", "Source")
            identifier: Resource identifier
            details: Additional error details
        """
        message = f"{resource} not found: {identifier}"
        super().__init__(message, status_code=404, details=details)
        self.resource = resource
        self.identifier = identifier


class ValidationError(GalleryError):
    """Validation failed."""

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[dict] = None):
        """
        Initialize validation error.

        Args:
            message: Validation error message
            field: Field that failed validation
            details: Additional error details
        """
        super().__init__(message, status_code=400, details=details)
        self.field = field


class ConfigParseError(GalleryError):
    """A NuGet.Config file could not be parsed."""

    def __init__(self, message: str, config_file: Optional[str] = None, details: Optional[dict] = None):
        """
        Initialize config parse error.

        Args:
            message: Parse error message
            config_file: Path of the offending file
            details: Additional error details
        """
        super().__init__(message, status_code=500, details=details)
        self.config_file = config_file


class SourceUnreachableError(GalleryError):
    """Network or HTTP failure while talking to a package source."""

    def __init__(
        self,
        url: str,
        reason: str,
        status_code: Optional[int] = None,
        details: Optional[dict] = None
    ):
        """
        Initialize source unreachable error.

        Args:
            url: URL of the failed request
            reason: Underlying failure description
            status_code: Upstream HTTP status, if a response was received
            details: Additional error details
        """
        details = dict(details or {})
        details.setdefault("url", url)
        if status_code is not None:
            details.setdefault("upstream_status", status_code)
        super().__init__(f"{reason} on request to {url}", status_code=502, details=details)
        self.url = url
        self.upstream_status = status_code


class EndpointNotFoundError(GalleryError):
    """The service index does not declare a required resource."""

    def __init__(self, which: str, url: Optional[str] = None, details: Optional[dict] = None):
        """
        Initialize endpoint not found error.

        Args:
            which: Resource type that was looked up (e.g. "SearchQueryService")
            url: Service index URL
            details: Additional error details
        """
        details = dict(details or {})
        if url:
            details.setdefault("url", url)
        super().__init__(f"{which} couldn't be found", status_code=502, details=details)
        self.which = which
        self.url = url


class PackageNotFoundError(NotFoundError):
    """No registration items exist for a package."""

    def __init__(self, url: str, details: Optional[dict] = None):
        """
        Initialize package not found error.

        Args:
            url: Registration index URL (or package id when no source matched)
            details: Additional error details
        """
        super().__init__("Package info", url, details=details)
        self.url = url


class PasswordScriptError(GalleryError):
    """Base class for password decrypt script failures."""

    def __init__(self, message: str, script_path: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message, status_code=500, details=details)
        self.script_path = script_path


class EmptyInputError(PasswordScriptError):
    """Script path or encoded password was empty."""

    def __init__(self, message: str = "Encoded password is empty or undefined", script_path: Optional[str] = None):
        super().__init__(message, script_path=script_path)


class EmptyOutputError(PasswordScriptError):
    """Script exited cleanly but printed nothing."""

    def __init__(self, script_path: Optional[str] = None):
        super().__init__("Password script returned empty output", script_path=script_path)


class NonZeroExitError(PasswordScriptError):
    """Script exited with a non-zero code."""

    def __init__(self, code: int, stderr: str = "", script_path: Optional[str] = None):
        message = f"Script exited with code {code}"
        if stderr:
            message += f": {stderr}"
        super().__init__(message, script_path=script_path, details={"exit_code": code})
        self.code = code
        self.stderr = stderr


class SpawnFailureError(PasswordScriptError):
    """The script process could not be started."""

    def __init__(self, message: str, script_path: Optional[str] = None):
        super().__init__(f"Failed to start process: {message}", script_path=script_path)
        self.reason = message


# Error Message Utilities

def sanitize_error_for_user(error: Exception, include_type: bool = True) -> str:
    """
    Sanitize error messages for user display.
    Removes stack traces and overly long payloads.

    Args:
        error: The exception to sanitize
        include_type: Whether to include exception type

    Returns:
        User-friendly error message without stack trace
    """
    error_msg = str(error).strip()

    # Limit message length
    if len(error_msg) > 500:
        error_msg = error_msg[:500] + "..."

    if include_type:
        return f"{error.__class__.__name__}: {error_msg}"

    return error_msg
