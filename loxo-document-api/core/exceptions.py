"""
Exceptions raised by the upload pipeline.

Every error carries the HTTP status the handler should answer with. Upstream
errors additionally keep the status code the remote side returned, so the
service can choose between a normalized status and the verbatim one.
"""

from typing import Optional


class LoxoUploadError(Exception):
    """Base class for all pipeline failures"""
    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class RequestValidationError(LoxoUploadError):
    """A required inbound field is missing or unusable"""
    status_code = 400

    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"Missing {field} in request body.")
        self.field = field


class MissingCredentialsError(LoxoUploadError):
    """No bearer token is configured for the requested agency"""
    status_code = 500

    def __init__(self, agency_slug: str):
        super().__init__(f"No Loxo credentials configured for agency '{agency_slug}'.")
        self.agency_slug = agency_slug


class RecipientNotFoundError(LoxoUploadError):
    """The person search succeeded but matched nobody"""
    status_code = 404

    def __init__(self, agency_slug: str):
        super().__init__(f"No person found in agency '{agency_slug}' for the supplied email.")
        self.agency_slug = agency_slug


class UpstreamError(LoxoUploadError):
    """
    An outbound call failed.

    upstream_status is None when no HTTP response was received at all
    (connection failure, unreadable body).
    """

    def __init__(self, stage: str, message: str, upstream_status: Optional[int] = None):
        super().__init__(message, status_code=upstream_status or 502)
        self.stage = stage
        self.upstream_status = upstream_status
