"""
Journey Backend — Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for every failure the core can produce.
Why:   Services raise typed errors; the global handlers in main.py turn them
       into HTTP responses. Internal details stay in `context` (logged) and
       never reach the client.

Exception Hierarchy:
    JourneyError (base)
    ├── ClientError                → 400 (message shown to the caller)
    │   ├── ValidationError            malformed or invalid input
    │   ├── InvalidIdentifierError     path id is not a UUID
    │   ├── NotFoundError              row does not exist
    │   ├── AlreadyConfirmedError      guarded transition refused
    │   └── RequestFailedError         generic "try again" for store failures
    ├── UnimplementedError         → 501 (stub endpoints)
    ├── StoreError                 persistence failure, never shown verbatim
    └── MailerError                side-effect failure, logged only

Why every client-facing failure is a 400:
    The HTTP contract of the trip API answers 400 with a `message` for bad
    input, missing rows, refused transitions and internal store failures
    alike. Only the message tells them apart.
"""

from typing import Any, Dict, Optional


class JourneyError(Exception):
    """
    Base exception for all Journey application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ClientError(JourneyError):
    """Base for errors the caller can act on; surfaced as HTTP 400."""

    status_code = 400
    error_code = "bad_request"


class ValidationError(ClientError):
    """
    Raised when client input fails validation.

    When: Undecodable JSON, missing fields, bad email format, trip ending
          before it starts.
    """

    error_code = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class InvalidIdentifierError(ClientError):
    """Raised when a path identifier is not a well-formed UUID."""

    error_code = "invalid_identifier"

    def __init__(self, value: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["value"] = value
        super().__init__(message="Invalid UUID.", context=ctx)


class NotFoundError(ClientError):
    """
    Raised when a requested row does not exist.

    The store converts SQLAlchemy's `None` into this exception so services can
    tell "missing" apart from every other lookup failure.
    """

    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource.capitalize()} not found.", context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class AlreadyConfirmedError(ClientError):
    """
    Raised when confirming a participant that is already confirmed.

    Confirmation is a one-way transition; repeating it is refused rather than
    treated as a silent success.
    """

    error_code = "already_confirmed"

    def __init__(self, participant_id: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["participant_id"] = participant_id
        super().__init__(message="Participant is already confirmed.", context=ctx)


class RequestFailedError(ClientError):
    """
    Generic failure shown to the caller when the store failed underneath.

    The underlying StoreError has already been logged with its identifiers;
    only the "try again" message is returned.
    """

    error_code = "request_failed"

    def __init__(
        self,
        message: str = "Something went wrong. Try again.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UnimplementedError(JourneyError):
    """Raised by endpoints that are declared in the API but not built."""

    status_code = 501
    error_code = "not_implemented"

    def __init__(self, operation: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["operation"] = operation
        super().__init__(message=f"{operation} is not implemented.", context=ctx)
        self.operation = operation


class StoreError(JourneyError):
    """
    Raised when a persistence operation fails.

    Attributes:
        step: Which stage failed (e.g. "begin", "insert_trip",
              "insert_participants", "commit", "get_participant").
              Useful in logs only; callers must not branch on it.
    """

    def __init__(
        self,
        step: str,
        message: str = "A database error occurred.",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["step"] = step
        super().__init__(message=message, context=ctx)
        self.step = step


class MailerError(JourneyError):
    """
    Raised when the owner confirmation email could not be sent.

    Covers trip lookup, malformed addresses and SMTP transport failures alike.
    """

    def __init__(
        self,
        message: str = "Failed to send confirmation email",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
