"""
Domain exceptions for the scheduling workflow.

Every error the services raise on purpose derives from StudioError, which
carries the HTTP status the API layer should answer with.
"""


class StudioError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class DataFormatError(StudioError):
    """An estimate or event payload has an unexpected shape."""
    status_code = 422


class NotFoundError(StudioError):
    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f"{resource_type} '{resource_id}' not found")


class SelectionRequired(StudioError):
    """The caller did not pick a team member (or role) before assigning."""
    status_code = 400


class InvalidTransition(StudioError):
    status_code = 409

    def __init__(self, current: str, requested: str, reason: str | None = None):
        self.current = current
        self.requested = requested
        message = f"Cannot move assignment from '{current}' to '{requested}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class StoreError(StudioError):
    """The underlying store failed for a reason other than the uniqueness conflict."""
    status_code = 503
