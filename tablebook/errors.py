"""Error taxonomy shared by the storage, integration and API layers"""

from typing import Optional


class TablebookError(Exception):
    """Base error; `status_code` is the HTTP status the API reports it with"""
    
    status_code = 500
    
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TablebookError):
    """Malformed or missing field in a request body"""
    status_code = 400


class InvalidDateFormat(ValidationError):
    code = "invalid_date_format"
    
    def __init__(self, message: str = "Invalid date format"):
        super().__init__(message)


class InvalidTimeFormat(ValidationError):
    code = "invalid_time_format"
    
    def __init__(self, message: str = "Invalid time format"):
        super().__init__(message)


class NotFoundError(TablebookError):
    status_code = 404
    
    def __init__(self, message: str = "Reservation not found"):
        super().__init__(message)


class BackendUnavailableError(TablebookError):
    """Storage backend is not configured or did not answer its probe"""
    status_code = 503


class BackendOperationError(TablebookError):
    """A read or write against an available backend failed"""
    
    status_code = 500
    
    def __init__(self, message: str, code: Optional[str] = None):
        self.code = code
        self.detail = message
        if code:
            message = f"{message} ({code})"
        super().__init__(f"Database error: {message}")


class NotificationError(TablebookError):
    """Outbound call to the CallFluent API failed"""
    status_code = 500


class IntegrationNotConfiguredError(TablebookError):
    status_code = 400
    
    def __init__(self, message: str = "CallFluent service not configured"):
        super().__init__(message)
