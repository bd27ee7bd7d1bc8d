class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class ValidationError(AppError):
    """Raised for malformed settings or an incomplete timetable slot draft."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=422, details=details)

class NotFoundError(AppError):
    """Raised when a requested entry, class or reference record does not exist."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} with id {resource_id} not found",
            status_code=404,
            details={"resource_type": resource_type, "resource_id": str(resource_id)},
        )
        self.resource_type = resource_type
        self.resource_id = resource_id

class ConflictError(AppError):
    """Raised when a write carries a stale version token for a timetable cell."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=409, details=details)

class TransportError(AppError):
    """Raised when the backing store cannot be reached. Callers retry manually."""
    def __init__(self, message: str = "Timetable store is unavailable"):
        super().__init__(message, status_code=503)
