class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class ScheduleValidationError(AppError):
    """Raised when a schedule write is malformed beyond what schema validation catches."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=422, details=details)

class ScheduleConflictError(AppError):
    """Raised by the write boundary when a candidate block collides with existing blocks."""
    def __init__(self, message: str, conflicts: dict[str, list[str]]):
        super().__init__(message, status_code=409, details={"conflicts": conflicts})

class LockedResourceError(AppError):
    """Raised when a mutation targets schedule data behind a lock."""
    def __init__(self, message: str, scope: str, details: dict = None):
        payload = {"blocked_by_lock": scope}
        payload.update(details or {})
        super().__init__(message, status_code=403, details=payload)

class ScheduleLockedError(LockedResourceError):
    def __init__(self, term_code: str):
        super().__init__(
            f"Schedule is locked for term {term_code}. Unlock the term schedule to make changes.",
            scope="term_schedule",
        )

class OfficeHoursLockedError(LockedResourceError):
    def __init__(self, term_id: str, instructor_id: str):
        super().__init__(
            "Office hours are locked for this instructor in this term.",
            scope="instructor_office_hours",
            details={"term_id": term_id, "instructor_id": instructor_id},
        )

class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)
