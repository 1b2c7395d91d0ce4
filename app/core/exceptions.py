from typing import Optional
from fastapi import HTTPException, status

class BaseAppException(HTTPException):
    error_code = "APP_ERROR"

    def __init__(self, status_code: int, detail: str, error_code: Optional[str] = None):
        self.message = detail
        if error_code:
            self.error_code = error_code
        super().__init__(status_code=status_code, detail={"error": self.error_code, "message": detail})

    def __str__(self) -> str:
        return self.message

class ValidationError(BaseAppException):
    error_code = "VALIDATION_ERROR"

    def __init__(self, detail: str = "Validation error"):
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)

class NotFoundError(BaseAppException):
    error_code = "NOT_FOUND"

    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class DuplicateNameError(BaseAppException):
    error_code = "DUPLICATE_NAME"

    def __init__(self, detail: str = "A record with the same name already exists"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class CircularReferenceError(BaseAppException):
    error_code = "CIRCULAR_REFERENCE"

    def __init__(self, detail: str = "Cannot make a subcategory the parent of one of its ancestors"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class ConflictError(BaseAppException):
    error_code = "CONFLICT"

    def __init__(self, detail: str = "The record was modified by another request, reload and retry"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)

class PersistenceError(BaseAppException):
    error_code = "PERSISTENCE_ERROR"

    def __init__(self, detail: str = "The data store rejected the write or is unavailable"):
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)
