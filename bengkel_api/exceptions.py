
class ApplicationError(Exception):
    """Base class for application-specific errors."""
    pass

class MissingFieldError(ApplicationError):
    """Raised when a required request field is absent."""
    pass

class DocumentNotFoundError(ApplicationError):
    """Raised when a document id does not exist in its collection."""
    pass

class StoreUnavailableError(ApplicationError):
    """Raised for any failed document store call."""
    def __init__(self, message="A document store error occurred.", original_exception=None):
        super().__init__(message)
        self.original_exception = original_exception
