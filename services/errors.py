"""
Service Errors

Exceptions raised by the service layer. Each carries the HTTP status the
API layer reports it with.
"""


class RecipeAppError(Exception):
    """Base class for errors surfaced to API callers."""
    status_code = 500

    def __init__(self, message, details=None, status_code=None):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        body = {'error': self.message}
        if self.details:
            body['details'] = self.details
        return body


class NotFound(RecipeAppError):
    """Referenced recipe, entry or section does not exist."""
    status_code = 404


class ValidationError(RecipeAppError):
    """Malformed request data, rejected before any write."""
    status_code = 400

    @classmethod
    def from_pydantic(cls, exc, message='Invalid request data'):
        """Build from a pydantic ValidationError, keeping each field path."""
        details = []
        for err in exc.errors():
            field = '.'.join(str(part) for part in err.get('loc', ()))
            details.append({'field': field, 'message': err.get('msg', '')})
        return cls(message, details=details)


class TransactionFailure(RecipeAppError):
    """A write failed and was rolled back; nothing was persisted."""
    status_code = 500

    def __init__(self, message='Failed to write changes', details=None):
        super().__init__(message, details)


class ImportFailure(RecipeAppError):
    """A recipe could not be imported from the given URL."""
    status_code = 422


class GeneratorUnavailable(RecipeAppError):
    """No recipe generator is configured."""
    status_code = 503


class GenerationFailure(RecipeAppError):
    """The recipe generator failed or returned something that is not a recipe."""
    status_code = 502
