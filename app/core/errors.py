# app/core/errors.py


class FieldValidationError(ValueError):
    """A form-level error tied to one input field."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message

    def as_detail(self) -> dict:
        return {"field": self.field, "message": self.message}


class ApprovalStateError(ValueError):
    """Raised when a decision is applied to an approval that is no longer pending."""
