"""
errors.py

Construction-time error taxonomy for formwire.

These errors are raised while a schema is being authored: a component
with impossible bounds, a form built without its required fields, a
serialized document that does not describe a form. They are programmer
errors and fail loudly.

Problems with a client's reply are NOT represented here. Decoding never
raises for untrusted input; see ``formwire.response.DecodeFailure``.
"""

from typing import Any, Optional


class FormwireError(Exception):
    """
    Base class for all formwire construction errors.

    Carries a stable error code and, where applicable, the name of the
    offending field.
    """

    subject = "Form"

    def __init__(
        self,
        message: str,
        *,
        field_name: Optional[str] = None,
        error_code: str = "W000",
    ):
        self.message = message
        self.field_name = field_name
        self.error_code = error_code
        super().__init__(self.format())

    def format(self) -> str:
        """Format as human-readable error message."""
        if self.field_name:
            return f"[{self.error_code}] {self.subject} validation failed for '{self.field_name}': {self.message}"
        return f"[{self.error_code}] {self.subject} validation failed: {self.message}"


# === Component Errors (C0xx) ===

class InvalidComponentError(FormwireError):
    """
    Raised when a component's own constraints are violated.

    Always names the field and the reason, e.g. ``slider.step`` /
    ``step must be greater than 0``.
    """

    subject = "Component"

    def __init__(self, field_name: str, reason: str, *, error_code: str = "C000"):
        super().__init__(reason, field_name=field_name, error_code=error_code)
        self.reason = reason


class ComponentImmutabilityError(Exception):
    """Raised when attempting to mutate a component after construction."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Cannot modify Component.{field_name}: Component is immutable")


# === Form Errors (F0xx) ===

class IncompleteFormError(FormwireError):
    """Raised by ``build()`` when a required form field was never set."""

    def __init__(self, missing_field: str):
        super().__init__(
            f"Required field '{missing_field}' is missing or None",
            field_name=missing_field,
            error_code="F001",
        )
        self.missing_field = missing_field


class InvalidFormError(FormwireError):
    """Raised when a form field is present but has the wrong type or value."""

    def __init__(self, field_name: str, reason: str):
        super().__init__(reason, field_name=field_name, error_code="F002")
        self.reason = reason


class InvalidFormDocumentError(FormwireError):
    """Raised when a serialized document cannot be turned back into a form."""

    subject = "Form document"

    def __init__(self, reason: str, *, field_name: Optional[str] = None):
        super().__init__(reason, field_name=field_name, error_code="F003")
        self.reason = reason


class FormImmutabilityError(Exception):
    """Raised when attempting to mutate a form after construction."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Cannot modify Form.{field_name}: Form is immutable")


# === Response Errors (R0xx) ===

class ResponseAccessError(FormwireError):
    """
    Raised when a decoded custom form value is read as the wrong kind.

    This is a caller bug (asking a toggle slot for slider data), not a
    problem with the client's reply.
    """

    subject = "Response"

    def __init__(self, index: int, expected: str, actual: Any):
        super().__init__(
            f"Value at index {index} is a {actual}, not a {expected}",
            field_name=f"values[{index}]",
            error_code="R001",
        )
        self.index = index
        self.expected = expected
        self.actual = actual
