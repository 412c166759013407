"""
config.py

Codec settings shared by components, the serializer and the decoder.

There is no environment or file based configuration. Callers that need
different behaviour construct a ``CodecConfig`` and pass it explicitly.
"""

from dataclasses import dataclass


class ConfigValidationError(Exception):
    """Raised when a CodecConfig is constructed with an unusable value."""

    def __init__(self, field_name: str, message: str):
        self.field_name = field_name
        self.message = message
        super().__init__(f"[K001] Config validation failed for '{field_name}': {message}")


@dataclass(frozen=True)
class CodecConfig:
    """
    Immutable codec settings.

    Attributes:
        float_precision: Decimal digits slider min, max and step are
            rounded to when a slider is built. The stored values are the
            ones serialized and decoded against.
        step_tolerance: How far a slider default may sit from a step
            boundary and still count as aligned.
        enforce_step_alignment: When True, the decoder rejects slider
            replies that are in range but not on a step boundary.
        max_reply_length: Largest raw JSON reply text ``decode_json``
            will attempt to parse.
    """
    float_precision: int = 6
    step_tolerance: float = 1e-9
    enforce_step_alignment: bool = False
    max_reply_length: int = 64 * 1024

    def __post_init__(self):
        if isinstance(self.float_precision, bool) or not isinstance(self.float_precision, int):
            raise ConfigValidationError("float_precision", "must be an int")
        if not 0 <= self.float_precision <= 15:
            raise ConfigValidationError("float_precision", "must be between 0 and 15")
        if isinstance(self.step_tolerance, bool) or not isinstance(self.step_tolerance, (int, float)):
            raise ConfigValidationError("step_tolerance", "must be a number")
        if self.step_tolerance < 0:
            raise ConfigValidationError("step_tolerance", "must be non-negative")
        if not isinstance(self.enforce_step_alignment, bool):
            raise ConfigValidationError("enforce_step_alignment", "must be a bool")
        if isinstance(self.max_reply_length, bool) or not isinstance(self.max_reply_length, int):
            raise ConfigValidationError("max_reply_length", "must be an int")
        if self.max_reply_length <= 0:
            raise ConfigValidationError("max_reply_length", "must be positive")


DEFAULT_CONFIG = CodecConfig()
