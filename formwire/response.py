"""
response.py

formwire decode outcomes

Decoding a client's reply always produces exactly one of three things:

- a typed response (ModalFormResponse, SimpleFormResponse, CustomFormResponse)
- Closed: the client dismissed the form without submitting
- DecodeFailure: the reply does not fit the form it claims to answer

None of these are exceptions. A failure is routine when talking to an
untrusted client, and the caller decides whether to resend, log or drop.

Design Invariants:
- Immutable (frozen dataclasses)
- Closed is never a failure and never index 0
- A failure names the reason, and for custom forms the failing index
  and the component type expected there
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple, Union

from formwire.component import ComponentType
from formwire.errors import ResponseAccessError
from formwire.form import Button, FormType


class ResultType(Enum):
    """Which of the three outcomes a decode produced."""
    VALID = "valid"
    CLOSED = "closed"
    INVALID = "invalid"


class FailureReason(Enum):
    """Why a reply was rejected."""
    ARITY_MISMATCH = "arity_mismatch"
    INVALID_BUTTON_INDEX = "invalid_button_index"
    TYPE_MISMATCH = "type_mismatch"
    RANGE_MISMATCH = "range_mismatch"
    INDEX_OUT_OF_RANGE = "index_out_of_range"
    MALFORMED_REPLY = "malformed_reply"


class _Outcome:
    """Convenience accessors shared by every outcome type."""

    result_type: ResultType

    @property
    def is_valid(self) -> bool:
        return self.result_type == ResultType.VALID

    @property
    def is_closed(self) -> bool:
        return self.result_type == ResultType.CLOSED

    @property
    def is_invalid(self) -> bool:
        return self.result_type == ResultType.INVALID


# =============================================================================
# Closed / DecodeFailure
# =============================================================================

@dataclass(frozen=True)
class Closed(_Outcome):
    """The client closed the form without choosing or submitting anything."""
    form_type: FormType

    result_type = ResultType.CLOSED

    def to_dict(self) -> Dict[str, Any]:
        return {"form_type": self.form_type.value, "result": self.result_type.value}


@dataclass(frozen=True)
class DecodeFailure(_Outcome):
    """
    A reply that could not be matched against its form.

    Attributes:
        reason: The failure category.
        message: Human-readable explanation.
        form_type: The form the reply was decoded against.
        index: Position of the failing component (custom forms only).
        expected_type: Component type expected at ``index``.
        details: Extra diagnostics such as slider bounds or option counts.
    """
    reason: FailureReason
    message: str
    form_type: FormType
    index: Optional[int] = None
    expected_type: Optional[ComponentType] = None
    details: Dict[str, Any] = field(default_factory=dict, hash=False)

    result_type = ResultType.INVALID

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "details": dict(self.details),
            "form_type": self.form_type.value,
            "message": self.message,
            "reason": self.reason.value,
            "result": self.result_type.value,
        }
        if self.index is not None:
            result["index"] = self.index
        if self.expected_type is not None:
            result["expected_type"] = self.expected_type.value
        return result

    def __str__(self) -> str:
        location = f" at index {self.index}" if self.index is not None else ""
        return f"{self.reason.value}{location}: {self.message}"


# =============================================================================
# Typed responses
# =============================================================================

@dataclass(frozen=True)
class ModalFormResponse(_Outcome):
    """The button a client clicked on a ModalForm."""
    clicked_button_id: int
    clicked_button_text: str

    result_type = ResultType.VALID

    @property
    def clicked_first_button(self) -> bool:
        return self.clicked_button_id == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "clicked_button_id": self.clicked_button_id,
            "clicked_button_text": self.clicked_button_text,
            "result": self.result_type.value,
        }


@dataclass(frozen=True)
class SimpleFormResponse(_Outcome):
    """The button a client clicked on a SimpleForm."""
    clicked_button_id: int
    clicked_button: Button

    result_type = ResultType.VALID

    def to_dict(self) -> Dict[str, Any]:
        return {
            "clicked_button": self.clicked_button.to_dict(),
            "clicked_button_id": self.clicked_button_id,
            "result": self.result_type.value,
        }


@dataclass(frozen=True)
class DecodedValue:
    """One validated reply slot of a CustomForm, tagged with its component type."""
    index: int
    type: ComponentType
    # Label slots echo arbitrary JSON, which may be a list or dict
    value: Any = field(hash=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "type": self.type.value, "value": self.value}


@dataclass(frozen=True)
class CustomFormResponse(_Outcome):
    """
    All values a client submitted for a CustomForm, in component order.

    The typed accessors check the component type at that position, so
    reading a toggle slot as a slider raises ResponseAccessError.
    """
    values: Tuple[DecodedValue, ...]

    result_type = ResultType.VALID

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[DecodedValue]:
        return iter(self.values)

    def __getitem__(self, index: int) -> DecodedValue:
        return self.values[index]

    def value_at(self, index: int) -> Any:
        return self.values[index].value

    def _typed(self, index: int, expected: ComponentType) -> Any:
        decoded = self.values[index]
        if decoded.type != expected:
            raise ResponseAccessError(index, expected.value, decoded.type.value)
        return decoded.value

    def as_input(self, index: int) -> str:
        return self._typed(index, ComponentType.INPUT)

    def as_toggle(self, index: int) -> bool:
        return self._typed(index, ComponentType.TOGGLE)

    def as_slider(self, index: int) -> float:
        return self._typed(index, ComponentType.SLIDER)

    def as_step_slider(self, index: int) -> int:
        return self._typed(index, ComponentType.STEP_SLIDER)

    def as_dropdown(self, index: int) -> int:
        return self._typed(index, ComponentType.DROPDOWN)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "result": self.result_type.value,
            "values": [value.to_dict() for value in self.values],
        }


FormResponse = Union[ModalFormResponse, SimpleFormResponse, CustomFormResponse]
DecodeResult = Union[ModalFormResponse, SimpleFormResponse, CustomFormResponse, Closed, DecodeFailure]
