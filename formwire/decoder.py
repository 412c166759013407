"""
decoder.py

formwire Response Decoder

Matches a client's raw reply against the form that was sent to it and
returns a typed response, Closed, or a DecodeFailure.

The raw reply is an already-parsed value (the transport owns framing):
- None means the client closed the form
- Modal/Simple forms expect a button index (an int, or a one-element
  list holding one)
- Custom forms expect a list with exactly one value per component

Design Invariants:
- Pure: (form, reply) -> result, no state kept between calls
- Never raises for client input; every problem is returned as data
- No partial results: a custom reply either decodes completely or fails
- The first failing position wins
"""

import json
import logging
import math
from typing import Any, Callable, Dict, List, Union

from formwire.component import (
    Component,
    ComponentType,
    SliderComponent,
    _ChoiceComponent,
)
from formwire.config import DEFAULT_CONFIG, CodecConfig
from formwire.errors import InvalidFormError
from formwire.form import CustomForm, Form, FormType, ModalForm, SimpleForm
from formwire.response import (
    Closed,
    CustomFormResponse,
    DecodedValue,
    DecodeFailure,
    DecodeResult,
    FailureReason,
    ModalFormResponse,
    SimpleFormResponse,
)

logger = logging.getLogger(__name__)


class _SlotFailure(Exception):
    """Internal signal carrying a failed slot; never escapes the decoder."""

    def __init__(self, reason: FailureReason, message: str, **details: Any):
        super().__init__(message)
        self.reason = reason
        self.message = message
        self.details = details


def _type_name(value: Any) -> str:
    return type(value).__name__


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# =============================================================================
# FormResponseDecoder
# =============================================================================

class FormResponseDecoder:
    """
    Decodes raw replies against forms.

    The decoder holds only an immutable CodecConfig, so one instance can
    be shared freely between concurrent callers.
    """

    __slots__ = ('_config', '_form_handlers', '_slot_handlers')

    def __init__(self, config: CodecConfig = DEFAULT_CONFIG):
        if not isinstance(config, CodecConfig):
            raise TypeError(f"config must be CodecConfig, got {_type_name(config)}")
        self._config = config
        self._form_handlers: Dict[FormType, Callable[[Any, Any], DecodeResult]] = {
            FormType.MODAL: self._decode_modal,
            FormType.SIMPLE: self._decode_simple,
            FormType.CUSTOM: self._decode_custom,
        }
        self._slot_handlers: Dict[ComponentType, Callable[[Component, Any], Any]] = {
            ComponentType.LABEL: self._decode_label,
            ComponentType.INPUT: self._decode_input,
            ComponentType.TOGGLE: self._decode_toggle,
            ComponentType.SLIDER: self._decode_slider,
            ComponentType.STEP_SLIDER: self._decode_choice,
            ComponentType.DROPDOWN: self._decode_choice,
        }

    @property
    def config(self) -> CodecConfig:
        return self._config

    def decode(self, form: Form, raw_reply: Any) -> DecodeResult:
        """
        Decode ``raw_reply`` against ``form``.

        This method performs the following steps in order:
        1. Closed detection
        2. Dispatch on the form type
        3. Button index or positional component validation

        Raises:
            InvalidFormError: If ``form`` is not a Form. This is a caller
                bug; malformed replies never raise.
        """
        if not isinstance(form, Form):
            raise InvalidFormError("form", f"must be Form, got {_type_name(form)}")

        # =====================================================================
        # Step 1: Closed detection
        # =====================================================================

        if raw_reply is None:
            logger.debug("%s form %r closed by client", form.type.value, form.title)
            return Closed(form.type)

        # =====================================================================
        # Step 2: Shape dispatch
        # =====================================================================

        result = self._form_handlers[form.type](form, raw_reply)
        if isinstance(result, DecodeFailure):
            logger.debug("Rejected reply for %s form %r: %s", form.type.value, form.title, result)
        return result

    def decode_json(self, form: Form, text: Union[str, bytes, None]) -> DecodeResult:
        """
        Decode a reply that is still JSON text.

        ``None``, blank text and ``null`` all mean the form was closed.
        Text that is too long or is not JSON yields MALFORMED_REPLY.
        """
        if not isinstance(form, Form):
            raise InvalidFormError("form", f"must be Form, got {_type_name(form)}")
        if text is None:
            return self.decode(form, None)

        if isinstance(text, (bytes, bytearray)):
            try:
                text = bytes(text).decode("utf-8")
            except UnicodeDecodeError as e:
                return self._malformed(form, f"reply is not valid UTF-8: {e.reason}")
        if not isinstance(text, str):
            return self._malformed(form, f"reply must be text, got {_type_name(text)}")

        if len(text) > self._config.max_reply_length:
            return self._malformed(
                form,
                f"reply is {len(text)} characters, limit is {self._config.max_reply_length}",
                length=len(text),
                limit=self._config.max_reply_length,
            )
        if not text.strip():
            return self.decode(form, None)

        try:
            raw_reply = json.loads(text)
        except (ValueError, RecursionError) as e:
            return self._malformed(form, f"reply is not valid JSON: {e}")
        return self.decode(form, raw_reply)

    def _malformed(self, form: Form, message: str, **details: Any) -> DecodeFailure:
        failure = DecodeFailure(
            reason=FailureReason.MALFORMED_REPLY,
            message=message,
            form_type=form.type,
            details=details,
        )
        logger.debug("Rejected reply for %s form %r: %s", form.type.value, form.title, failure)
        return failure

    # -------------------------------------------------------------------------
    # Modal / Simple
    # -------------------------------------------------------------------------

    def _button_index(self, form: Form, raw_reply: Any, button_count: int) -> Union[int, DecodeFailure]:
        value = raw_reply
        if isinstance(value, (list, tuple)):
            if len(value) != 1:
                return self._button_failure(
                    form,
                    f"expected a single button index, got {len(value)} values",
                    button_count,
                )
            value = value[0]
        if not _is_int(value):
            return self._button_failure(
                form,
                f"button index must be int, got {_type_name(value)}",
                button_count,
            )
        if not 0 <= value < button_count:
            return self._button_failure(
                form,
                f"button index {value} is out of range for {button_count} button(s)",
                button_count,
                value=value,
            )
        return value

    @staticmethod
    def _button_failure(form: Form, message: str, button_count: int, **details: Any) -> DecodeFailure:
        details["button_count"] = button_count
        return DecodeFailure(
            reason=FailureReason.INVALID_BUTTON_INDEX,
            message=message,
            form_type=form.type,
            details=details,
        )

    def _decode_modal(self, form: ModalForm, raw_reply: Any) -> DecodeResult:
        index = self._button_index(form, raw_reply, form.button_count)
        if isinstance(index, DecodeFailure):
            return index
        return ModalFormResponse(clicked_button_id=index, clicked_button_text=form.buttons[index])

    def _decode_simple(self, form: SimpleForm, raw_reply: Any) -> DecodeResult:
        index = self._button_index(form, raw_reply, form.button_count)
        if isinstance(index, DecodeFailure):
            return index
        return SimpleFormResponse(clicked_button_id=index, clicked_button=form.buttons[index])

    # -------------------------------------------------------------------------
    # Custom
    # -------------------------------------------------------------------------

    def _decode_custom(self, form: CustomForm, raw_reply: Any) -> DecodeResult:
        components = form.components
        expected = len(components)

        if not isinstance(raw_reply, (list, tuple)):
            return DecodeFailure(
                reason=FailureReason.ARITY_MISMATCH,
                message=f"expected a list of {expected} values, got {_type_name(raw_reply)}",
                form_type=form.type,
                details={"expected": expected},
            )
        if len(raw_reply) != expected:
            return DecodeFailure(
                reason=FailureReason.ARITY_MISMATCH,
                message=f"expected {expected} values, got {len(raw_reply)}",
                form_type=form.type,
                details={"expected": expected, "actual": len(raw_reply)},
            )

        values: List[DecodedValue] = []
        for index, (component, raw_value) in enumerate(zip(components, raw_reply)):
            try:
                value = self._slot_handlers[component.type](component, raw_value)
            except _SlotFailure as failure:
                details = dict(failure.details)
                details["default"] = component.default_value
                return DecodeFailure(
                    reason=failure.reason,
                    message=failure.message,
                    form_type=form.type,
                    index=index,
                    expected_type=component.type,
                    details=details,
                )
            values.append(DecodedValue(index=index, type=component.type, value=value))

        return CustomFormResponse(values=tuple(values))

    def _decode_label(self, component: Component, raw_value: Any) -> Any:
        return raw_value

    def _decode_input(self, component: Component, raw_value: Any) -> str:
        if not isinstance(raw_value, str):
            raise _SlotFailure(
                FailureReason.TYPE_MISMATCH,
                f"input '{component.text}' expects str, got {_type_name(raw_value)}",
            )
        return raw_value

    def _decode_toggle(self, component: Component, raw_value: Any) -> bool:
        if not isinstance(raw_value, bool):
            raise _SlotFailure(
                FailureReason.TYPE_MISMATCH,
                f"toggle '{component.text}' expects bool, got {_type_name(raw_value)}",
            )
        return raw_value

    def _decode_slider(self, component: SliderComponent, raw_value: Any) -> float:
        bounds = {"min": component.min, "max": component.max}
        if not _is_number(raw_value):
            raise _SlotFailure(
                FailureReason.TYPE_MISMATCH,
                f"slider '{component.text}' expects a number, got {_type_name(raw_value)}",
                **bounds,
            )
        try:
            value = float(raw_value)
        except OverflowError:
            raise _SlotFailure(
                FailureReason.RANGE_MISMATCH,
                f"slider '{component.text}' value is outside [{component.min}, {component.max}]",
                **bounds,
            )
        if not math.isfinite(value):
            raise _SlotFailure(
                FailureReason.TYPE_MISMATCH,
                f"slider '{component.text}' expects a finite number, got {value}",
                **bounds,
            )
        if not component.min <= value <= component.max:
            raise _SlotFailure(
                FailureReason.RANGE_MISMATCH,
                f"slider '{component.text}' value {value} is outside [{component.min}, {component.max}]",
                value=value,
                **bounds,
            )
        if self._config.enforce_step_alignment and not component.is_step_aligned(value, self._config.step_tolerance):
            raise _SlotFailure(
                FailureReason.RANGE_MISMATCH,
                f"slider '{component.text}' value {value} is not a multiple of step {component.step} from {component.min}",
                value=value,
                step=component.step,
                **bounds,
            )
        return value

    def _decode_choice(self, component: _ChoiceComponent, raw_value: Any) -> int:
        count = component.option_count
        if not _is_int(raw_value):
            raise _SlotFailure(
                FailureReason.TYPE_MISMATCH,
                f"{component.type.value} '{component.text}' expects an int index, got {_type_name(raw_value)}",
                option_count=count,
            )
        if not 0 <= raw_value < count:
            raise _SlotFailure(
                FailureReason.INDEX_OUT_OF_RANGE,
                f"{component.type.value} '{component.text}' index {raw_value} is out of range, "
                f"valid indices are 0 to {count - 1}",
                value=raw_value,
                option_count=count,
                max_index=count - 1,
            )
        return raw_value


# =============================================================================
# Module-level API
# =============================================================================

_DEFAULT_DECODER = FormResponseDecoder(DEFAULT_CONFIG)


def _decoder_for(config: CodecConfig) -> FormResponseDecoder:
    if config is DEFAULT_CONFIG:
        return _DEFAULT_DECODER
    return FormResponseDecoder(config)


def decode(form: Form, raw_reply: Any, *, config: CodecConfig = DEFAULT_CONFIG) -> DecodeResult:
    """Decode an already-parsed reply against ``form``."""
    return _decoder_for(config).decode(form, raw_reply)


def decode_json(form: Form, text: Union[str, bytes, None], *, config: CodecConfig = DEFAULT_CONFIG) -> DecodeResult:
    """Decode a JSON text reply against ``form``."""
    return _decoder_for(config).decode_json(form, text)
