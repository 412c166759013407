"""
component.py

formwire Component Model

A Component is one typed input element inside a custom form: a label,
a text input, a toggle, a slider, a step slider or a dropdown. The order
of components in a form is the positional contract the decoder uses to
match a client's reply, so components are pure, immutable value objects.

Design Invariants:
- Immutable once created
- All constraints validated in the constructor (never half-built)
- Structural equality (two components with the same fields are equal)
- Booleans are never accepted where a number or an index is expected
"""

import json
import math
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type

from formwire.config import DEFAULT_CONFIG, CodecConfig
from formwire.errors import ComponentImmutabilityError, InvalidComponentError

# Save reference to built-in type before any shadowing
_builtin_type = type


class ComponentType(Enum):
    """The kind of a component. Values are the wire discriminators."""
    LABEL = "label"
    INPUT = "input"
    TOGGLE = "toggle"
    SLIDER = "slider"
    STEP_SLIDER = "step_slider"
    DROPDOWN = "dropdown"


# =============================================================================
# Validation helpers
# =============================================================================

def _type_name(value: Any) -> str:
    return _builtin_type(value).__name__


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _require_text(value: Any, field_name: str) -> str:
    if value is None:
        raise InvalidComponentError(field_name, "is required", error_code="C001")
    if not isinstance(value, str):
        raise InvalidComponentError(field_name, f"must be str, got {_type_name(value)}", error_code="C002")
    if not value.strip():
        raise InvalidComponentError(field_name, "cannot be empty", error_code="C001")
    return value


def _require_str(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise InvalidComponentError(field_name, f"must be str, got {_type_name(value)}", error_code="C002")
    return value


def _require_number(value: Any, field_name: str) -> float:
    if not _is_number(value):
        raise InvalidComponentError(field_name, f"must be a number, got {_type_name(value)}", error_code="C002")
    if not math.isfinite(value):
        raise InvalidComponentError(field_name, f"must be finite, got {value}", error_code="C002")
    return float(value)


def _require_choices(value: Any, field_name: str) -> Tuple[str, ...]:
    if value is None:
        raise InvalidComponentError(field_name, "is required", error_code="C001")
    if not isinstance(value, (list, tuple)):
        raise InvalidComponentError(field_name, f"must be a list, got {_type_name(value)}", error_code="C002")
    if not value:
        raise InvalidComponentError(field_name, "must contain at least one entry", error_code="C006")
    for i, item in enumerate(value):
        _require_str(item, f"{field_name}[{i}]")
    return tuple(value)


def _require_index(value: Any, field_name: str, size: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidComponentError(field_name, f"must be int, got {_type_name(value)}", error_code="C002")
    if not 0 <= value < size:
        raise InvalidComponentError(
            field_name,
            f"must be between 0 and {size - 1}, got {value}",
            error_code="C007",
        )
    return value


# =============================================================================
# Component base
# =============================================================================

class Component(ABC):
    """
    Base class of all components.

    Subclasses validate their own fields, then call ``_freeze()`` as the
    last step of ``__init__``.
    """

    __slots__ = ('_type', '_text', '_frozen')

    def __init__(self, component_type: ComponentType, text: str):
        object.__setattr__(self, '_frozen', False)
        self._type = component_type
        self._text = _require_text(text, f"{component_type.value}.text")

    def _freeze(self) -> None:
        object.__setattr__(self, '_frozen', True)

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, '_frozen', False):
            raise ComponentImmutabilityError(name)
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        raise ComponentImmutabilityError(name)

    @property
    def type(self) -> ComponentType:
        return self._type

    @property
    def text(self) -> str:
        return self._text

    @property
    def default_value(self) -> Any:
        """The value a client shows before the user interacts."""
        return None

    def to_dict(self, *, config: CodecConfig = DEFAULT_CONFIG) -> Dict[str, Any]:
        """Convert to the wire document for this component."""
        return {"type": self._type.value, "text": self._text}

    def to_json(self, *, config: CodecConfig = DEFAULT_CONFIG) -> str:
        return json.dumps(self.to_dict(config=config), sort_keys=True, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], *, config: CodecConfig = DEFAULT_CONFIG) -> "Component":
        """
        Rebuild a component from its wire document.

        Dispatches on the ``type`` discriminator.

        Raises:
            InvalidComponentError: If the document is not a dict, names an
                unknown type, or carries values that violate the
                component's constraints.
        """
        if not isinstance(data, dict):
            raise InvalidComponentError("component", f"must be a dict, got {_type_name(data)}", error_code="C002")
        raw_type = data.get("type")
        try:
            component_type = ComponentType(raw_type)
        except ValueError:
            raise InvalidComponentError("type", f"unknown component type {raw_type!r}", error_code="C008")
        return _COMPONENT_CLASSES[component_type]._from_fields(data, config)

    @classmethod
    @abstractmethod
    def _from_fields(cls, data: Dict[str, Any], config: CodecConfig) -> "Component":
        """Build an instance of this kind from an already type-checked document."""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Component):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash(self.to_json())

    def __repr__(self) -> str:
        return f"{_builtin_type(self).__name__}(text={self._text!r})"


# =============================================================================
# Concrete components
# =============================================================================

class LabelComponent(Component):
    """Static text. Carries no user input but still occupies a reply slot."""

    __slots__ = ()

    def __init__(self, text: str):
        super().__init__(ComponentType.LABEL, text)
        self._freeze()

    @classmethod
    def _from_fields(cls, data: Dict[str, Any], config: CodecConfig) -> "LabelComponent":
        return cls(data.get("text"))


class InputComponent(Component):
    """Free text input."""

    __slots__ = ('_placeholder', '_default_value')

    def __init__(self, text: str, placeholder: str = "", default_value: str = ""):
        super().__init__(ComponentType.INPUT, text)
        self._placeholder = _require_str(placeholder, "input.placeholder")
        self._default_value = _require_str(default_value, "input.default_value")
        self._freeze()

    @property
    def placeholder(self) -> str:
        return self._placeholder

    @property
    def default_value(self) -> str:
        return self._default_value

    def to_dict(self, *, config: CodecConfig = DEFAULT_CONFIG) -> Dict[str, Any]:
        result = super().to_dict(config=config)
        result["placeholder"] = self._placeholder
        result["default"] = self._default_value
        return result

    @classmethod
    def _from_fields(cls, data: Dict[str, Any], config: CodecConfig) -> "InputComponent":
        return cls(data.get("text"), data.get("placeholder", ""), data.get("default", ""))

    def __repr__(self) -> str:
        return (
            f"InputComponent(text={self._text!r}, "
            f"placeholder={self._placeholder!r}, default={self._default_value!r})"
        )


class ToggleComponent(Component):
    """On/off switch."""

    __slots__ = ('_default_value',)

    def __init__(self, text: str, default_value: bool = False):
        super().__init__(ComponentType.TOGGLE, text)
        if not isinstance(default_value, bool):
            raise InvalidComponentError(
                "toggle.default_value",
                f"must be bool, got {_type_name(default_value)}",
                error_code="C002",
            )
        self._default_value = default_value
        self._freeze()

    @property
    def default_value(self) -> bool:
        return self._default_value

    def to_dict(self, *, config: CodecConfig = DEFAULT_CONFIG) -> Dict[str, Any]:
        result = super().to_dict(config=config)
        result["default"] = self._default_value
        return result

    @classmethod
    def _from_fields(cls, data: Dict[str, Any], config: CodecConfig) -> "ToggleComponent":
        return cls(data.get("text"), data.get("default", False))

    def __repr__(self) -> str:
        return f"ToggleComponent(text={self._text!r}, default={self._default_value!r})"


def _snap_to_step(value: float, minimum: float, maximum: float, step: float, tolerance: float) -> float:
    """
    Return ``value`` if it lies on ``minimum + k*step`` within tolerance,
    otherwise the nearest such point that does not exceed ``maximum``.
    """
    steps = (value - minimum) / step
    k = math.floor(steps + 0.5)
    snapped = minimum + k * step
    if abs(snapped - value) <= tolerance:
        return value
    if snapped > maximum + tolerance:
        snapped = minimum + (k - 1) * step
    # Strip accumulated float noise such as 0.30000000000000004
    snapped = round(snapped, 12)
    if snapped > maximum:
        return maximum
    if snapped < minimum:
        return minimum
    return snapped


class SliderComponent(Component):
    """
    Numeric slider over ``[min, max]`` moving in increments of ``step``.

    ``min``, ``max`` and ``step`` are rounded to ``config.float_precision``
    digits on construction, so the values kept here are exactly the ones
    written to the wire and checked by the decoder.

    A default that is in range but between two steps is snapped to the
    nearest step of that rounded grid. The snapped value is what
    ``default_value`` returns.
    """

    __slots__ = ('_min', '_max', '_step', '_default_value')

    def __init__(
        self,
        text: str,
        min: float,
        max: float,
        step: float = 1,
        default_value: Optional[float] = None,
        *,
        config: CodecConfig = DEFAULT_CONFIG,
    ):
        super().__init__(ComponentType.SLIDER, text)
        minimum = _require_number(min, "slider.min")
        maximum = _require_number(max, "slider.max")
        if minimum > maximum:
            raise InvalidComponentError(
                "slider.max",
                f"max ({maximum}) must not be less than min ({minimum})",
                error_code="C003",
            )
        step = _require_number(step, "slider.step")
        if step <= 0:
            raise InvalidComponentError("slider.step", f"step must be greater than 0, got {step}", error_code="C004")

        if default_value is None:
            default = minimum
        else:
            default = _require_number(default_value, "slider.default_value")
        if not minimum <= default <= maximum:
            raise InvalidComponentError(
                "slider.default_value",
                f"must be between {minimum} and {maximum}, got {default}",
                error_code="C005",
            )

        precision = config.float_precision
        minimum = round(minimum, precision)
        maximum = round(maximum, precision)
        step = round(step, precision)
        if step <= 0:
            raise InvalidComponentError(
                "slider.step",
                f"step rounds to 0 at {precision} decimal places",
                error_code="C004",
            )
        # Rounding can move a bound past a default that was in range
        if default < minimum:
            default = minimum
        elif default > maximum:
            default = maximum

        self._min = minimum
        self._max = maximum
        self._step = step
        self._default_value = _snap_to_step(default, minimum, maximum, step, config.step_tolerance)
        self._freeze()

    @property
    def min(self) -> float:
        return self._min

    @property
    def max(self) -> float:
        return self._max

    @property
    def step(self) -> float:
        return self._step

    @property
    def default_value(self) -> float:
        return self._default_value

    def is_step_aligned(self, value: float, tolerance: float) -> bool:
        """Whether ``value`` lies on ``min + k*step`` within tolerance."""
        steps = (value - self._min) / self._step
        return abs(steps - round(steps)) * self._step <= tolerance

    def to_dict(self, *, config: CodecConfig = DEFAULT_CONFIG) -> Dict[str, Any]:
        result = super().to_dict(config=config)
        result["min"] = self._min
        result["max"] = self._max
        result["step"] = self._step
        result["default"] = self._default_value
        return result

    @classmethod
    def _from_fields(cls, data: Dict[str, Any], config: CodecConfig) -> "SliderComponent":
        return cls(
            data.get("text"),
            data.get("min"),
            data.get("max"),
            data.get("step", 1),
            data.get("default"),
            config=config,
        )

    def __repr__(self) -> str:
        return (
            f"SliderComponent(text={self._text!r}, min={self._min}, max={self._max}, "
            f"step={self._step}, default={self._default_value})"
        )


class _ChoiceComponent(Component):
    """Shared shape of step sliders and dropdowns: labelled choices plus a default index."""

    __slots__ = ('_choices', '_default_index')

    _choices_field = "choices"
    _default_field = "default_index"

    def __init__(self, component_type: ComponentType, text: str, choices: Sequence[str], default_index: int):
        super().__init__(component_type, text)
        prefix = component_type.value
        self._choices = _require_choices(choices, f"{prefix}.{self._choices_field}")
        self._default_index = _require_index(default_index, f"{prefix}.{self._default_field}", len(self._choices))
        self._freeze()

    @property
    def option_count(self) -> int:
        return len(self._choices)

    @property
    def default_value(self) -> int:
        return self._default_index

    def to_dict(self, *, config: CodecConfig = DEFAULT_CONFIG) -> Dict[str, Any]:
        result = super().to_dict(config=config)
        result[self._choices_field] = list(self._choices)
        result["default"] = self._default_index
        return result

    @classmethod
    def _from_fields(cls, data: Dict[str, Any], config: CodecConfig) -> "_ChoiceComponent":
        return cls(data.get("text"), data.get(cls._choices_field), data.get("default", 0))

    def __repr__(self) -> str:
        return (
            f"{_builtin_type(self).__name__}(text={self._text!r}, "
            f"{self._choices_field}={list(self._choices)!r}, default={self._default_index})"
        )


class StepSliderComponent(_ChoiceComponent):
    """Slider over a fixed list of named steps."""

    __slots__ = ()

    _choices_field = "steps"
    _default_field = "default_step_index"

    def __init__(self, text: str, steps: Sequence[str], default_step_index: int = 0):
        super().__init__(ComponentType.STEP_SLIDER, text, steps, default_step_index)

    @property
    def steps(self) -> Tuple[str, ...]:
        return self._choices

    @property
    def default_step_index(self) -> int:
        return self._default_index


class DropdownComponent(_ChoiceComponent):
    """Pick one entry from a list of options."""

    __slots__ = ()

    _choices_field = "options"
    _default_field = "default_option_index"

    def __init__(self, text: str, options: Sequence[str], default_option_index: int = 0):
        super().__init__(ComponentType.DROPDOWN, text, options, default_option_index)

    @property
    def options(self) -> Tuple[str, ...]:
        return self._choices

    @property
    def default_option_index(self) -> int:
        return self._default_index


_COMPONENT_CLASSES: Dict[ComponentType, Type[Component]] = {
    ComponentType.LABEL: LabelComponent,
    ComponentType.INPUT: InputComponent,
    ComponentType.TOGGLE: ToggleComponent,
    ComponentType.SLIDER: SliderComponent,
    ComponentType.STEP_SLIDER: StepSliderComponent,
    ComponentType.DROPDOWN: DropdownComponent,
}


def components_from_list(
    data: List[Dict[str, Any]], *, config: CodecConfig = DEFAULT_CONFIG
) -> Tuple[Component, ...]:
    """Rebuild an ordered tuple of components from their wire documents."""
    return tuple(Component.from_dict(item, config=config) for item in data)
