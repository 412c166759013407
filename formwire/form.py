"""
form.py

formwire Form Variants

A Form is the immutable schema sent to a client. There are three shapes:

- ModalForm: title, content and exactly two buttons
- SimpleForm: title, content and a list of buttons (each optionally with an image)
- CustomForm: title and an ordered list of Components

The same Form instance is consulted twice: once to serialize it for the
client, and again to decode the client's reply. It therefore never
changes after construction.

Design Invariants:
- Immutable after construction
- Required fields validated on construction
- Structural equality based on the serialized document
- Component order in a CustomForm is preserved exactly
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Tuple

from formwire.component import Component
from formwire.config import DEFAULT_CONFIG, CodecConfig
from formwire.errors import (
    FormImmutabilityError,
    IncompleteFormError,
    InvalidFormError,
)

if TYPE_CHECKING:
    from formwire.builder import CustomFormBuilder, ModalFormBuilder, SimpleFormBuilder
    from formwire.response import DecodeResult

# Save reference to built-in type before any shadowing
_builtin_type = type


class FormType(Enum):
    """The shape of a form. Values are the wire discriminators."""
    MODAL = "modal"
    SIMPLE = "form"
    CUSTOM = "custom_form"


def _require_text(value: Any, field_name: str, *, allow_empty: bool = False) -> str:
    """Validate a required string field; a missing or blank value is incomplete."""
    if value is None:
        raise IncompleteFormError(field_name)
    if not isinstance(value, str):
        raise InvalidFormError(field_name, f"must be str, got {_builtin_type(value).__name__}")
    if not allow_empty and not value.strip():
        raise IncompleteFormError(field_name)
    return value


# =============================================================================
# FormImage / Button
# =============================================================================

@dataclass(frozen=True)
class FormImage:
    """
    An image shown next to a button or as a custom form icon.

    ``data`` is a resource path or a URL depending on ``type``.
    """

    class Type(Enum):
        PATH = "path"
        URL = "url"

    type: "FormImage.Type"
    data: str

    def __post_init__(self):
        if isinstance(self.type, str):
            try:
                object.__setattr__(self, "type", FormImage.Type(self.type.lower()))
            except ValueError:
                raise InvalidFormError("image.type", f"unknown image type {self.type!r}")
        elif not isinstance(self.type, FormImage.Type):
            raise InvalidFormError("image.type", f"must be FormImage.Type, got {_builtin_type(self.type).__name__}")
        if not isinstance(self.data, str):
            raise InvalidFormError("image.data", f"must be str, got {_builtin_type(self.data).__name__}")
        if not self.data.strip():
            raise InvalidFormError("image.data", "cannot be empty")

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.type.value, "data": self.data}

    @classmethod
    def of(cls, image_type: "FormImage.Type | str", data: str) -> "FormImage":
        return cls(type=image_type, data=data)


@dataclass(frozen=True)
class Button:
    """A SimpleForm button."""
    text: str
    image: Optional[FormImage] = None

    def __post_init__(self):
        if not isinstance(self.text, str):
            raise InvalidFormError("button.text", f"must be str, got {_builtin_type(self.text).__name__}")
        if not self.text.strip():
            raise InvalidFormError("button.text", "cannot be empty")
        if self.image is not None and not isinstance(self.image, FormImage):
            raise InvalidFormError("button.image", f"must be FormImage, got {_builtin_type(self.image).__name__}")

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"text": self.text}
        if self.image is not None:
            result["image"] = self.image.to_dict()
        return result


# =============================================================================
# Form base
# =============================================================================

class Form:
    """
    Base class of all form variants.

    Subclasses validate their own fields, then call ``_freeze()`` as the
    last step of ``__init__``.
    """

    __slots__ = ('_title', '_frozen')

    form_type: FormType

    def __init__(self, title: str):
        object.__setattr__(self, '_frozen', False)
        self._title = _require_text(title, "title")

    def _freeze(self) -> None:
        object.__setattr__(self, '_frozen', True)

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, '_frozen', False):
            raise FormImmutabilityError(name)
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        raise FormImmutabilityError(name)

    @property
    def type(self) -> FormType:
        return self.form_type

    @property
    def title(self) -> str:
        return self._title

    # === Serialization ===

    def to_dict(self, *, config: CodecConfig = DEFAULT_CONFIG) -> Dict[str, Any]:
        """Convert to the wire document. Shape depends on the form type."""
        return {"type": self.form_type.value, "title": self._title}

    def to_json(self, *, config: CodecConfig = DEFAULT_CONFIG, indent: Optional[int] = None) -> str:
        """
        Serialize to JSON.

        Keys are sorted and separators are fixed, so identical forms
        always produce identical text.
        """
        separators = (',', ':') if indent is None else None
        return json.dumps(
            self.to_dict(config=config),
            sort_keys=True,
            ensure_ascii=False,
            indent=indent,
            separators=separators,
        )

    # === Decoding ===

    def parse_response(self, raw_reply: Any, *, config: CodecConfig = DEFAULT_CONFIG) -> "DecodeResult":
        """Decode a client's reply against this form. Never raises for bad input."""
        from formwire.decoder import decode
        return decode(self, raw_reply, config=config)

    # === Comparison ===

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Form):
            return NotImplemented
        return self.to_json() == other.to_json()

    def __hash__(self) -> int:
        return hash(self.to_json())

    def __repr__(self) -> str:
        return f"{_builtin_type(self).__name__}(title={self._title!r})"


# =============================================================================
# ModalForm
# =============================================================================

class ModalForm(Form):
    """
    The most basic form: a title, a description and two buttons.

    The client replies with the index of the clicked button (0 or 1).
    """

    __slots__ = ('_content', '_button1', '_button2')

    form_type = FormType.MODAL

    def __init__(self, title: str, content: str, button1: str, button2: str):
        super().__init__(title)
        self._content = _require_text(content, "content", allow_empty=True)
        self._button1 = _require_text(button1, "button1")
        self._button2 = _require_text(button2, "button2")
        self._freeze()

    @staticmethod
    def builder() -> "ModalFormBuilder":
        """Return a new ModalForm builder."""
        from formwire.builder import ModalFormBuilder
        return ModalFormBuilder()

    @classmethod
    def of(cls, title: str, content: str, button1: str, button2: str) -> "ModalForm":
        return cls(title, content, button1, button2)

    @property
    def content(self) -> str:
        return self._content

    @property
    def button1(self) -> str:
        return self._button1

    @property
    def button2(self) -> str:
        return self._button2

    @property
    def buttons(self) -> Tuple[str, str]:
        return (self._button1, self._button2)

    @property
    def button_count(self) -> int:
        return 2

    def to_dict(self, *, config: CodecConfig = DEFAULT_CONFIG) -> Dict[str, Any]:
        result = super().to_dict(config=config)
        result["content"] = self._content
        result["button1"] = self._button1
        result["button2"] = self._button2
        return result


# =============================================================================
# SimpleForm
# =============================================================================

class SimpleForm(Form):
    """
    A title, a description and any number of buttons.

    With no buttons the client can only close the form.
    """

    __slots__ = ('_content', '_buttons')

    form_type = FormType.SIMPLE

    def __init__(self, title: str, content: str = "", buttons: Optional[Sequence[Button]] = None):
        super().__init__(title)
        self._content = _require_text(content, "content", allow_empty=True)
        if buttons is None:
            buttons = ()
        if not isinstance(buttons, (list, tuple)):
            raise InvalidFormError("buttons", f"must be a list, got {_builtin_type(buttons).__name__}")
        for i, button in enumerate(buttons):
            if not isinstance(button, Button):
                raise InvalidFormError(f"buttons[{i}]", f"must be Button, got {_builtin_type(button).__name__}")
        self._buttons = tuple(buttons)
        self._freeze()

    @staticmethod
    def builder() -> "SimpleFormBuilder":
        """Return a new SimpleForm builder."""
        from formwire.builder import SimpleFormBuilder
        return SimpleFormBuilder()

    @classmethod
    def of(cls, title: str, content: str = "", buttons: Optional[Sequence[Button]] = None) -> "SimpleForm":
        return cls(title, content, buttons)

    @property
    def content(self) -> str:
        return self._content

    @property
    def buttons(self) -> Tuple[Button, ...]:
        return self._buttons

    @property
    def button_count(self) -> int:
        return len(self._buttons)

    def to_dict(self, *, config: CodecConfig = DEFAULT_CONFIG) -> Dict[str, Any]:
        result = super().to_dict(config=config)
        result["content"] = self._content
        result["buttons"] = [button.to_dict() for button in self._buttons]
        return result

    def __repr__(self) -> str:
        return f"SimpleForm(title={self._title!r}, buttons={len(self._buttons)})"


# =============================================================================
# CustomForm
# =============================================================================

class CustomForm(Form):
    """
    A title, an optional icon and an ordered list of components.

    The client replies with one value per component, in the same order.
    """

    __slots__ = ('_components', '_icon')

    form_type = FormType.CUSTOM

    def __init__(
        self,
        title: str,
        components: Optional[Sequence[Component]] = None,
        icon: Optional[FormImage] = None,
    ):
        super().__init__(title)
        if components is None:
            components = ()
        if not isinstance(components, (list, tuple)):
            raise InvalidFormError("components", f"must be a list, got {_builtin_type(components).__name__}")
        for i, component in enumerate(components):
            if not isinstance(component, Component):
                raise InvalidFormError(
                    f"components[{i}]",
                    f"must be Component, got {_builtin_type(component).__name__}",
                )
        if icon is not None and not isinstance(icon, FormImage):
            raise InvalidFormError("icon", f"must be FormImage, got {_builtin_type(icon).__name__}")
        self._components = tuple(components)
        self._icon = icon
        self._freeze()

    @staticmethod
    def builder(*, config: CodecConfig = DEFAULT_CONFIG) -> "CustomFormBuilder":
        """Return a new CustomForm builder whose sliders are built with ``config``."""
        from formwire.builder import CustomFormBuilder
        return CustomFormBuilder(config=config)

    @classmethod
    def of(
        cls,
        title: str,
        components: Optional[Sequence[Component]] = None,
        icon: Optional[FormImage] = None,
    ) -> "CustomForm":
        return cls(title, components, icon)

    @property
    def components(self) -> Tuple[Component, ...]:
        return self._components

    @property
    def icon(self) -> Optional[FormImage]:
        return self._icon

    def to_dict(self, *, config: CodecConfig = DEFAULT_CONFIG) -> Dict[str, Any]:
        result = super().to_dict(config=config)
        if self._icon is not None:
            result["icon"] = self._icon.to_dict()
        result["content"] = [component.to_dict(config=config) for component in self._components]
        return result

    def default_reply(self) -> List[Any]:
        """The reply a client sends when the user submits without changing anything."""
        return [component.default_value for component in self._components]

    def __repr__(self) -> str:
        return f"CustomForm(title={self._title!r}, components={len(self._components)})"
