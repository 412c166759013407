"""
builder.py

formwire Builder Layer

Builders are transient, mutable accumulators for the fields of a form.
``build()`` is the only way to turn a builder into an immutable Form and
is where the required-field checks happen.

Builders are meant for a single owner: create one, chain setters, build,
discard. They are not safe for concurrent mutation.

Example:
    form = (
        CustomForm.builder()
        .title("Settings")
        .toggle("Enable sounds", default_value=True)
        .slider("Volume", 0, 100, step=5, default_value=50)
        .dropdown("Difficulty", ["Easy", "Normal", "Hard"], default_option_index=1)
        .build()
    )
"""

from abc import ABC, abstractmethod
from typing import Callable, Generic, List, Optional, Sequence, TypeVar

from formwire.component import (
    Component,
    DropdownComponent,
    InputComponent,
    LabelComponent,
    SliderComponent,
    StepSliderComponent,
    ToggleComponent,
)
from formwire.config import DEFAULT_CONFIG, CodecConfig
from formwire.errors import IncompleteFormError, InvalidFormError
from formwire.form import Button, CustomForm, Form, FormImage, ModalForm, SimpleForm

Translator = Callable[[str, str], str]

DEFAULT_LOCALE = "en_US"

B = TypeVar("B", bound="FormBuilder")
F = TypeVar("F", bound=Form)


class FormBuilder(ABC, Generic[F]):
    """
    Shared builder behaviour: the title and an optional translator.

    A translator is called as ``translator(text, locale)`` on every
    user-visible string at the moment it is set. Strings set before the
    translator was installed are left as they are.
    """

    def __init__(self):
        self._title: Optional[str] = None
        self._translator: Optional[Translator] = None
        self._locale: str = DEFAULT_LOCALE

    def translator(self: B, translator: Translator, locale: str = DEFAULT_LOCALE) -> B:
        if not callable(translator):
            raise InvalidFormError("translator", "must be callable")
        if not isinstance(locale, str) or not locale.strip():
            raise InvalidFormError("locale", "must be a non-empty str")
        self._translator = translator
        self._locale = locale
        return self

    def _translate(self, text: Optional[str]) -> Optional[str]:
        if text is None or self._translator is None:
            return text
        return self._translator(text, self._locale)

    def title(self: B, title: str) -> B:
        self._title = self._translate(title)
        return self

    @staticmethod
    def _require(value: Optional[str], field_name: str, *, allow_empty: bool = False) -> str:
        if value is None:
            raise IncompleteFormError(field_name)
        if isinstance(value, str) and not value.strip() and not allow_empty:
            raise IncompleteFormError(field_name)
        return value

    @abstractmethod
    def build(self) -> F:
        """Check required fields and return the immutable form."""


# =============================================================================
# ModalForm.Builder
# =============================================================================

class ModalFormBuilder(FormBuilder[ModalForm]):
    """Builder for ModalForm. Requires title, content, button1 and button2."""

    def __init__(self):
        super().__init__()
        self._content: Optional[str] = None
        self._button1: Optional[str] = None
        self._button2: Optional[str] = None

    def content(self, content: str) -> "ModalFormBuilder":
        self._content = self._translate(content)
        return self

    def button1(self, button1: str) -> "ModalFormBuilder":
        self._button1 = self._translate(button1)
        return self

    def optional_button1(self, button1: str, should_add: bool) -> "ModalFormBuilder":
        """Set the first button only when ``should_add`` is true."""
        if should_add:
            return self.button1(button1)
        return self

    def button2(self, button2: str) -> "ModalFormBuilder":
        self._button2 = self._translate(button2)
        return self

    def optional_button2(self, button2: str, should_add: bool) -> "ModalFormBuilder":
        """Set the second button only when ``should_add`` is true."""
        if should_add:
            return self.button2(button2)
        return self

    def build(self) -> ModalForm:
        """
        Build the ModalForm.

        Raises:
            IncompleteFormError: Naming the first missing field, checked in
                the order title, content, button1, button2.
        """
        return ModalForm(
            self._require(self._title, "title"),
            self._require(self._content, "content", allow_empty=True),
            self._require(self._button1, "button1"),
            self._require(self._button2, "button2"),
        )


# =============================================================================
# SimpleForm.Builder
# =============================================================================

class SimpleFormBuilder(FormBuilder[SimpleForm]):
    """Builder for SimpleForm. Only the title is required."""

    def __init__(self):
        super().__init__()
        self._content: str = ""
        self._buttons: List[Button] = []

    def content(self, content: str) -> "SimpleFormBuilder":
        self._content = self._translate(content)
        return self

    def button(
        self,
        text: str,
        image_type: Optional[FormImage.Type] = None,
        image_data: Optional[str] = None,
    ) -> "SimpleFormBuilder":
        """
        Append a button, optionally with an image.

        ``image_type`` and ``image_data`` must be given together.
        """
        image = None
        if image_type is not None or image_data is not None:
            if image_type is None or image_data is None:
                raise InvalidFormError("button.image", "image_type and image_data must be given together")
            image = FormImage.of(image_type, image_data)
        self._buttons.append(Button(self._translate(text), image))
        return self

    def optional_button(
        self,
        text: str,
        should_add: bool,
        image_type: Optional[FormImage.Type] = None,
        image_data: Optional[str] = None,
    ) -> "SimpleFormBuilder":
        """Append a button only when ``should_add`` is true."""
        if should_add:
            return self.button(text, image_type, image_data)
        return self

    def build(self) -> SimpleForm:
        return SimpleForm(self._require(self._title, "title"), self._content, self._buttons)


# =============================================================================
# CustomForm.Builder
# =============================================================================

class CustomFormBuilder(FormBuilder[CustomForm]):
    """
    Builder for CustomForm.

    Components are appended in call order; that order is the positional
    contract the decoder relies on. Each component is constructed (and
    validated) at the moment its setter is called.
    """

    def __init__(self, *, config: CodecConfig = DEFAULT_CONFIG):
        super().__init__()
        self._components: List[Component] = []
        self._icon: Optional[FormImage] = None
        self._config = config

    def icon(self, image_type: FormImage.Type, data: str) -> "CustomFormBuilder":
        self._icon = FormImage.of(image_type, data)
        return self

    def component(self, component: Component) -> "CustomFormBuilder":
        if not isinstance(component, Component):
            raise InvalidFormError("component", f"must be Component, got {type(component).__name__}")
        self._components.append(component)
        return self

    def optional_component(self, component: Component, should_add: bool) -> "CustomFormBuilder":
        if should_add:
            return self.component(component)
        return self

    def label(self, text: str) -> "CustomFormBuilder":
        return self.component(LabelComponent(self._translate(text)))

    def optional_label(self, text: str, should_add: bool) -> "CustomFormBuilder":
        if should_add:
            return self.label(text)
        return self

    def input(self, text: str, placeholder: str = "", default_value: str = "") -> "CustomFormBuilder":
        return self.component(InputComponent(
            self._translate(text),
            self._translate(placeholder) if placeholder else placeholder,
            default_value,
        ))

    def optional_input(
        self,
        text: str,
        should_add: bool,
        placeholder: str = "",
        default_value: str = "",
    ) -> "CustomFormBuilder":
        if should_add:
            return self.input(text, placeholder, default_value)
        return self

    def toggle(self, text: str, default_value: bool = False) -> "CustomFormBuilder":
        return self.component(ToggleComponent(self._translate(text), default_value))

    def optional_toggle(self, text: str, should_add: bool, default_value: bool = False) -> "CustomFormBuilder":
        if should_add:
            return self.toggle(text, default_value)
        return self

    def slider(
        self,
        text: str,
        min: float,
        max: float,
        step: float = 1,
        default_value: Optional[float] = None,
    ) -> "CustomFormBuilder":
        return self.component(SliderComponent(
            self._translate(text), min, max, step, default_value, config=self._config,
        ))

    def optional_slider(
        self,
        text: str,
        should_add: bool,
        min: float,
        max: float,
        step: float = 1,
        default_value: Optional[float] = None,
    ) -> "CustomFormBuilder":
        if should_add:
            return self.slider(text, min, max, step, default_value)
        return self

    def step_slider(self, text: str, steps: Sequence[str], default_step_index: int = 0) -> "CustomFormBuilder":
        return self.component(StepSliderComponent(
            self._translate(text), self._translate_all(steps), default_step_index,
        ))

    def optional_step_slider(
        self,
        text: str,
        should_add: bool,
        steps: Sequence[str],
        default_step_index: int = 0,
    ) -> "CustomFormBuilder":
        if should_add:
            return self.step_slider(text, steps, default_step_index)
        return self

    def dropdown(self, text: str, options: Sequence[str], default_option_index: int = 0) -> "CustomFormBuilder":
        return self.component(DropdownComponent(
            self._translate(text), self._translate_all(options), default_option_index,
        ))

    def optional_dropdown(
        self,
        text: str,
        should_add: bool,
        options: Sequence[str],
        default_option_index: int = 0,
    ) -> "CustomFormBuilder":
        if should_add:
            return self.dropdown(text, options, default_option_index)
        return self

    def _translate_all(self, texts: Sequence[str]) -> Sequence[str]:
        # Leave malformed input alone so the component reports it
        if self._translator is None or not isinstance(texts, (list, tuple)):
            return texts
        return [self._translate(t) if isinstance(t, str) else t for t in texts]

    def build(self) -> CustomForm:
        return CustomForm(self._require(self._title, "title"), self._components, self._icon)
