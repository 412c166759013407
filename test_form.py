"""
test_form.py

Tests for formwire Form Variants and their builders.

Validates:
- Required fields are enforced by build() and by direct construction
- The first missing field is the one reported
- Optional-button sugar only calls the real setter when asked
- Component order is preserved exactly
- Forms are immutable and compare structurally
- Translators are applied to user-visible strings
"""

import pytest

from formwire.builder import CustomFormBuilder, FormBuilder, ModalFormBuilder, SimpleFormBuilder
from formwire.component import (
    ComponentType,
    DropdownComponent,
    InputComponent,
    LabelComponent,
    SliderComponent,
)
from formwire.errors import (
    FormImmutabilityError,
    IncompleteFormError,
    InvalidComponentError,
    InvalidFormError,
)
from formwire.form import Button, CustomForm, FormImage, FormType, ModalForm, SimpleForm


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def modal_form() -> ModalForm:
    return (
        ModalForm.builder()
        .title("Confirm")
        .content("Are you sure?")
        .button1("Yes")
        .button2("No")
        .build()
    )


def _upper(text: str, locale: str) -> str:
    return f"{text.upper()}@{locale}"


# =============================================================================
# Test: ModalForm
# =============================================================================

class TestModalFormBuilder:
    """Tests for ModalForm.builder()."""

    def test_builder_type(self):
        """builder() returns a ModalFormBuilder."""
        assert isinstance(ModalForm.builder(), ModalFormBuilder)

    def test_base_builder_is_abstract(self):
        """FormBuilder itself cannot build anything."""
        with pytest.raises(TypeError):
            FormBuilder()

    def test_complete_build(self, modal_form):
        """All fields set produces a ModalForm."""
        assert modal_form.type == FormType.MODAL
        assert modal_form.title == "Confirm"
        assert modal_form.content == "Are you sure?"
        assert modal_form.buttons == ("Yes", "No")
        assert modal_form.button_count == 2

    def test_title_only_names_content(self):
        """Missing content is the first missing field after title."""
        with pytest.raises(IncompleteFormError) as exc_info:
            ModalForm.builder().title("t").build()
        assert exc_info.value.missing_field == "content"
        assert exc_info.value.error_code == "F001"

    def test_missing_title_reported_first(self):
        """Title is checked before anything else."""
        with pytest.raises(IncompleteFormError) as exc_info:
            ModalForm.builder().content("c").build()
        assert exc_info.value.missing_field == "title"

    def test_missing_button2(self):
        """Both buttons are required."""
        with pytest.raises(IncompleteFormError) as exc_info:
            ModalForm.builder().title("t").content("c").button1("Yes").build()
        assert exc_info.value.missing_field == "button2"

    def test_blank_button_is_incomplete(self):
        """A blank button counts as missing."""
        with pytest.raises(IncompleteFormError) as exc_info:
            ModalForm.builder().title("t").content("c").button1(" ").button2("No").build()
        assert exc_info.value.missing_field == "button1"

    def test_empty_content_allowed(self):
        """Content must be set but may be empty."""
        form = ModalForm.builder().title("t").content("").button1("a").button2("b").build()
        assert form.content == ""

    def test_optional_button_added(self):
        """optional_button1 with should_add=True sets the button."""
        form = (
            ModalForm.builder()
            .title("t").content("c")
            .optional_button1("Yes", True)
            .button2("No")
            .build()
        )
        assert form.button1 == "Yes"

    def test_optional_button_skipped_still_validated(self):
        """A skipped optional button leaves the form incomplete."""
        builder = ModalForm.builder().title("t").content("c").button1("Yes").optional_button2("No", False)
        with pytest.raises(IncompleteFormError) as exc_info:
            builder.build()
        assert exc_info.value.missing_field == "button2"

    def test_of_matches_builder(self, modal_form):
        """ModalForm.of builds the same form as the builder."""
        assert ModalForm.of("Confirm", "Are you sure?", "Yes", "No") == modal_form

    def test_direct_construction_validates(self):
        """The constructor enforces the same rules."""
        with pytest.raises(IncompleteFormError):
            ModalForm("t", "c", "a", None)

    def test_wrong_type_field(self):
        """A non-string field is invalid rather than incomplete."""
        with pytest.raises(InvalidFormError) as exc_info:
            ModalForm("t", "c", 1, "b")
        assert exc_info.value.field_name == "button1"


# =============================================================================
# Test: SimpleForm
# =============================================================================

class TestSimpleFormBuilder:
    """Tests for SimpleForm.builder()."""

    def test_builder_type(self):
        """builder() returns a SimpleFormBuilder."""
        assert isinstance(SimpleForm.builder(), SimpleFormBuilder)

    def test_title_only(self):
        """A simple form with no buttons is valid."""
        form = SimpleForm.builder().title("Info").build()
        assert form.content == ""
        assert form.buttons == ()
        assert form.button_count == 0

    def test_missing_title(self):
        """Title is required."""
        with pytest.raises(IncompleteFormError) as exc_info:
            SimpleForm.builder().content("c").build()
        assert exc_info.value.missing_field == "title"

    def test_buttons_in_order(self):
        """Buttons keep call order; images are attached."""
        form = (
            SimpleForm.builder()
            .title("Menu")
            .button("Play")
            .button("Shop", FormImage.Type.URL, "https://example.com/shop.png")
            .button("Quit", "path", "textures/quit.png")
            .build()
        )
        assert [b.text for b in form.buttons] == ["Play", "Shop", "Quit"]
        assert form.buttons[0].image is None
        assert form.buttons[1].image == FormImage(FormImage.Type.URL, "https://example.com/shop.png")
        assert form.buttons[2].image.type == FormImage.Type.PATH

    def test_image_requires_both_parts(self):
        """image_type without image_data is rejected."""
        with pytest.raises(InvalidFormError):
            SimpleForm.builder().title("t").button("x", FormImage.Type.URL)

    def test_optional_button(self):
        """optional_button only appends when asked."""
        form = (
            SimpleForm.builder()
            .title("Menu")
            .optional_button("Admin", False)
            .optional_button("Play", True)
            .build()
        )
        assert [b.text for b in form.buttons] == ["Play"]

    def test_blank_button_rejected(self):
        """Button text cannot be blank."""
        with pytest.raises(InvalidFormError):
            SimpleForm.builder().button("")

    def test_unknown_image_type(self):
        """Only path and url images exist."""
        with pytest.raises(InvalidFormError) as exc_info:
            FormImage("ftp", "x")
        assert exc_info.value.field_name == "image.type"

    def test_builder_list_not_shared(self):
        """Building twice does not share button storage with the form."""
        builder = SimpleForm.builder().title("Menu").button("A")
        first = builder.build()
        builder.button("B")
        assert len(first.buttons) == 1
        assert len(builder.build().buttons) == 2

    def test_non_button_rejected(self):
        """Direct construction checks button types."""
        with pytest.raises(InvalidFormError) as exc_info:
            SimpleForm("t", "c", ["Play"])
        assert exc_info.value.field_name == "buttons[0]"


# =============================================================================
# Test: CustomForm
# =============================================================================

class TestCustomFormBuilder:
    """Tests for CustomForm.builder()."""

    def test_builder_type(self):
        """builder() returns a CustomFormBuilder."""
        assert isinstance(CustomForm.builder(), CustomFormBuilder)

    def test_empty_custom_form(self):
        """A custom form may have no components."""
        form = CustomForm.builder().title("Empty").build()
        assert form.components == ()
        assert form.icon is None

    def test_order_preserved(self):
        """Components appear in call order."""
        form = (
            CustomForm.builder()
            .title("Settings")
            .label("Audio")
            .toggle("Sounds", True)
            .slider("Volume", 0, 100, 10, 50)
            .input("Name", "Steve")
            .step_slider("Size", ["S", "M", "L"], 1)
            .dropdown("Mode", ["a", "b"])
            .build()
        )
        assert [c.type for c in form.components] == [
            ComponentType.LABEL,
            ComponentType.TOGGLE,
            ComponentType.SLIDER,
            ComponentType.INPUT,
            ComponentType.STEP_SLIDER,
            ComponentType.DROPDOWN,
        ]

    def test_invalid_component_fails_at_setter(self):
        """Component constraints fail when the setter is called, not at build()."""
        builder = CustomForm.builder().title("t")
        with pytest.raises(InvalidComponentError) as exc_info:
            builder.slider("Volume", 10, 0)
        assert exc_info.value.field_name == "slider.max"
        assert builder.build().components == ()

    def test_optional_components(self):
        """optional_* setters only append when asked."""
        form = (
            CustomForm.builder()
            .title("t")
            .optional_label("hidden", False)
            .optional_toggle("shown", True)
            .optional_input("hidden", False)
            .optional_slider("hidden", False, 0, 10)
            .optional_step_slider("shown", True, ["a"])
            .optional_dropdown("hidden", False, ["a"])
            .optional_component(LabelComponent("shown"), True)
            .build()
        )
        assert [c.text for c in form.components] == ["shown", "shown", "shown"]

    def test_prebuilt_component(self):
        """component() accepts an existing Component."""
        dropdown = DropdownComponent("Pick", ["a", "b"])
        form = CustomForm.builder().title("t").component(dropdown).build()
        assert form.components == (dropdown,)

    def test_component_rejects_non_component(self):
        """component() requires a Component."""
        with pytest.raises(InvalidFormError):
            CustomForm.builder().component("label")

    def test_icon(self):
        """An icon can be attached."""
        form = CustomForm.builder().title("t").icon(FormImage.Type.PATH, "textures/gear.png").build()
        assert form.icon == FormImage(FormImage.Type.PATH, "textures/gear.png")

    def test_default_reply(self):
        """default_reply lists each component's default in order."""
        form = CustomForm.of("t", [
            LabelComponent("l"),
            InputComponent("i", default_value="x"),
            SliderComponent("s", 0, 10, 1, 3),
        ])
        assert form.default_reply() == [None, "x", 3.0]


# =============================================================================
# Test: Translator
# =============================================================================

class TestTranslator:
    """Tests for builder translators."""

    def test_modal_strings_translated(self):
        """Title, content and buttons are translated with the locale."""
        form = (
            ModalForm.builder()
            .translator(_upper, "de_DE")
            .title("t").content("c").button1("yes").button2("no")
            .build()
        )
        assert form.title == "T@de_DE"
        assert form.content == "C@de_DE"
        assert form.buttons == ("YES@de_DE", "NO@de_DE")

    def test_default_locale(self):
        """The default locale is en_US."""
        form = SimpleForm.builder().translator(_upper).title("menu").button("play").build()
        assert form.title == "MENU@en_US"
        assert form.buttons[0].text == "PLAY@en_US"

    def test_custom_form_choices_translated(self):
        """Component text and choices are translated, input defaults are not."""
        form = (
            CustomForm.builder()
            .translator(_upper, "fr")
            .title("t")
            .input("name", "hint", "keep")
            .dropdown("mode", ["easy", "hard"])
            .build()
        )
        name, mode = form.components
        assert name.text == "NAME@fr"
        assert name.placeholder == "HINT@fr"
        assert name.default_value == "keep"
        assert mode.options == ("EASY@fr", "HARD@fr")

    def test_strings_set_before_translator_untouched(self):
        """Only strings set after translator() are translated."""
        form = SimpleForm.builder().title("menu").translator(_upper).build()
        assert form.title == "menu"

    def test_translator_must_be_callable(self):
        """A non-callable translator is rejected."""
        with pytest.raises(InvalidFormError):
            SimpleForm.builder().translator("nope")


# =============================================================================
# Test: Immutability and equality
# =============================================================================

class TestFormValueSemantics:
    """Forms are immutable value objects."""

    def test_cannot_set_attribute(self, modal_form):
        """Assignment after construction is rejected."""
        with pytest.raises(FormImmutabilityError):
            modal_form._title = "changed"

    def test_cannot_delete_attribute(self, modal_form):
        """Deletion is rejected."""
        with pytest.raises(FormImmutabilityError):
            del modal_form._button1

    def test_structural_equality(self):
        """Forms with equal fields are equal and hash the same."""
        first = SimpleForm.of("t", "c", [Button("a")])
        second = SimpleForm.of("t", "c", (Button("a"),))
        assert first == second
        assert hash(first) == hash(second)

    def test_different_shapes_not_equal(self):
        """A modal and a simple form are never equal."""
        assert ModalForm.of("t", "c", "a", "b") != SimpleForm.of("t", "c", [Button("a"), Button("b")])

    def test_repr(self):
        """repr names the form type and title."""
        assert repr(CustomForm.of("Settings")) == "CustomForm(title='Settings', components=0)"
