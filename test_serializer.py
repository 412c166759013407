"""
test_serializer.py

Tests for the formwire Serializer.

Validates:
- Each form type serializes to its documented wire shape
- Serialization is deterministic and preserves order
- Documents rebuild into equal forms
- Malformed documents are rejected with clear errors
"""

import json

import pytest

from formwire.component import DropdownComponent, InputComponent, LabelComponent, SliderComponent
from formwire.config import CodecConfig
from formwire.errors import (
    IncompleteFormError,
    InvalidComponentError,
    InvalidFormDocumentError,
    InvalidFormError,
)
from formwire.form import Button, CustomForm, FormImage, ModalForm, SimpleForm
from formwire.serializer import deserialize, deserialize_json, serialize, serialize_json


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def custom_form() -> CustomForm:
    return (
        CustomForm.builder()
        .title("Settings")
        .icon(FormImage.Type.URL, "https://example.com/gear.png")
        .label("Audio")
        .toggle("Sounds", True)
        .slider("Volume", 0, 1, 0.25, 0.5)
        .input("Name", "Steve", "Alex")
        .step_slider("Size", ["S", "M", "L"], 2)
        .dropdown("Mode", ["a", "b", "c"], 1)
        .build()
    )


@pytest.fixture
def simple_form() -> SimpleForm:
    return (
        SimpleForm.builder()
        .title("Menu")
        .content("Pick one")
        .button("Play")
        .button("Shop", FormImage.Type.PATH, "textures/shop.png")
        .build()
    )


# =============================================================================
# Test: document shapes
# =============================================================================

class TestSerialize:
    """Tests for serialize()."""

    def test_modal_document(self):
        """Modal forms carry title, content and both buttons."""
        form = ModalForm.of("Confirm", "Sure?", "Yes", "No")
        assert serialize(form) == {
            "type": "modal",
            "title": "Confirm",
            "content": "Sure?",
            "button1": "Yes",
            "button2": "No",
        }

    def test_simple_document(self, simple_form):
        """Simple forms list buttons; images only where set."""
        assert serialize(simple_form) == {
            "type": "form",
            "title": "Menu",
            "content": "Pick one",
            "buttons": [
                {"text": "Play"},
                {"text": "Shop", "image": {"type": "path", "data": "textures/shop.png"}},
            ],
        }

    def test_simple_document_without_buttons(self):
        """An empty button list is still present."""
        assert serialize(SimpleForm.of("Info"))["buttons"] == []

    def test_custom_document(self, custom_form):
        """Custom forms list components under content, in order."""
        document = serialize(custom_form)
        assert document["type"] == "custom_form"
        assert document["title"] == "Settings"
        assert document["icon"] == {"type": "url", "data": "https://example.com/gear.png"}
        assert [c["type"] for c in document["content"]] == [
            "label", "toggle", "slider", "input", "step_slider", "dropdown",
        ]
        assert document["content"][2] == {
            "type": "slider",
            "text": "Volume",
            "min": 0.0,
            "max": 1.0,
            "step": 0.25,
            "default": 0.5,
        }
        assert document["content"][4]["steps"] == ["S", "M", "L"]
        assert document["content"][4]["default"] == 2

    def test_custom_without_icon(self):
        """icon is omitted when not set."""
        assert "icon" not in serialize(CustomForm.of("t"))

    def test_not_a_form(self):
        """serialize() only accepts forms."""
        with pytest.raises(InvalidFormError):
            serialize({"type": "modal"})

    def test_precision_from_config(self):
        """Slider numbers honour the configured precision."""
        form = CustomForm.of("t", [SliderComponent("s", 0, 1, 1 / 3, config=CodecConfig(float_precision=2))])
        document = serialize(form)
        assert document["content"][0]["step"] == 0.33


class TestSerializeJson:
    """Tests for serialize_json()."""

    def test_deterministic(self, custom_form):
        """Serializing twice gives identical text."""
        assert serialize_json(custom_form) == serialize_json(custom_form)

    def test_equal_forms_same_text(self):
        """Independently built equal forms serialize identically."""
        first = CustomForm.of("t", [DropdownComponent("d", ["x", "y"])])
        second = CustomForm.builder().title("t").dropdown("d", ("x", "y")).build()
        assert serialize_json(first) == serialize_json(second)

    def test_compact_and_sorted(self):
        """Output is compact with sorted keys."""
        text = serialize_json(ModalForm.of("t", "c", "a", "b"))
        assert text == '{"button1":"a","button2":"b","content":"c","title":"t","type":"modal"}'

    def test_indent(self, simple_form):
        """indent pretty-prints and still parses to the same document."""
        text = serialize_json(simple_form, indent=2)
        assert "\n" in text
        assert json.loads(text) == serialize(simple_form)

    def test_unicode_preserved(self):
        """Non-ASCII text is emitted as-is."""
        text = serialize_json(SimpleForm.of("Menü", "Grüße"))
        assert "Menü" in text


# =============================================================================
# Test: deserialize
# =============================================================================

class TestDeserialize:
    """Tests for deserialize() / deserialize_json()."""

    def test_modal_round_trip(self):
        """A modal document rebuilds an equal form."""
        form = ModalForm.of("Confirm", "Sure?", "Yes", "No")
        assert deserialize(serialize(form)) == form

    def test_simple_round_trip(self, simple_form):
        """Button images survive a rebuild."""
        rebuilt = deserialize(serialize(simple_form))
        assert rebuilt == simple_form
        assert rebuilt.buttons[1] == Button("Shop", FormImage(FormImage.Type.PATH, "textures/shop.png"))

    def test_custom_round_trip_from_json(self, custom_form):
        """A custom form rebuilds from its JSON text."""
        rebuilt = deserialize_json(serialize_json(custom_form))
        assert isinstance(rebuilt, CustomForm)
        assert rebuilt == custom_form
        assert rebuilt.components[3] == InputComponent("Name", "Steve", "Alex")

    def test_unknown_form_type(self):
        """Unknown discriminators are rejected."""
        with pytest.raises(InvalidFormDocumentError) as exc_info:
            deserialize({"type": "wizard", "title": "t"})
        assert exc_info.value.field_name == "type"
        assert exc_info.value.error_code == "F003"

    def test_document_not_object(self):
        """A list is not a form document."""
        with pytest.raises(InvalidFormDocumentError):
            deserialize(["modal"])

    def test_invalid_json(self):
        """Broken JSON is reported as a document error."""
        with pytest.raises(InvalidFormDocumentError):
            deserialize_json("{not json")

    def test_missing_required_field(self):
        """A modal document without button2 is incomplete."""
        with pytest.raises(IncompleteFormError) as exc_info:
            deserialize({"type": "modal", "title": "t", "content": "c", "button1": "a"})
        assert exc_info.value.missing_field == "button2"

    def test_bad_component(self):
        """Component errors surface from custom documents."""
        document = {
            "type": "custom_form",
            "title": "t",
            "content": [{"type": "slider", "text": "s", "min": 5, "max": 1}],
        }
        with pytest.raises(InvalidComponentError):
            deserialize(document)

    def test_content_must_be_list(self):
        """Custom form content must be a list."""
        with pytest.raises(InvalidFormDocumentError) as exc_info:
            deserialize({"type": "custom_form", "title": "t", "content": {"type": "label"}})
        assert exc_info.value.field_name == "content"

    def test_buttons_must_be_objects(self):
        """Simple form buttons must be objects."""
        with pytest.raises(InvalidFormDocumentError) as exc_info:
            deserialize({"type": "form", "title": "t", "buttons": ["Play"]})
        assert exc_info.value.field_name == "buttons[0]"

    def test_label_only_form(self):
        """Labels rebuild from minimal documents."""
        form = deserialize({"type": "custom_form", "title": "t", "content": [{"type": "label", "text": "hi"}]})
        assert form.components == (LabelComponent("hi"),)
