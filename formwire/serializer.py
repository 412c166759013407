"""
serializer.py

formwire Serializer

Maps a Form to the document sent over the wire, and back.

Every document carries a ``type`` discriminator (``modal``, ``form`` or
``custom_form``) so a generic client can render it without knowing the
form in advance. The document layout is exactly what the decoder assumes
when it later reads the matching reply.

Guarantees:
- serialize() is pure and total for any constructed Form
- Identical forms always produce identical JSON (sorted keys, fixed separators)
- Component and button order are preserved
"""

import json
from typing import Any, Callable, Dict, Optional, Union

from formwire.component import components_from_list
from formwire.config import DEFAULT_CONFIG, CodecConfig
from formwire.errors import InvalidFormDocumentError, InvalidFormError
from formwire.form import Button, CustomForm, Form, FormImage, FormType, ModalForm, SimpleForm


def serialize(form: Form, *, config: CodecConfig = DEFAULT_CONFIG) -> Dict[str, Any]:
    """
    Convert a form to its wire document.

    Raises:
        InvalidFormError: If ``form`` is not a Form.
    """
    if not isinstance(form, Form):
        raise InvalidFormError("form", f"must be Form, got {type(form).__name__}")
    return form.to_dict(config=config)


def serialize_json(
    form: Form,
    *,
    config: CodecConfig = DEFAULT_CONFIG,
    indent: Optional[int] = None,
) -> str:
    """Serialize a form to deterministic JSON text."""
    if not isinstance(form, Form):
        raise InvalidFormError("form", f"must be Form, got {type(form).__name__}")
    return form.to_json(config=config, indent=indent)


# =============================================================================
# Deserialization
# =============================================================================

def _image_from(data: Any, field_name: str) -> Optional[FormImage]:
    if data is None:
        return None
    if not isinstance(data, dict):
        raise InvalidFormDocumentError(f"must be an object, got {type(data).__name__}", field_name=field_name)
    return FormImage.of(data.get("type"), data.get("data"))


def _read_modal(document: Dict[str, Any], config: CodecConfig) -> ModalForm:
    return ModalForm(
        document.get("title"),
        document.get("content"),
        document.get("button1"),
        document.get("button2"),
    )


def _read_simple(document: Dict[str, Any], config: CodecConfig) -> SimpleForm:
    raw_buttons = document.get("buttons", [])
    if not isinstance(raw_buttons, list):
        raise InvalidFormDocumentError(f"must be a list, got {type(raw_buttons).__name__}", field_name="buttons")
    buttons = []
    for i, raw in enumerate(raw_buttons):
        if not isinstance(raw, dict):
            raise InvalidFormDocumentError(f"must be an object, got {type(raw).__name__}", field_name=f"buttons[{i}]")
        buttons.append(Button(raw.get("text"), _image_from(raw.get("image"), f"buttons[{i}].image")))
    return SimpleForm(document.get("title"), document.get("content", ""), buttons)


def _read_custom(document: Dict[str, Any], config: CodecConfig) -> CustomForm:
    raw_components = document.get("content", [])
    if not isinstance(raw_components, list):
        raise InvalidFormDocumentError(
            f"must be a list, got {type(raw_components).__name__}",
            field_name="content",
        )
    return CustomForm(
        document.get("title"),
        components_from_list(raw_components, config=config),
        _image_from(document.get("icon"), "icon"),
    )


_FORM_READERS: Dict[FormType, Callable[[Dict[str, Any], CodecConfig], Form]] = {
    FormType.MODAL: _read_modal,
    FormType.SIMPLE: _read_simple,
    FormType.CUSTOM: _read_custom,
}


def deserialize(document: Dict[str, Any], *, config: CodecConfig = DEFAULT_CONFIG) -> Form:
    """
    Rebuild a Form from its wire document.

    Used when the form that produced a reply has to be reconstructed
    rather than kept in memory. Pass the same ``config`` the form was
    built with so slider values are normalized identically.

    Raises:
        InvalidFormDocumentError: If the document is not an object or has
            an unknown ``type``.
        FormwireError: Any construction error from the form or its
            components (missing title, bad slider bounds, ...).
    """
    if not isinstance(document, dict):
        raise InvalidFormDocumentError(f"document must be an object, got {type(document).__name__}")
    raw_type = document.get("type")
    try:
        form_type = FormType(raw_type)
    except ValueError:
        raise InvalidFormDocumentError(f"unknown form type {raw_type!r}", field_name="type")
    return _FORM_READERS[form_type](document, config)


def deserialize_json(text: Union[str, bytes], *, config: CodecConfig = DEFAULT_CONFIG) -> Form:
    """Rebuild a Form from JSON text."""
    try:
        document = json.loads(text)
    except ValueError as e:
        raise InvalidFormDocumentError(f"not valid JSON: {e}")
    return deserialize(document, config=config)

