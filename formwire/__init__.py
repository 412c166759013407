"""
formwire: Form Schema and Response Codec
==========================================

formwire describes small UI forms (a title, a description and an ordered
set of typed input components), serializes them for a remote client, and
decodes the client's untrusted reply back into typed, bounds-checked
values.

Three form shapes are supported:

- **ModalForm**: title, content and two buttons
- **SimpleForm**: title, content and a list of buttons with optional images
- **CustomForm**: title and an ordered list of components (label, input,
  toggle, slider, step slider, dropdown)

What's Public
-------------
Everything exported in ``__all__`` is public. Modules and symbols
prefixed with an underscore are internal.

Example
-------
::

    from formwire import CustomForm, serialize, decode

    form = (
        CustomForm.builder()
        .title("Settings")
        .toggle("Enable sounds", default_value=True)
        .dropdown("Difficulty", ["Easy", "Normal", "Hard"], default_option_index=1)
        .build()
    )

    document = serialize(form)           # hand to the transport
    result = decode(form, [False, 2])    # reply from the transport

    if result.is_valid:
        difficulty = result.as_dropdown(1)
    elif result.is_closed:
        ...
    else:
        print(result.reason, result.index, result.message)
"""

__version__ = "1.0.0"

__all__ = [
    # --- Package Metadata ---
    "__version__",

    # --- Configuration ---
    "CodecConfig",
    "DEFAULT_CONFIG",
    "ConfigValidationError",

    # --- Components ---
    "Component",
    "ComponentType",
    "LabelComponent",
    "InputComponent",
    "ToggleComponent",
    "SliderComponent",
    "StepSliderComponent",
    "DropdownComponent",

    # --- Forms ---
    "Form",
    "FormType",
    "FormImage",
    "Button",
    "ModalForm",
    "SimpleForm",
    "CustomForm",

    # --- Builders ---
    "FormBuilder",
    "ModalFormBuilder",
    "SimpleFormBuilder",
    "CustomFormBuilder",

    # --- Serializer ---
    "serialize",
    "serialize_json",
    "deserialize",
    "deserialize_json",

    # --- Decoder ---
    "FormResponseDecoder",
    "decode",
    "decode_json",

    # --- Decode outcomes ---
    "ResultType",
    "FailureReason",
    "Closed",
    "DecodeFailure",
    "DecodedValue",
    "ModalFormResponse",
    "SimpleFormResponse",
    "CustomFormResponse",

    # --- Exceptions ---
    "FormwireError",
    "InvalidComponentError",
    "ComponentImmutabilityError",
    "IncompleteFormError",
    "InvalidFormError",
    "InvalidFormDocumentError",
    "FormImmutabilityError",
    "ResponseAccessError",
]

from formwire.builder import (
    CustomFormBuilder,
    FormBuilder,
    ModalFormBuilder,
    SimpleFormBuilder,
)
from formwire.component import (
    Component,
    ComponentType,
    DropdownComponent,
    InputComponent,
    LabelComponent,
    SliderComponent,
    StepSliderComponent,
    ToggleComponent,
)
from formwire.config import DEFAULT_CONFIG, CodecConfig, ConfigValidationError
from formwire.decoder import FormResponseDecoder, decode, decode_json
from formwire.errors import (
    ComponentImmutabilityError,
    FormImmutabilityError,
    FormwireError,
    IncompleteFormError,
    InvalidComponentError,
    InvalidFormDocumentError,
    InvalidFormError,
    ResponseAccessError,
)
from formwire.form import (
    Button,
    CustomForm,
    Form,
    FormImage,
    FormType,
    ModalForm,
    SimpleForm,
)
from formwire.response import (
    Closed,
    CustomFormResponse,
    DecodedValue,
    DecodeFailure,
    FailureReason,
    ModalFormResponse,
    ResultType,
    SimpleFormResponse,
)
from formwire.serializer import deserialize, deserialize_json, serialize, serialize_json
