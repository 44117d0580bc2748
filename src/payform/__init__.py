"""
payform — data-driven payment form specs for Python.

Decodes form-spec schemas into typed field and next-action models, and
synthesizes country-dependent address fields.
"""

from payform.address import AdditionalFields, AddressSection, AddressSpecProvider, CollectionMode, Defaults
from payform.decoder import decode_field_spec, decode_form_spec, decode_next_action_spec, encode_field_spec
from payform.errors import PayFormError, MalformedFieldError, ConfigurationError
from payform.form import FormElement, FormFactory
from payform.provider import FormSpecProvider

__version__ = "0.1.0"
__all__ = [
    "AdditionalFields",
    "AddressSection",
    "AddressSpecProvider",
    "CollectionMode",
    "Defaults",
    "decode_field_spec",
    "decode_form_spec",
    "decode_next_action_spec",
    "encode_field_spec",
    "PayFormError",
    "MalformedFieldError",
    "ConfigurationError",
    "FormElement",
    "FormFactory",
    "FormSpecProvider",
]
