from payform.address.spec import AddressSpec, AddressSpecProvider, FieldConstraints, FieldKind
from payform.address.section import (
    AdditionalFields,
    AddressSection,
    CollectionMode,
    Defaults,
    synthesize_address_fields,
)

__all__ = [
    "AddressSpec",
    "AddressSpecProvider",
    "FieldConstraints",
    "FieldKind",
    "AdditionalFields",
    "AddressSection",
    "CollectionMode",
    "Defaults",
    "synthesize_address_fields",
]
