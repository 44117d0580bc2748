from payform.models.form import (
    BaseFieldSpec,
    BillingAddressSpec,
    CountrySpec,
    FieldSpec,
    FieldType,
    FormSpec,
    NameFieldSpec,
    PropertyItemSpec,
    SelectorSpec,
)
from payform.models.next_action import (
    ConfirmResponseStatusSpec,
    NextActionSpec,
    NextActionType,
    PostConfirmHandlingStatusSpec,
    PostConfirmHandlingType,
    RedirectToUrl,
)

__all__ = [
    "BaseFieldSpec",
    "BillingAddressSpec",
    "CountrySpec",
    "FieldSpec",
    "FieldType",
    "FormSpec",
    "NameFieldSpec",
    "PropertyItemSpec",
    "SelectorSpec",
    "ConfirmResponseStatusSpec",
    "NextActionSpec",
    "NextActionType",
    "PostConfirmHandlingStatusSpec",
    "PostConfirmHandlingType",
    "RedirectToUrl",
]
