"""
Form spec models — one entry per payment method, each a list of field specs.

Payload keys are accepted in either snake_case (wire form) or camelCase.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from payform.localization import LocalizedString
from payform.models.next_action import NextActionSpec


class FieldType(str, Enum):
    NAME = "name"
    EMAIL = "email"
    SELECTOR = "selector"
    BILLING_ADDRESS = "billing_address"
    COUNTRY = "country"
    AFFIRM_HEADER = "affirm_header"
    KLARNA_HEADER = "klarna_header"
    KLARNA_COUNTRY = "klarna_country"
    AU_BECS_BSB_NUMBER = "au_becs_bsb_number"
    AU_BECS_ACCOUNT_NUMBER = "au_becs_account_number"
    AU_BECS_MANDATE = "au_becs_mandate"
    AFTERPAY_HEADER = "afterpay_header"
    IBAN = "iban"
    SEPA_MANDATE = "sepa_mandate"


class _Payload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class BaseFieldSpec(_Payload):
    # semantic key -> form-encoded submission key; None means omit from submission
    api_path: Optional[dict[str, str]] = None


class NameFieldSpec(_Payload):
    api_path: Optional[dict[str, str]] = None
    translation_id: Optional[LocalizedString] = None


class PropertyItemSpec(_Payload):
    display_text: str
    # value sent when this item is selected
    api_value: Optional[str] = None


class SelectorSpec(_Payload):
    translation_id: LocalizedString
    items: list[PropertyItemSpec]
    api_path: Optional[dict[str, str]] = None


class BillingAddressSpec(_Payload):
    allowed_country_codes: Optional[list[str]] = None


class CountrySpec(_Payload):
    api_path: Optional[dict[str, str]] = None
    allowed_country_codes: Optional[list[str]] = None


FieldPayload = Union[NameFieldSpec, SelectorSpec, BillingAddressSpec, CountrySpec, BaseFieldSpec]

# tag -> payload model; None marks a variant without payload
PAYLOAD_MODELS: dict[str, Optional[type[_Payload]]] = {
    FieldType.NAME.value: NameFieldSpec,
    FieldType.EMAIL.value: BaseFieldSpec,
    FieldType.SELECTOR.value: SelectorSpec,
    FieldType.BILLING_ADDRESS.value: BillingAddressSpec,
    FieldType.COUNTRY.value: CountrySpec,
    FieldType.AFFIRM_HEADER.value: None,
    FieldType.KLARNA_HEADER.value: None,
    FieldType.KLARNA_COUNTRY.value: BaseFieldSpec,
    FieldType.AU_BECS_BSB_NUMBER.value: BaseFieldSpec,
    FieldType.AU_BECS_ACCOUNT_NUMBER.value: BaseFieldSpec,
    FieldType.AU_BECS_MANDATE.value: None,
    FieldType.AFTERPAY_HEADER.value: None,
    FieldType.IBAN.value: BaseFieldSpec,
    FieldType.SEPA_MANDATE.value: None,
}


class FieldSpec(BaseModel):
    """A decoded field. `type` is the raw tag; unknown tags carry no payload.

    The payload is always validated as the model its tag names, so a known tag
    with payload fields always has one, even when built by hand.
    """
    model_config = ConfigDict(frozen=True)

    type: str
    payload: Optional[FieldPayload] = None

    @model_validator(mode="before")
    @classmethod
    def _payload_for_tag(cls, data: Any) -> Any:
        if not isinstance(data, dict) or not isinstance(data.get("type"), str):
            return data
        tag = data["type"]
        model = PAYLOAD_MODELS.get(tag)
        payload = data.get("payload")
        if model is None:
            if payload is not None:
                raise ValueError(f"`{tag}` fields carry no payload")
            return data
        if not isinstance(payload, model):
            payload = model.model_validate({} if payload is None else payload)
        return {**data, "payload": payload}

    @model_validator(mode="after")
    def _check_payload_type(self) -> "FieldSpec":
        model = PAYLOAD_MODELS.get(self.type)
        if model is not None and type(self.payload) is not model:
            raise ValueError(f"`{self.type}` expects a {model.__name__} payload")
        return self

    @property
    def field_type(self) -> Optional[FieldType]:
        try:
            return FieldType(self.type)
        except ValueError:
            return None

    @property
    def is_unknown(self) -> bool:
        return self.field_type is None

    @property
    def api_path(self) -> Optional[dict[str, str]]:
        return getattr(self.payload, "api_path", None)


class FormSpec(BaseModel):
    """A payment method's form: its type identifier, fields and next-action handling."""
    model_config = ConfigDict(populate_by_name=True)

    type: str
    async_: Optional[bool] = Field(default=None, alias="async")
    fields: list[FieldSpec] = Field(default_factory=list)
    next_action_spec: Optional[NextActionSpec] = None
