"""
Form assembly — decoded form specs to a list of form elements.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Optional, Sequence

from payform.address.section import AddressSection, CollectionMode
from payform.address.spec import AddressSpecProvider
from payform.elements import DropdownField, DropdownItem, SectionElement, StaticElement, TextField
from payform.localization import LocalizedString, Localizer, UIString, localize, sorted_by_localized_name
from payform.models.form import (
    FieldSpec,
    FieldType,
    FormSpec,
    NameFieldSpec,
    SelectorSpec,
)

logger = logging.getLogger(__name__)

# Cards only collect a postal code, and only for these countries
CARD_POSTAL_COUNTRIES = ("US", "GB", "CA")

EMAIL_PATTERN = r"[^@\s]+@[^@\s]+\.[^@\s]+"
BSB_PATTERN = r"\d{3}-?\d{3}"
AU_ACCOUNT_PATTERN = r"\d{5,9}"
IBAN_PATTERN = r"[A-Z]{2}\d{2}[A-Z0-9]{11,30}"

STATIC_FIELDS = {
    FieldType.AFFIRM_HEADER,
    FieldType.KLARNA_HEADER,
    FieldType.AFTERPAY_HEADER,
    FieldType.AU_BECS_MANDATE,
    FieldType.SEPA_MANDATE,
}


def is_valid_iban(text: str) -> bool:
    """ISO 13616 check: move the first four characters to the end, then mod 97 == 1."""
    iban = re.sub(r"\s+", "", text).upper()
    if not re.fullmatch(IBAN_PATTERN, iban):
        return False
    digits = "".join(str(int(c, 36)) for c in iban[4:] + iban[:4])
    return int(digits) % 97 == 1


class FormElement:
    def __init__(self, elements: Sequence[Any], payment_method: Optional[str] = None):
        self.payment_method = payment_method
        self.elements = list(elements)

    @property
    def is_valid(self) -> bool:
        return all(e.is_valid for e in self.elements)

    def api_paths(self) -> dict[str, dict[str, str]]:
        """Wire paths of every input element, by element key."""
        paths: dict[str, dict[str, str]] = {}
        for element in _flatten(self.elements):
            api_path = getattr(element, "api_path", None)
            if api_path:
                paths[element.key] = api_path
        return paths


def _flatten(elements: Sequence[Any]) -> list[Any]:
    flat: list[Any] = []
    for element in elements:
        if isinstance(element, SectionElement):
            flat.extend(_flatten(element.elements))
        else:
            flat.append(element)
    return flat


class FormFactory:
    def __init__(
        self,
        address_spec_provider: Optional[AddressSpecProvider] = None,
        localize: Localizer = localize,
    ):
        self._provider = address_spec_provider or AddressSpecProvider.default()
        self._localize = localize

    def make(self, form_spec: FormSpec) -> FormElement:
        elements = []
        for field in form_spec.fields:
            element = self.make_element(field)
            if element is None:
                logger.debug("Skipping unsupported field %r in %s form", field.type, form_spec.type)
                continue
            elements.append(element)
        return FormElement(elements, payment_method=form_spec.type)

    def make_element(self, field: FieldSpec) -> Optional[Any]:
        """One element per field spec; None for tags this version does not render."""
        field_type = field.field_type
        if field_type is None:
            return None
        if field_type in STATIC_FIELDS:
            return StaticElement(field_type.value)
        builders: dict[FieldType, Callable[[Any], Any]] = {
            FieldType.NAME: lambda p: SectionElement([self.make_name(p)]),
            FieldType.EMAIL: lambda p: SectionElement([self.make_email(p.api_path)]),
            FieldType.SELECTOR: lambda p: SectionElement([self.make_dropdown(p)]),
            FieldType.BILLING_ADDRESS: lambda p: self.make_billing_address_section(
                countries=p.allowed_country_codes),
            FieldType.COUNTRY: lambda p: SectionElement([self.make_country(p.allowed_country_codes, p.api_path)]),
            FieldType.KLARNA_COUNTRY: lambda p: SectionElement([self.make_country(None, p.api_path)]),
            FieldType.IBAN: lambda p: SectionElement([TextField(
                "iban", self._localize(UIString.iban), validator=is_valid_iban, api_path=p.api_path)]),
            FieldType.AU_BECS_BSB_NUMBER: lambda p: SectionElement([TextField(
                "bsb_number", self._localize(UIString.bsb_number), pattern=BSB_PATTERN, api_path=p.api_path)]),
            FieldType.AU_BECS_ACCOUNT_NUMBER: lambda p: SectionElement([TextField(
                "account_number", self._localize(UIString.account_number),
                pattern=AU_ACCOUNT_PATTERN, api_path=p.api_path)]),
        }
        return builders[field_type](field.payload)

    def make_name(self, spec: NameFieldSpec) -> TextField:
        label = spec.translation_id or LocalizedString.nameLabel_full
        return TextField("name", self._localize(label), api_path=spec.api_path)

    def make_email(self, api_path: Optional[dict[str, str]] = None) -> TextField:
        return TextField("email", self._localize(UIString.email), pattern=EMAIL_PATTERN, api_path=api_path)

    def make_dropdown(self, spec: SelectorSpec) -> DropdownField:
        return DropdownField(
            "selector",
            self._localize(spec.translation_id),
            [DropdownItem(item.display_text, item.api_value) for item in spec.items],
            api_path=spec.api_path,
        )

    def make_country(
        self, countries: Optional[Sequence[str]], api_path: Optional[dict[str, str]] = None,
    ) -> DropdownField:
        codes = sorted_by_localized_name(countries or self._provider.countries, self._provider.country_name)
        return DropdownField(
            "country",
            self._localize(UIString.country_or_region),
            [DropdownItem(self._provider.country_name(code), code) for code in codes],
            api_path=api_path,
        )

    def make_billing_address_section(
        self,
        collection_mode: Optional[CollectionMode] = None,
        countries: Optional[Sequence[str]] = None,
    ) -> AddressSection:
        return AddressSection(
            title=self._localize(UIString.billing_address),
            countries=countries,
            address_spec_provider=self._provider,
            collection_mode=collection_mode,
            localize=self._localize,
        )

    def make_card(self, force_require_email: bool = False) -> FormElement:
        """Billing details for a card payment; card number entry itself is rendered externally."""
        elements: list[Any] = [
            self.make_billing_address_section(
                collection_mode=CollectionMode.country_and_postal(CARD_POSTAL_COUNTRIES),
            ),
        ]
        if force_require_email:
            elements.insert(0, SectionElement([self.make_email()]))
        return FormElement(elements, payment_method="card")
