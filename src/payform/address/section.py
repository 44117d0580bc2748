"""
Address section — a country dropdown followed by that country's address fields.

The address fields are derived, not stored: every country change rebuilds
them from the selected country, the collection mode and the address spec,
carrying forward whatever the user already typed into a field of the same
kind.
"""

from __future__ import annotations

import logging
from enum import Flag
from typing import Any, Callable, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from payform.address.spec import AddressSpec, AddressSpecProvider, FieldKind
from payform.elements import DropdownField, DropdownItem, SectionElement, TextField
from payform.errors import ConfigurationError
from payform.localization import LocalizedString, Localizer, UIString, localize, sorted_by_localized_name

logger = logging.getLogger(__name__)


class Defaults(BaseModel):
    """Seed values for the section's fields. Never decides which fields exist."""
    name: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None  # ISO 3166-1 alpha-2
    line1: Optional[str] = None
    line2: Optional[str] = None
    postal_code: Optional[str] = None
    state: Optional[str] = None


class CollectionMode(BaseModel):
    """Which address fields to collect.

    `all()` collects everything the address spec lists. `country_and_postal()`
    collects only the country, plus the postal code for the listed countries.
    """
    model_config = ConfigDict(frozen=True)

    countries_requiring_postal: Optional[frozenset[str]] = None

    @classmethod
    def all(cls) -> "CollectionMode":
        return cls()

    @classmethod
    def country_and_postal(cls, countries_requiring_postal: Sequence[str]) -> "CollectionMode":
        return cls(countries_requiring_postal=frozenset(countries_requiring_postal))

    def includes(self, kind: FieldKind, country_code: str) -> bool:
        if self.countries_requiring_postal is None:
            return True
        return kind is FieldKind.POSTAL and country_code in self.countries_requiring_postal


class AdditionalFields(Flag):
    NONE = 0
    NAME = 1


def synthesize_address_fields(
    country_code: str,
    collection_mode: CollectionMode,
    address_spec: AddressSpec,
    defaults: Defaults,
    localize: Localizer = localize,
) -> list[TextField]:
    """Build the ordered address fields for a country, seeded from `defaults`."""
    fields: list[TextField] = []
    for kind in address_spec.field_ordering:
        if not collection_mode.includes(kind, country_code):
            continue
        constraints = address_spec.constraints(kind)
        if kind is FieldKind.LINE:
            fields.append(TextField("line1", localize(UIString.address_line1), defaults.line1,
                                    required=constraints.required))
            fields.append(TextField("line2", localize(UIString.address_line2), defaults.line2,
                                    required=False))
        elif kind is FieldKind.CITY:
            fields.append(TextField("city", localize(constraints.label), defaults.city,
                                    required=constraints.required))
        elif kind is FieldKind.STATE:
            fields.append(TextField("state", localize(constraints.label), defaults.state,
                                    required=constraints.required))
        else:
            fields.append(TextField("postal_code", localize(constraints.label), defaults.postal_code,
                                    required=constraints.required, pattern=constraints.pattern))
    return fields


class AddressSection(SectionElement):
    """A country dropdown and the country-specific address fields.

    Not thread-safe: a country change rebuilds the field list to completion
    before returning.
    """

    def __init__(
        self,
        title: Optional[str] = None,
        countries: Optional[Sequence[str]] = None,
        address_spec_provider: Optional[AddressSpecProvider] = None,
        defaults: Optional[Defaults] = None,
        collection_mode: Optional[CollectionMode] = None,
        additional_fields: AdditionalFields = AdditionalFields.NONE,
        display_name: Optional[Callable[[str], str]] = None,
        localize: Localizer = localize,
    ):
        super().__init__(title=title)
        self._provider = address_spec_provider or AddressSpecProvider.default()
        self._localize = localize
        defaults = defaults or Defaults()

        if countries is not None:
            if not countries:
                raise ConfigurationError("`countries` must contain at least one country")
            dropdown_countries = list(countries)
        else:
            if not self._provider.countries:
                raise ConfigurationError("`address_spec_provider` must contain at least one country")
            dropdown_countries = self._provider.countries

        self.collection_mode = collection_mode or CollectionMode.all()
        display_name = display_name or self._provider.country_name
        self.country_codes = sorted_by_localized_name(dropdown_countries, display_name)

        self.name: Optional[TextField] = None
        if AdditionalFields.NAME in additional_fields:
            self.name = TextField("name", localize(LocalizedString.nameLabel_full), defaults.name)

        selected = (self.country_codes.index(defaults.country)
                    if defaults.country in self.country_codes else 0)
        self.country = DropdownField(
            "country",
            localize(UIString.country_or_region),
            [DropdownItem(display_name(code), code) for code in self.country_codes],
            selected,
        )
        self._address_fields: dict[str, TextField] = {}

        self._rebuild_address_fields(self.selected_country_code, defaults)
        self._remove_country_handler = self.country.add_change_handler(self._country_did_change)

    @property
    def selected_country_code(self) -> str:
        return self.country_codes[self.country.selected_index]

    @property
    def line1(self) -> Optional[TextField]:
        return self._address_fields.get("line1")

    @property
    def line2(self) -> Optional[TextField]:
        return self._address_fields.get("line2")

    @property
    def city(self) -> Optional[TextField]:
        return self._address_fields.get("city")

    @property
    def state(self) -> Optional[TextField]:
        return self._address_fields.get("state")

    @property
    def postal_code(self) -> Optional[TextField]:
        return self._address_fields.get("postal_code")

    @property
    def address_fields(self) -> list[TextField]:
        return list(self._address_fields.values())

    @property
    def is_valid_address(self) -> bool:
        return self.is_valid

    def address(self) -> Defaults:
        """The section's current values."""
        values: dict[str, Any] = {k: f.text for k, f in self._address_fields.items()}
        return Defaults(name=self.name.text if self.name else None,
                        country=self.selected_country_code, **values)

    def update_address_fields(self, country_code: str, defaults: Optional[Defaults] = None) -> None:
        """Select `country_code` and rebuild the address fields for it.

        Seeds new fields from `defaults`, or from the current fields' text when
        `defaults` is None. Fields absent before the change start empty.
        """
        if country_code not in self.country_codes:
            raise ValueError(f"{country_code!r} is not one of this section's countries")
        self.country.select(self.country_codes.index(country_code), notify=False)
        self._rebuild_address_fields(country_code, defaults)

    def _rebuild_address_fields(self, country_code: str, defaults: Optional[Defaults]) -> None:
        if defaults is None:
            defaults = Defaults(**{k: f.text for k, f in self._address_fields.items()})

        fields = synthesize_address_fields(
            country_code,
            self.collection_mode,
            self._provider.address_spec(country_code),
            defaults,
            self._localize,
        )
        elements: list[Any] = [self.name] if self.name else []
        elements.append(self.country)
        elements.extend(fields)

        self._address_fields, self._elements = {f.key: f for f in fields}, elements
        logger.debug("Address fields for %s: %s", country_code, [f.key for f in fields])

    def _country_did_change(self, index: int) -> None:
        self._rebuild_address_fields(self.country_codes[index], None)
