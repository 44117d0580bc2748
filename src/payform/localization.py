"""
Localized label lookup.

Only an English table ships with the package. Callers that need other locales
pass their own resolver wherever a `localize` callable is accepted.
"""

import unicodedata
from enum import Enum
from typing import Callable, Iterable, Union


class LocalizedString(str, Enum):
    """Label identifiers that may appear in a form spec's `translation_id`."""
    ideal_bank = "upe.labels.ideal.bank"
    eps_bank = "upe.labels.eps.bank"
    p24_bank = "upe.labels.p24.bank"

    nameLabel_given = "upe.labels.name.given"
    nameLabel_family = "upe.labels.name.family"
    nameLabel_full = "upe.labels.name.full"
    nameLabel_onAccount = "upe.labels.name.onAccount"


class UIString(str, Enum):
    """Labels used by the form assembler and the address section."""
    email = "email"
    country_or_region = "country_or_region"
    billing_address = "billing_address"
    iban = "iban"
    bsb_number = "bsb_number"
    account_number = "account_number"
    address_line1 = "address_line1"
    address_line2 = "address_line2"

    # locality_name_type
    city = "city"
    suburb = "suburb"
    post_town = "post_town"
    district = "district"

    # state_name_type
    state = "state"
    province = "province"
    prefecture = "prefecture"
    county = "county"
    area = "area"
    emirate = "emirate"
    island = "island"

    # zip_name_type
    zip = "zip"
    postal = "postal"
    pin = "pin"
    eircode = "eircode"


LabelKey = Union[LocalizedString, UIString]

ENGLISH: dict[LabelKey, str] = {
    LocalizedString.ideal_bank: "iDEAL Bank",
    LocalizedString.eps_bank: "EPS Bank",
    LocalizedString.p24_bank: "Przelewy24 Bank",
    LocalizedString.nameLabel_given: "First name",
    LocalizedString.nameLabel_family: "Last name",
    LocalizedString.nameLabel_full: "Full name",
    LocalizedString.nameLabel_onAccount: "Name on account",

    UIString.email: "Email",
    UIString.country_or_region: "Country or region",
    UIString.billing_address: "Billing address",
    UIString.iban: "IBAN",
    UIString.bsb_number: "BSB number",
    UIString.account_number: "Account number",
    UIString.address_line1: "Address line 1",
    UIString.address_line2: "Address line 2",
    UIString.city: "City",
    UIString.suburb: "Suburb",
    UIString.post_town: "Town or city",
    UIString.district: "District",
    UIString.state: "State",
    UIString.province: "Province",
    UIString.prefecture: "Prefecture",
    UIString.county: "County",
    UIString.area: "Area",
    UIString.emirate: "Emirate",
    UIString.island: "Island",
    UIString.zip: "ZIP",
    UIString.postal: "Postal code",
    UIString.pin: "PIN",
    UIString.eircode: "Eircode",
}

Localizer = Callable[[LabelKey], str]


def localize(key: LabelKey) -> str:
    """Resolve a label for the English locale. Unmapped keys raise KeyError."""
    return ENGLISH[key]


def _collation_key(name: str) -> str:
    decomposed = unicodedata.normalize("NFKD", name)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def sorted_by_localized_name(codes: Iterable[str], display_name: Callable[[str], str]) -> list[str]:
    """Order country codes by their display names, ignoring case and accents."""
    return sorted(codes, key=lambda code: (_collation_key(display_name(code)), code))
