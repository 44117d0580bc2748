"""Address section: field synthesis on country change, value carry-forward, validity."""

import gc

import pytest

from payform.address.section import (
    AdditionalFields,
    AddressSection,
    CollectionMode,
    Defaults,
    synthesize_address_fields,
)
from payform.address.spec import AddressSpecProvider
from payform.elements import DropdownField, DropdownItem, ValidationState
from payform.errors import ConfigurationError

PROVIDER = AddressSpecProvider.from_dict({
    "US": {"name": "United States", "fmt": "%N%n%A%n%C, %S %Z", "require": "ACSZ", "zip": r"\d{5}",
           "state_name_type": "state", "zip_name_type": "zip"},
    "DE": {"name": "Germany", "fmt": "%N%n%A%n%Z %C", "require": "ACZ", "zip": r"\d{5}"},
    "JP": {"name": "Japan", "fmt": "%Z%n%S%n%A", "require": "ASZ", "state_name_type": "prefecture"},
    "XK": {"name": "Kosovo", "fmt": "%N%n%C", "require": "C"},
    "AQ": {"name": "Antarctica", "fmt": "%N%n%O"},
})


def make_section(country="US", **kwargs):
    kwargs.setdefault("address_spec_provider", PROVIDER)
    defaults = kwargs.pop("defaults", Defaults(country=country))
    return AddressSection(defaults=defaults, **kwargs)


def keys(section):
    return [e.key for e in section.elements]


def select(section, country):
    section.country.select(section.country_codes.index(country))


class TestConstruction:
    def test_empty_countries_rejected(self):
        with pytest.raises(ConfigurationError):
            AddressSection(countries=[], address_spec_provider=PROVIDER)

    def test_empty_provider_rejected(self):
        with pytest.raises(ConfigurationError):
            AddressSection(address_spec_provider=AddressSpecProvider({}))

    def test_countries_sorted_by_display_name(self):
        section = make_section()
        assert section.country_codes == ["AQ", "DE", "JP", "XK", "US"]
        assert [i.display_text for i in section.country.items][0] == "Antarctica"

    def test_explicit_country_list(self):
        section = AddressSection(countries=["US", "DE"], address_spec_provider=PROVIDER)
        assert section.country_codes == ["DE", "US"]
        assert section.selected_country_code == "DE"

    def test_default_country_selected(self):
        assert make_section("JP").selected_country_code == "JP"

    def test_unlisted_default_country_selects_first(self):
        assert make_section("FR").selected_country_code == "AQ"

    def test_defaults_seed_fields(self):
        section = make_section(defaults=Defaults(country="US", line1="1 Infinite Loop", city="Cupertino",
                                                 state="CA", postal_code="95014"))
        assert section.line1.text == "1 Infinite Loop"
        assert section.city.text == "Cupertino"
        assert section.postal_code.text == "95014"
        assert section.line2.text == ""


class TestSynthesis:
    def test_all_mode_follows_spec_order(self):
        assert keys(make_section("US")) == ["country", "line1", "line2", "city", "state", "postal_code"]
        assert keys(make_section("JP")) == ["country", "postal_code", "state", "line1", "line2"]

    def test_country_without_address_kinds(self):
        section = make_section("AQ")
        assert keys(section) == ["country"]
        assert section.is_valid

    def test_name_comes_first(self):
        section = make_section("DE", additional_fields=AdditionalFields.NAME)
        assert keys(section) == ["name", "country", "line1", "line2", "postal_code", "city"]

    def test_country_and_postal_mode(self):
        mode = CollectionMode.country_and_postal(["US"])
        assert keys(make_section("US", collection_mode=mode)) == ["country", "postal_code"]
        assert keys(make_section("DE", collection_mode=mode)) == ["country"]

    def test_country_and_postal_with_name(self):
        mode = CollectionMode.country_and_postal(["US"])
        section = make_section("DE", collection_mode=mode, additional_fields=AdditionalFields.NAME)
        assert keys(section) == ["name", "country"]

    def test_labels_follow_country(self):
        section = make_section("US")
        assert section.state.label == "State"
        assert section.postal_code.label == "ZIP"
        select(section, "JP")
        assert section.state.label == "Prefecture"
        assert section.postal_code.label == "Postal code"

    def test_idempotent(self):
        section = make_section("US")
        section.line1.text = "123 Main St"
        section.update_address_fields("US")
        first = [(e.key, getattr(e, "text", None)) for e in section.elements]
        section.update_address_fields("US")
        second = [(e.key, getattr(e, "text", None)) for e in section.elements]
        assert first == second

    def test_switching_replaces_fields(self):
        section = make_section("US")
        old_fields = section.address_fields
        for country in ["DE", "JP", "XK", "AQ", "US", "JP"]:
            select(section, country)
            assert len(keys(section)) == len(set(keys(section)))
        assert keys(section) == ["country", "postal_code", "state", "line1", "line2"]
        assert not any(f in section.elements for f in old_fields)
        assert section.city is None

    def test_pure_synthesis(self):
        spec = PROVIDER.address_spec("US")
        fields = synthesize_address_fields("US", CollectionMode.all(), spec, Defaults(city="Austin"))
        assert [f.key for f in fields] == ["line1", "line2", "city", "state", "postal_code"]
        assert fields[2].text == "Austin"
        assert not fields[1].required
        assert synthesize_address_fields("DE", CollectionMode.country_and_postal(["US"]), spec, Defaults()) == []


class TestValueCarryForward:
    def test_same_kind_value_preserved(self):
        section = make_section("US")
        section.line1.text = "123 Main St"
        section.postal_code.text = "94107"
        select(section, "DE")
        assert section.line1.text == "123 Main St"
        assert section.postal_code.text == "94107"
        assert section.state is None

    def test_value_dropped_once_field_absent(self):
        section = make_section("US")
        section.line1.text = "123 Main St"
        section.city.text = "Springfield"
        select(section, "XK")
        assert section.line1 is None
        assert section.city.text == "Springfield"
        select(section, "US")
        assert section.line1.text == ""
        assert section.city.text == "Springfield"

    def test_explicit_defaults_win(self):
        section = make_section("US")
        section.line1.text = "typed"
        section.update_address_fields("DE", Defaults(line1="seeded"))
        assert section.selected_country_code == "DE"
        assert section.line1.text == "seeded"
        assert section.city.text == ""
        assert section.address().country == "DE"

    def test_update_moves_dropdown_with_fields(self):
        section = make_section("US")
        section.line1.text = "1-1 Chiyoda"
        section.update_address_fields("JP")
        assert section.selected_country_code == "JP"
        assert section.country.selected_item.api_value == "JP"
        assert section.state.label == "Prefecture"
        assert section.line1.text == "1-1 Chiyoda"

    def test_update_rejects_country_outside_list(self):
        section = make_section("US", countries=["US", "DE"])
        with pytest.raises(ValueError):
            section.update_address_fields("JP")
        assert section.selected_country_code == "US"
        assert section.state is not None

    def test_name_survives_country_change(self):
        section = make_section("US", additional_fields=AdditionalFields.NAME)
        name = section.name
        name.text = "Jane Doe"
        select(section, "AQ")
        assert section.elements[0] is name
        assert section.address() == Defaults(name="Jane Doe", country="AQ")


class TestValidity:
    def test_invalid_field_blocks_until_removed(self):
        section = make_section("US", collection_mode=CollectionMode.country_and_postal(["US"]))
        section.postal_code.text = "abc"
        assert section.postal_code.validation_state is ValidationState.INVALID
        assert not section.is_valid
        select(section, "DE")
        assert section.is_valid

    def test_empty_required_field(self):
        section = make_section("US", collection_mode=CollectionMode.country_and_postal(["US"]))
        assert section.postal_code.validation_state is ValidationState.EMPTY
        assert not section.is_valid
        section.postal_code.text = "94107"
        assert section.is_valid_address

    def test_full_address(self):
        section = make_section("DE")
        section.line1.text = "Unter den Linden 1"
        section.city.text = "Berlin"
        section.postal_code.text = "10117"
        assert section.is_valid
        assert section.address() == Defaults(country="DE", line1="Unter den Linden 1", line2="",
                                             city="Berlin", postal_code="10117")

    def test_blank_name_is_invalid(self):
        section = make_section("AQ", additional_fields=AdditionalFields.NAME)
        assert not section.is_valid
        section.name.text = "Jane Doe"
        assert section.is_valid


def test_dropdown_does_not_keep_section_alive():
    section = make_section("US")
    dropdown: DropdownField = section.country
    del section
    gc.collect()
    dropdown.select(1)
    assert dropdown.selected_index == 1


def test_select_without_notify_skips_handlers():
    dropdown = DropdownField("country", "Country", [DropdownItem("A", "A"), DropdownItem("B", "B")])
    seen = []
    dropdown.add_change_handler(seen.append)
    dropdown.select(1, notify=False)
    dropdown.select(0)
    assert seen == [0]
    assert dropdown.selected_index == 0
