"""
Per-country address requirements.

Records follow the libaddressinput layout: `fmt` is a format string whose
%A/%C/%S/%Z tokens give the order of the line/city/state/postal fields,
`require` lists the tokens that must be filled, and `zip` is the postal
code pattern.
"""

from __future__ import annotations

import json
import re
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict

from payform.localization import UIString

DEFAULT_REGION = "ZZ"
BUNDLED_ADDRESS_SPECS = "address_specs.json"

_FMT_TOKEN = re.compile(r"%([A-Za-z])")


class FieldKind(str, Enum):
    LINE = "line"  # line1 + line2
    CITY = "city"
    STATE = "state"
    POSTAL = "postal"


_TOKEN_KINDS = {
    "A": FieldKind.LINE,
    "C": FieldKind.CITY,
    "S": FieldKind.STATE,
    "Z": FieldKind.POSTAL,
}


class FieldConstraints(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: UIString
    required: bool
    pattern: Optional[str] = None


class AddressSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    fmt: str = "%N%n%O%n%A%n%C"
    require: str = "AC"
    zip: Optional[str] = None
    locality_name_type: UIString = UIString.city
    state_name_type: UIString = UIString.province
    zip_name_type: UIString = UIString.postal

    @property
    def field_ordering(self) -> list[FieldKind]:
        ordering: list[FieldKind] = []
        for token in _FMT_TOKEN.findall(self.fmt):
            kind = _TOKEN_KINDS.get(token)
            if kind is not None and kind not in ordering:
                ordering.append(kind)
        return ordering

    def is_required(self, kind: FieldKind) -> bool:
        return any(_TOKEN_KINDS.get(token) is kind for token in self.require)

    def constraints(self, kind: FieldKind) -> FieldConstraints:
        if kind is FieldKind.LINE:
            return FieldConstraints(label=UIString.address_line1, required=self.is_required(kind))
        if kind is FieldKind.CITY:
            return FieldConstraints(label=self.locality_name_type, required=self.is_required(kind))
        if kind is FieldKind.STATE:
            return FieldConstraints(label=self.state_name_type, required=self.is_required(kind))
        return FieldConstraints(label=self.zip_name_type, required=self.is_required(kind), pattern=self.zip)


class AddressSpecProvider:
    """Country code -> AddressSpec lookup. Unlisted codes fall back to the "ZZ" record."""

    _default: Optional["AddressSpecProvider"] = None

    def __init__(self, specs: Mapping[str, AddressSpec]):
        self._specs = dict(specs)
        self._fallback = self._specs.get(DEFAULT_REGION, AddressSpec())

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "AddressSpecProvider":
        return cls({code: AddressSpec.model_validate(record) for code, record in raw.items()})

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "AddressSpecProvider":
        return cls.from_dict(json.loads(Path(path).read_text(encoding="utf-8")))

    @classmethod
    def default(cls) -> "AddressSpecProvider":
        """Provider over the bundled address data, loaded once."""
        if cls._default is None:
            from payform.provider import read_bundled_json
            cls._default = cls.from_dict(read_bundled_json(BUNDLED_ADDRESS_SPECS))
        return cls._default

    @property
    def countries(self) -> list[str]:
        return sorted(code for code in self._specs if code != DEFAULT_REGION)

    def address_spec(self, country_code: str) -> AddressSpec:
        return self._specs.get(country_code, self._fallback)

    def field_ordering(self, country_code: str) -> list[FieldKind]:
        return self.address_spec(country_code).field_ordering

    def field_constraints(self, country_code: str, kind: FieldKind) -> FieldConstraints:
        return self.address_spec(country_code).constraints(kind)

    def country_name(self, country_code: str) -> str:
        spec = self._specs.get(country_code)
        return spec.name or country_code if spec else country_code
