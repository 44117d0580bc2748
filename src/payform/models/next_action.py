"""
Next-action models — what to do after a payment intent is confirmed.

Both status maps are keyed by intent status (e.g. "requires_action").
Unrecognized types are kept verbatim so newer schemas survive older code.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_URL_PATH = "next_action[redirect_to_url][url]"
DEFAULT_RETURN_URL_PATH = "next_action[redirect_to_url][return_url]"


class NextActionType(str, Enum):
    REDIRECT_TO_URL = "redirect_to_url"
    FINISHED = "finished"


class PostConfirmHandlingType(str, Enum):
    FINISHED = "finished"
    CANCELED = "canceled"


class RedirectToUrl(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    url_path: str = DEFAULT_URL_PATH
    return_url_path: str = DEFAULT_RETURN_URL_PATH

    @field_validator("url_path", mode="before")
    @classmethod
    def _default_url_path(cls, value: Any) -> Any:
        return DEFAULT_URL_PATH if value is None else value

    @field_validator("return_url_path", mode="before")
    @classmethod
    def _default_return_url_path(cls, value: Any) -> Any:
        return DEFAULT_RETURN_URL_PATH if value is None else value


class ConfirmResponseStatusSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    redirect: Optional[RedirectToUrl] = None

    @property
    def action_type(self) -> Optional[NextActionType]:
        try:
            return NextActionType(self.type)
        except ValueError:
            return None

    @property
    def is_unknown(self) -> bool:
        return self.action_type is None


class PostConfirmHandlingStatusSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str

    @property
    def handling_type(self) -> Optional[PostConfirmHandlingType]:
        try:
            return PostConfirmHandlingType(self.type)
        except ValueError:
            return None

    @property
    def is_unknown(self) -> bool:
        return self.handling_type is None


class NextActionSpec(BaseModel):
    confirm_response_status_specs: dict[str, ConfirmResponseStatusSpec]
    post_confirm_handling_pi_status_specs: Optional[dict[str, PostConfirmHandlingStatusSpec]] = None

    def confirm_response_spec(self, status: str) -> Optional[ConfirmResponseStatusSpec]:
        return self.confirm_response_status_specs.get(status)

    def post_confirm_spec(self, status: str) -> Optional[PostConfirmHandlingStatusSpec]:
        if not self.post_confirm_handling_pi_status_specs:
            return None
        return self.post_confirm_handling_pi_status_specs.get(status)
