"""
payform error types.

Unrecognized discriminator tags and missing next-action specs are not errors;
they are represented as data.
"""

from typing import Any, Optional


class PayFormError(Exception):
    def __init__(self, code: str, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class MalformedFieldError(PayFormError):
    """A known tag whose payload is missing or wrong-shaped, or a record without a `type` tag."""

    def __init__(self, message: str, tag: Optional[str] = None, details: Optional[Any] = None):
        super().__init__("malformed_field", message, details)
        self.tag = tag


class ConfigurationError(PayFormError):
    def __init__(self, message: str):
        super().__init__("configuration_error", message)
