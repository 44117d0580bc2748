"""
Form elements — the live, mutable side of a form.

Rendering is external; elements only hold values, labels, validation state
and the wire `api_path` carried through from the form spec.
"""

from __future__ import annotations

import inspect
import re
import weakref
from enum import Enum
from typing import Any, Callable, Optional, Sequence, Union

ChangeHandler = Callable[[int], None]


class ValidationState(str, Enum):
    VALID = "valid"
    EMPTY = "empty"  # required but blank
    INVALID = "invalid"


class TextField:
    def __init__(
        self,
        key: str,
        label: str,
        text: Optional[str] = None,
        *,
        required: bool = True,
        pattern: Optional[str] = None,
        validator: Optional[Callable[[str], bool]] = None,
        api_path: Optional[dict[str, str]] = None,
    ):
        self.key = key
        self.label = label
        self.text = text or ""
        self.required = required
        self.pattern = pattern
        self.validator = validator
        self.api_path = api_path

    @property
    def validation_state(self) -> ValidationState:
        value = self.text.strip()
        if not value:
            return ValidationState.EMPTY if self.required else ValidationState.VALID
        if self.pattern and not re.fullmatch(self.pattern, value, re.IGNORECASE):
            return ValidationState.INVALID
        if self.validator and not self.validator(value):
            return ValidationState.INVALID
        return ValidationState.VALID

    @property
    def is_valid(self) -> bool:
        return self.validation_state is ValidationState.VALID

    def __repr__(self) -> str:
        return f"TextField(key={self.key!r}, text={self.text!r})"


class DropdownItem:
    __slots__ = ("display_text", "api_value")

    def __init__(self, display_text: str, api_value: Optional[str] = None):
        self.display_text = display_text
        self.api_value = api_value

    def __eq__(self, other: object) -> bool:
        return (isinstance(other, DropdownItem)
                and (self.display_text, self.api_value) == (other.display_text, other.api_value))

    def __repr__(self) -> str:
        return f"DropdownItem({self.display_text!r}, {self.api_value!r})"


class DropdownField:
    """Single selection over a fixed item list.

    Change handlers that are bound methods are held weakly, so subscribing an
    owner to its own dropdown does not make the dropdown keep the owner alive.
    """

    def __init__(
        self,
        key: str,
        label: str,
        items: Sequence[DropdownItem],
        selected_index: int = 0,
        *,
        api_path: Optional[dict[str, str]] = None,
    ):
        if not items:
            raise ValueError("Dropdown requires at least one item")
        self.key = key
        self.label = label
        self.items = list(items)
        self.api_path = api_path
        self._selected_index = self._check_index(selected_index)
        self._handlers: list[Union[weakref.WeakMethod, ChangeHandler]] = []

    @property
    def selected_index(self) -> int:
        return self._selected_index

    @property
    def selected_item(self) -> DropdownItem:
        return self.items[self._selected_index]

    @property
    def validation_state(self) -> ValidationState:
        return ValidationState.VALID

    @property
    def is_valid(self) -> bool:
        return True

    def add_change_handler(self, handler: ChangeHandler) -> Callable[[], None]:
        """Register a selection handler. Returns a cleanup function."""
        ref: Union[weakref.WeakMethod, ChangeHandler]
        ref = weakref.WeakMethod(handler) if inspect.ismethod(handler) else handler
        self._handlers.append(ref)

        def remove() -> None:
            try:
                self._handlers.remove(ref)
            except ValueError:
                pass
        return remove

    def select(self, index: int, *, notify: bool = True) -> None:
        """Change the selection; `notify=False` skips the change handlers."""
        self._selected_index = self._check_index(index)
        if not notify:
            return
        for ref in list(self._handlers):
            handler = ref() if isinstance(ref, weakref.WeakMethod) else ref
            if handler is None:
                self._handlers.remove(ref)
                continue
            handler(index)

    def _check_index(self, index: int) -> int:
        if not 0 <= index < len(self.items):
            raise IndexError(f"Selection {index} out of range for {len(self.items)} items")
        return index

    def __repr__(self) -> str:
        return f"DropdownField(key={self.key!r}, selected={self.selected_item.display_text!r})"


class StaticElement:
    """Non-input element such as a payment-method header or mandate text."""
    __slots__ = ("kind",)

    def __init__(self, kind: str):
        self.kind = kind

    @property
    def is_valid(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"StaticElement({self.kind!r})"


class SectionElement:
    def __init__(self, elements: Sequence[Any] = (), title: Optional[str] = None):
        self.title = title
        self._elements: list[Any] = list(elements)

    @property
    def elements(self) -> list[Any]:
        return list(self._elements)

    @property
    def is_valid(self) -> bool:
        return all(e.is_valid for e in self._elements)
