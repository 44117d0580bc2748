"""
Form spec registry, keyed by payment method identifier (e.g. "sepa_debit").
"""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any, Optional, Sequence, Union

from payform.decoder import decode_form_specs
from payform.errors import PayFormError
from payform.models.form import FormSpec
from payform.models.next_action import NextActionSpec

logger = logging.getLogger(__name__)

BUNDLED_FORM_SPECS = "form_specs.json"


def read_bundled_json(name: str) -> Any:
    return json.loads(resources.files("payform").joinpath("data").joinpath(name).read_text(encoding="utf-8"))


class FormSpecProvider:
    def __init__(self, specs: Optional[Sequence[FormSpec]] = None):
        self._specs: dict[str, FormSpec] = {s.type: s for s in specs or []}

    @property
    def payment_methods(self) -> list[str]:
        return sorted(self._specs)

    def load(self, nodes: Sequence[dict[str, Any]]) -> None:
        """Replace the registry. A malformed document raises and leaves the registry untouched."""
        decoded = decode_form_specs(nodes)
        self._specs = {s.type: s for s in decoded}
        logger.debug("Loaded %d form specs", len(decoded))

    def load_file(self, path: Union[str, Path]) -> None:
        self.load(json.loads(Path(path).read_text(encoding="utf-8")))

    def load_bundled(self) -> None:
        self.load(read_bundled_json(BUNDLED_FORM_SPECS))

    def update(self, nodes: Sequence[dict[str, Any]]) -> bool:
        """Merge server-delivered specs over the registry.

        Returns False and keeps the current registry if the document does not decode.
        """
        try:
            decoded = decode_form_specs(nodes)
        except PayFormError as e:
            logger.warning("Ignoring form spec update: %s", e)
            return False
        self._specs = {**self._specs, **{s.type: s for s in decoded}}
        return True

    def form_spec(self, payment_method: str) -> Optional[FormSpec]:
        return self._specs.get(payment_method)

    def next_action_spec(self, payment_method: str) -> Optional[NextActionSpec]:
        """None means no special next-action handling for this payment method."""
        spec = self._specs.get(payment_method)
        return spec.next_action_spec if spec else None
