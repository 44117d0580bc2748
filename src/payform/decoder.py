"""
Schema decoding — raw form-spec documents to typed models.

Every record carries a string `type` discriminator. Known tags dispatch to
their payload model; anything else decodes to an "unknown" value holding the
raw tag. Only a known tag with a malformed payload fails, and that failure
aborts the whole document.
"""

from typing import Any, Mapping, Optional, Sequence

from pydantic import BaseModel, ValidationError

from payform.errors import MalformedFieldError
from payform.models.form import PAYLOAD_MODELS, FieldSpec, FormSpec
from payform.models.next_action import (
    ConfirmResponseStatusSpec,
    NextActionSpec,
    NextActionType,
    PostConfirmHandlingStatusSpec,
    RedirectToUrl,
)

FIELD_DECODERS = PAYLOAD_MODELS

NEXT_ACTION_DECODERS: dict[str, Optional[type[BaseModel]]] = {
    NextActionType.REDIRECT_TO_URL.value: RedirectToUrl,
    NextActionType.FINISHED.value: None,
}


def _read_tag(node: Any) -> str:
    if not isinstance(node, Mapping):
        raise MalformedFieldError(f"Expected a keyed record, got {type(node).__name__}")
    tag = node.get("type")
    if not isinstance(tag, str):
        raise MalformedFieldError("Record is missing a string `type` discriminator")
    return tag


def _decode_payload(model: type[BaseModel], node: Mapping[str, Any], tag: str) -> BaseModel:
    try:
        return model.model_validate(node)
    except ValidationError as e:
        raise MalformedFieldError(f"Malformed payload for `{tag}`: {e.error_count()} error(s)",
                                  tag=tag, details=e.errors())


def decode_field_spec(node: Mapping[str, Any]) -> FieldSpec:
    tag = _read_tag(node)
    if tag not in FIELD_DECODERS:
        return FieldSpec(type=tag)
    model = FIELD_DECODERS[tag]
    if model is None:
        return FieldSpec(type=tag)
    return FieldSpec(type=tag, payload=_decode_payload(model, node, tag))


def encode_field_spec(spec: FieldSpec) -> dict[str, Any]:
    """Inverse of decode_field_spec, in snake_case wire keys."""
    node: dict[str, Any] = {"type": spec.type}
    if spec.payload is not None:
        node.update(spec.payload.model_dump(mode="json", exclude_none=True))
    return node


def decode_confirm_response_status(node: Mapping[str, Any]) -> ConfirmResponseStatusSpec:
    tag = _read_tag(node)
    model = NEXT_ACTION_DECODERS.get(tag)
    if model is None:
        return ConfirmResponseStatusSpec(type=tag)
    return ConfirmResponseStatusSpec(type=tag, redirect=_decode_payload(model, node, tag))


def decode_post_confirm_status(node: Mapping[str, Any]) -> PostConfirmHandlingStatusSpec:
    # no variant carries a payload, so known and unknown tags decode alike
    return PostConfirmHandlingStatusSpec(type=_read_tag(node))


def _decode_status_map(raw: Any, decode: Any, key: str) -> dict[str, Any]:
    if not isinstance(raw, Mapping):
        raise MalformedFieldError(f"`{key}` must be a mapping of status to spec")
    return {str(status): decode(entry) for status, entry in raw.items()}


def _pick(node: Mapping[str, Any], snake: str, camel: str) -> Any:
    return node[snake] if snake in node else node.get(camel)


def decode_next_action_spec(node: Mapping[str, Any]) -> NextActionSpec:
    if not isinstance(node, Mapping):
        raise MalformedFieldError("`next_action_spec` must be a keyed record")
    confirm = _pick(node, "confirm_response_status_specs", "confirmResponseStatusSpecs")
    if confirm is None:
        raise MalformedFieldError("`next_action_spec` is missing `confirm_response_status_specs`")
    post_confirm = _pick(node, "post_confirm_handling_pi_status_specs", "postConfirmHandlingPiStatusSpecs")
    return NextActionSpec(
        confirm_response_status_specs=_decode_status_map(
            confirm, decode_confirm_response_status, "confirm_response_status_specs"),
        post_confirm_handling_pi_status_specs=None if post_confirm is None else _decode_status_map(
            post_confirm, decode_post_confirm_status, "post_confirm_handling_pi_status_specs"),
    )


def decode_form_spec(node: Mapping[str, Any]) -> FormSpec:
    """Decode one payment method's entry. Any malformed field fails the whole entry."""
    payment_method = _read_tag(node)
    fields = node.get("fields")
    if not isinstance(fields, Sequence) or isinstance(fields, (str, bytes)):
        raise MalformedFieldError(f"Form spec `{payment_method}` is missing its `fields` list",
                                  tag=payment_method)
    next_action = _pick(node, "next_action_spec", "nextActionSpec")
    is_async = node.get("async")
    if is_async is not None and not isinstance(is_async, bool):
        raise MalformedFieldError(f"Form spec `{payment_method}` has a non-boolean `async`",
                                  tag=payment_method)
    return FormSpec(
        type=payment_method,
        async_=is_async,
        fields=[decode_field_spec(f) for f in fields],
        next_action_spec=None if next_action is None else decode_next_action_spec(next_action),
    )


def decode_form_specs(nodes: Sequence[Mapping[str, Any]]) -> list[FormSpec]:
    if not isinstance(nodes, Sequence) or isinstance(nodes, (str, bytes)):
        raise MalformedFieldError("Form spec document must be a list of entries")
    return [decode_form_spec(n) for n in nodes]
