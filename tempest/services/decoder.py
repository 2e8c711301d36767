"""Turn a raw datagram into one of the known packet models."""

from pydantic import ValidationError
from pydantic_core import from_json

from tempest.core.exceptions import MalformedError, UnparseableError
from tempest.schemas.packets import PACKET_TYPES, Packet, UnrecognizedPacket


def describe_validation_error(exc: ValidationError) -> str:
    """
    Flatten a pydantic validation error into one line.

    Each offending field is listed with its location and the raw value it
    was given, e.g. ``debug: Value error, expected zero or one, got 2 (input=2)``.
    """
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: "
        f"{error['msg']} (input={error.get('input')!r})"
        for error in exc.errors(include_url=False)
    )


def decode(data: bytes) -> Packet:
    """
    Decode one datagram.

    Args:
        data: Raw datagram payload, any length.

    Returns:
        The packet model selected by the message `type`, or
        `UnrecognizedPacket` when the type is missing or unknown.

    Raises:
        UnparseableError: The payload is not a UTF-8 encoded JSON object.
        MalformedError: The type is known but the fields do not match it.
    """
    try:
        # Plain UTF-8 only: no byte order mark, no UTF-16, no NaN/Infinity.
        text = data.decode("utf-8")
        message = from_json(text, allow_inf_nan=False)
    except (UnicodeDecodeError, ValueError) as exc:
        raise UnparseableError(f"{exc} (length={len(data)})") from exc

    if not isinstance(message, dict):
        raise UnparseableError(
            f"expected a JSON object, got {type(message).__name__} (length={len(data)})"
        )

    tag = message.get("type")
    model = PACKET_TYPES.get(tag) if isinstance(tag, str) else None
    if model is None:
        return UnrecognizedPacket(type=tag)

    try:
        # Strict: no string-to-number or float-to-integer coercion.
        return model.model_validate_json(text, strict=True)
    except ValidationError as exc:
        raise MalformedError(tag, describe_validation_error(exc)) from exc
