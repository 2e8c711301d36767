"""Exception types for packet decoding, storage and listener startup."""

from typing import Optional


class DecodeError(Exception):
    """A datagram could not be turned into a packet."""

    def __init__(self, detail: str, variant: Optional[str] = None) -> None:
        """Initialize a new decode error.

        Args:
            detail: Description of what was wrong, including the raw values.
            variant: Message type tag the datagram claimed to be, if any.
        """
        self.detail = detail
        self.variant = variant
        super().__init__(detail if variant is None else f"{variant}: {detail}")


class UnparseableError(DecodeError):
    """The payload is not a well-formed JSON message."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)


class MalformedError(DecodeError):
    """The message type is known but its fields do not fit that type."""

    def __init__(self, variant: str, detail: str) -> None:
        super().__init__(detail, variant=variant)


class StorageError(Exception):
    """An observation could not be written to, or read from, the store."""

    pass


class ListenerStartupError(Exception):
    """The receive endpoint could not be bound."""

    pass
