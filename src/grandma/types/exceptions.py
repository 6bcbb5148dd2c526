"""Exception hierarchy for the SCALE codec."""

from __future__ import annotations


class ScaleError(Exception):
    """
    Base exception for all SCALE-related errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class ScaleTypeError(ScaleError):
    """
    Raised when a codec type is incorrectly defined or given a wrong value type.

    For example a `ScaleVec` subclass without `ELEMENT_TYPE`.
    """


class ScaleValueError(ScaleError):
    """Raised when a value is out of range for the type that should hold it."""


class DecodeError(ScaleError):
    """
    Raised when decoding SCALE bytes to a value fails.

    Decoding is all-or-nothing: once this is raised, nothing that was read
    before the failure is returned to the caller.

    Attributes:
        type_name: The type being decoded.
        detail: Description of what went wrong.
        offset: The byte offset where the error occurred (if known).
    """

    def __init__(
        self,
        type_name: str,
        detail: str,
        *,
        offset: int | None = None,
    ) -> None:
        self.type_name = type_name
        self.detail = detail
        self.offset = offset

        msg = f"Failed to decode {type_name}: {detail}"
        if offset is not None:
            msg = f"{msg} (at byte offset {offset})"

        super().__init__(msg)


class UnexpectedEndError(DecodeError):
    """
    Raised when the buffer is exhausted before a value is fully read.

    Attributes:
        expected_bytes: Number of bytes the value needed.
        actual_bytes: Number of bytes that were left.
    """

    def __init__(
        self,
        type_name: str,
        *,
        expected_bytes: int,
        actual_bytes: int,
        offset: int | None = None,
    ) -> None:
        self.expected_bytes = expected_bytes
        self.actual_bytes = actual_bytes

        detail = f"needed {expected_bytes} bytes, only {actual_bytes} left"
        super().__init__(type_name, detail, offset=offset)
