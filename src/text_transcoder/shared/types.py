"""Core value types shared by every transcoding layer."""

from enum import Enum
from typing import Dict


class Encoding(Enum):
    """Character encodings understood by the transcoder.

    ``AUTO`` is a request, valid only for the source side, and must be
    resolved to a concrete encoding before any decoding happens.
    ``UNSPECIFIED`` marks an unknown or inconclusive encoding.
    """

    UNSPECIFIED = "unspecified"
    AUTO = "auto"
    SINGLE_BYTE = "single_byte"
    UTF8 = "utf8"
    UTF16_LE = "utf16_le"
    UTF16_BE = "utf16_be"

    @property
    def display_name(self) -> str:
        """Human-readable name as used on the command line."""
        return ENCODING_NAMES.get(self, "UNKNOWN")

    @property
    def is_concrete(self) -> bool:
        """True for encodings that describe actual data."""
        return self not in (Encoding.UNSPECIFIED, Encoding.AUTO)

    @classmethod
    def from_name(cls, name: str) -> "Encoding":
        """Look up an encoding by its human-readable name (case-insensitive).

        Raises:
            ValueError: If the name is not in the name table
        """
        try:
            return NAME_TO_ENCODING[name.strip().upper()]
        except KeyError:
            valid = ", ".join(ENCODING_NAMES.values())
            raise ValueError(
                f"Unrecognized encoding name: {name!r} (expected one of {valid})"
            ) from None


ENCODING_NAMES: Dict[Encoding, str] = {
    Encoding.AUTO: "AUTO",
    Encoding.SINGLE_BYTE: "ANSI",
    Encoding.UTF8: "UTF8",
    Encoding.UTF16_LE: "UTF16",
    Encoding.UTF16_BE: "UTF16BE",
}

NAME_TO_ENCODING: Dict[str, Encoding] = {
    name: encoding for encoding, name in ENCODING_NAMES.items()
}
