from __future__ import annotations


class ChordCraftError(ValueError):
    """Base class for malformed input and impossible requests."""


class InvalidFingering(ChordCraftError):
    def __init__(self, message: str) -> None:
        super().__init__(f"Invalid fingering: {message}")
        self.reason = message


class InvalidCapoPosition(ChordCraftError):
    def __init__(self, fret: int, min_fret: int, max_fret: int) -> None:
        super().__init__(
            f"Invalid capo position: {fret} (must be between {min_fret} and {max_fret})"
        )
        self.fret = int(fret)
        self.min_fret = int(min_fret)
        self.max_fret = int(max_fret)


class InvalidChordName(ChordCraftError):
    def __init__(self, label: str) -> None:
        super().__init__(f"Invalid chord name: {label}")
        self.label = label


class InvalidInstrument(ChordCraftError):
    def __init__(self, message: str) -> None:
        super().__init__(f"Invalid instrument configuration: {message}")
        self.reason = message
