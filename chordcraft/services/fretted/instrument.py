from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Protocol

from chordcraft.core.config import settings
from chordcraft.core.errors import InvalidCapoPosition, InvalidInstrument
from chordcraft.services.theory.notes import pc_to_name

# Open-string MIDI pitches, lowest string first.
STANDARD_TUNING = (40, 45, 50, 55, 59, 64)  # E2 A2 D3 G3 B3 E4
UKULELE_TUNING = (67, 60, 64, 69)           # G4 C4 E4 A4 (re-entrant)

TUNINGS: dict[str, tuple[int, ...]] = {
    "standard": STANDARD_TUNING,
    "drop_d": (38, 45, 50, 55, 59, 64),            # D2 A2 D3 G3 B3 E4
    "open_g": (38, 43, 50, 55, 59, 62),            # D2 G2 D3 G3 B3 D4
    "dadgad": (38, 45, 50, 55, 57, 62),            # D2 A2 D3 G3 A3 D4
    "guitar_7": (35, 40, 45, 50, 55, 59, 64),      # B1 E2 A2 D3 G3 B3 E4
    "ukulele": UKULELE_TUNING,
    "baritone_ukulele": (50, 55, 59, 64),          # D3 G3 B3 E4
    "bass": (28, 33, 38, 43),                      # E1 A1 D2 G2
    "bass_5": (23, 28, 33, 38, 43),                # B0 E1 A1 D2 G2
    "mandolin": (55, 62, 69, 76),                  # G3 D4 A4 E5
    "banjo": (67, 50, 55, 59, 62),                 # g4 D3 G3 B3 D4 (drone first)
}

DEFAULT_MAX_FINGERS = 4
DEFAULT_OPEN_POSITION_THRESHOLD = 4
MAX_CAPO_FRET = 12


class Instrument(Protocol):
    """
    What the generator, shape recognizer and optimizer need from an instrument.
    """

    name: str
    tuning: tuple[int, ...]
    fret_range: tuple[int, int]
    max_stretch: int
    max_fingers: int
    open_position_threshold: int
    main_barre_threshold: int
    min_played_strings: int
    string_names: tuple[str, ...]
    shape_catalog: str | None

    @property
    def string_count(self) -> int: ...

    @property
    def bass_string_index(self) -> int: ...

    @property
    def max_capo_fret(self) -> int: ...

    def with_capo(self, fret: int) -> Instrument: ...


def _lowest_string_index(tuning: tuple[int, ...]) -> int:
    lowest = min(tuning)
    return tuning.index(lowest)


@dataclass(frozen=True)
class ConfigurableInstrument:
    """
    An N-string fretted instrument described entirely by its parameters.

    Thresholds left as None are derived from the string count: half the
    strings (at least 2) for both the main-barre length and the minimum
    number of sounding strings. shape_catalog None means "pick the catalog
    from the string count"; an empty string disables shape recognition.
    """

    tuning: tuple[int, ...]
    fret_range: tuple[int, int] = (0, 24)
    max_stretch: int = 4
    name: str = "custom"
    max_fingers: int = DEFAULT_MAX_FINGERS
    open_position_threshold: int = DEFAULT_OPEN_POSITION_THRESHOLD
    main_barre_threshold: int | None = None
    min_played_strings: int | None = None
    string_names: tuple[str, ...] | None = None
    shape_catalog: str | None = None

    def __post_init__(self) -> None:
        tuning = tuple(int(p) for p in self.tuning)
        if not tuning:
            raise InvalidInstrument("tuning must contain at least one string")
        lo, hi = (int(self.fret_range[0]), int(self.fret_range[1]))
        if lo != 0 or hi < 0:
            raise InvalidInstrument(f"fret range must start at 0, got ({lo}, {hi})")
        if int(self.max_stretch) < 0 or int(self.max_fingers) < 1:
            raise InvalidInstrument("stretch must be >= 0 and fingers >= 1")

        default_threshold = max(2, len(tuning) // 2)
        names = self.string_names
        if names is None:
            names = tuple(pc_to_name(p) for p in tuning)
        elif len(names) != len(tuning):
            raise InvalidInstrument("one string name per string is required")

        object.__setattr__(self, "tuning", tuning)
        object.__setattr__(self, "fret_range", (lo, hi))
        object.__setattr__(self, "string_names", tuple(names))
        if self.main_barre_threshold is None:
            object.__setattr__(self, "main_barre_threshold", default_threshold)
        if self.min_played_strings is None:
            object.__setattr__(self, "min_played_strings", default_threshold)

    @property
    def string_count(self) -> int:
        return len(self.tuning)

    @property
    def bass_string_index(self) -> int:
        return _lowest_string_index(self.tuning)

    @property
    def max_capo_fret(self) -> int:
        return min(MAX_CAPO_FRET, int(self.fret_range[1]) // 2)

    def with_capo(self, fret: int) -> CapoedInstrument:
        return CapoedInstrument(inner=self, capo=int(fret))

    @classmethod
    def from_tuning(cls, name: str, **kwargs) -> ConfigurableInstrument:
        key = str(name).strip().lower()
        if key not in TUNINGS:
            raise InvalidInstrument(f"unknown tuning '{name}'")
        return cls(tuning=TUNINGS[key], name=key, **kwargs)

    @classmethod
    def baritone_ukulele(cls) -> ConfigurableInstrument:
        return cls(
            tuning=TUNINGS["baritone_ukulele"],
            fret_range=(0, 19),
            max_stretch=5,
            name="baritone_ukulele",
            shape_catalog="ukulele",
        )

    @classmethod
    def bass(cls) -> ConfigurableInstrument:
        return cls(tuning=TUNINGS["bass"], fret_range=(0, 24), name="bass", shape_catalog="")

    @classmethod
    def bass_5_string(cls) -> ConfigurableInstrument:
        return cls(tuning=TUNINGS["bass_5"], fret_range=(0, 24), name="bass_5", shape_catalog="")

    @classmethod
    def mandolin(cls) -> ConfigurableInstrument:
        return cls(
            tuning=TUNINGS["mandolin"],
            fret_range=(0, 20),
            max_stretch=5,
            name="mandolin",
            shape_catalog="mandolin",
        )

    @classmethod
    def banjo(cls) -> ConfigurableInstrument:
        return cls(
            tuning=TUNINGS["banjo"],
            fret_range=(0, 22),
            name="banjo",
            string_names=("g", "D", "G", "B", "D"),
            shape_catalog="banjo",
        )

    @classmethod
    def guitar_7_string(cls) -> ConfigurableInstrument:
        return cls(
            tuning=TUNINGS["guitar_7"],
            name="guitar_7",
            string_names=("B", "E", "A", "D", "G", "B", "e"),
            shape_catalog="",
        )

    @classmethod
    def guitar_drop_d(cls) -> ConfigurableInstrument:
        return cls(
            tuning=TUNINGS["drop_d"],
            name="drop_d",
            string_names=("D", "A", "D", "G", "B", "e"),
            shape_catalog="",
        )

    @classmethod
    def guitar_open_g(cls) -> ConfigurableInstrument:
        return cls(
            tuning=TUNINGS["open_g"],
            name="open_g",
            string_names=("D", "G", "D", "G", "B", "d"),
            shape_catalog="",
        )

    @classmethod
    def guitar_dadgad(cls) -> ConfigurableInstrument:
        return cls(
            tuning=TUNINGS["dadgad"],
            name="dadgad",
            string_names=("D", "A", "D", "G", "A", "d"),
            shape_catalog="",
        )


@dataclass(frozen=True)
class Guitar(ConfigurableInstrument):
    """Six-string guitar in standard EADGBE tuning."""

    tuning: tuple[int, ...] = STANDARD_TUNING
    fret_range: tuple[int, int] = (0, 24)
    max_stretch: int = 4
    name: str = "guitar"
    string_names: tuple[str, ...] | None = ("E", "A", "D", "G", "B", "e")
    shape_catalog: str | None = "guitar"


@dataclass(frozen=True)
class Ukulele(ConfigurableInstrument):
    """
    Soprano/concert/tenor ukulele in re-entrant GCEA tuning. The shorter scale
    allows a wider stretch and a higher open position, and single-note
    voicings are accepted.
    """

    tuning: tuple[int, ...] = UKULELE_TUNING
    fret_range: tuple[int, int] = (0, 15)
    max_stretch: int = 5
    name: str = "ukulele"
    open_position_threshold: int = 5
    main_barre_threshold: int | None = 2
    min_played_strings: int | None = 1
    shape_catalog: str | None = "ukulele"


@dataclass(frozen=True)
class CapoedInstrument:
    """
    An instrument with a capo clamped at `capo`: open strings sound `capo`
    semitones higher and the usable fret range shrinks by the same amount.
    Every other physical property comes from the wrapped instrument.
    """

    inner: Instrument
    capo: int
    tuning: tuple[int, ...] = field(init=False)
    fret_range: tuple[int, int] = field(init=False)

    def __post_init__(self) -> None:
        max_capo = int(self.inner.max_capo_fret)
        fret = int(self.capo)
        if fret < 0 or fret > max_capo:
            raise InvalidCapoPosition(fret, 0, max_capo)
        object.__setattr__(self, "tuning", tuple(int(p) + fret for p in self.inner.tuning))
        object.__setattr__(self, "fret_range", (0, max(0, int(self.inner.fret_range[1]) - fret)))

    @property
    def name(self) -> str:
        return f"{self.inner.name}+capo{self.capo}"

    @property
    def max_stretch(self) -> int:
        return self.inner.max_stretch

    @property
    def max_fingers(self) -> int:
        return self.inner.max_fingers

    @property
    def open_position_threshold(self) -> int:
        return self.inner.open_position_threshold

    @property
    def main_barre_threshold(self) -> int:
        return self.inner.main_barre_threshold

    @property
    def min_played_strings(self) -> int:
        return self.inner.min_played_strings

    @property
    def string_names(self) -> tuple[str, ...]:
        return self.inner.string_names

    @property
    def shape_catalog(self) -> str | None:
        return self.inner.shape_catalog

    @property
    def string_count(self) -> int:
        return self.inner.string_count

    @property
    def bass_string_index(self) -> int:
        return self.inner.bass_string_index

    @property
    def max_capo_fret(self) -> int:
        return min(MAX_CAPO_FRET, int(self.fret_range[1]) // 2)

    def with_capo(self, fret: int) -> CapoedInstrument:
        return CapoedInstrument(inner=self, capo=int(fret))


_PRESETS: dict[str, Callable[[], Instrument]] = {
    "guitar": Guitar,
    "standard": Guitar,
    "ukulele": Ukulele,
    "baritone_ukulele": ConfigurableInstrument.baritone_ukulele,
    "bass": ConfigurableInstrument.bass,
    "bass_5": ConfigurableInstrument.bass_5_string,
    "mandolin": ConfigurableInstrument.mandolin,
    "banjo": ConfigurableInstrument.banjo,
    "guitar_7": ConfigurableInstrument.guitar_7_string,
    "drop_d": ConfigurableInstrument.guitar_drop_d,
    "open_g": ConfigurableInstrument.guitar_open_g,
    "dadgad": ConfigurableInstrument.guitar_dadgad,
}


def instrument_names() -> list[str]:
    return sorted(_PRESETS)


def get_instrument(name: str | None = None, *, capo: int = 0) -> Instrument:
    """
    Build a preset instrument by name, optionally with a capo.
    """
    key = str(name or settings.DEFAULT_INSTRUMENT).strip().lower().replace("-", "_")
    factory = _PRESETS.get(key)
    if factory is None:
        raise InvalidInstrument(f"unknown instrument '{name}'")
    instrument = factory()
    if capo:
        return instrument.with_capo(int(capo))
    return instrument
