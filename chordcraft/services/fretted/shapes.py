from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from chordcraft.services.fretted.fingering import Fingering
from chordcraft.services.fretted.instrument import Instrument

# Pattern slots run lowest string first. None means muted, n means n frets
# above the shape's base fret (0 = the barre, or the nut for open shapes).
Pattern = tuple[Optional[int], ...]


@dataclass(frozen=True)
class StandardShape:
    name: str
    pattern: Pattern

    @property
    def string_count(self) -> int:
        return len(self.pattern)

    def matches(self, fingering: Fingering) -> int | None:
        """
        Base fret at which `fingering` is this shape, or None.
        """
        strings = fingering.strings
        if len(strings) != self.string_count:
            return None

        base: int | None = None
        for state, offset in zip(strings, self.pattern):
            if offset == 0 and state.is_played:
                if base is None:
                    base = int(state.fret)
                elif base != state.fret:
                    return None

        if base is None:
            base = fingering.min_fret or 0

        for state, offset in zip(strings, self.pattern):
            if offset is None:
                if state.is_played:
                    return None
                continue
            if not state.is_played or int(state.fret) != base + int(offset):
                return None
        return base

    def at(self, base_fret: int) -> Fingering:
        """The shape moved to `base_fret`."""
        return Fingering.from_frets(
            None if offset is None else int(base_fret) + int(offset) for offset in self.pattern
        )


def _shape(name: str, *pattern: int | None) -> StandardShape:
    return StandardShape(name=name, pattern=tuple(pattern))


# Standard tuning. The Am and E shapes barred up the neck give every minor
# and major chord (x02210 at fret 2 is Bm x24432, 022100 at fret 1 is F 133211).
GUITAR_SHAPES: tuple[StandardShape, ...] = (
    _shape("Am", None, 0, 2, 2, 1, 0),
    _shape("A", None, 0, 2, 2, 2, 0),
    _shape("Em", 0, 2, 2, 0, 0, 0),
    _shape("E", 0, 2, 2, 1, 0, 0),
    _shape("C", None, 3, 2, 0, 1, 0),
    _shape("G", 3, 2, 0, 0, 0, 3),
    _shape("D", None, None, 0, 2, 3, 2),
    _shape("Dm", None, None, 0, 2, 3, 1),
)

# GCEA, re-entrant
UKULELE_SHAPES: tuple[StandardShape, ...] = (
    _shape("A", 2, 1, 0, 0),
    _shape("Am", 2, 0, 0, 0),
    _shape("C", 0, 0, 0, 3),
    _shape("F", 2, 0, 1, 0),
    _shape("G", 0, 2, 3, 2),
    _shape("D", 2, 2, 2, 0),
    _shape("Dm", 2, 2, 1, 0),
    _shape("E", 4, 4, 4, 2),
    _shape("Em", 0, 4, 3, 2),
    _shape("Bb", 3, 2, 1, 1),
)

# GDAE, tuned in fifths
MANDOLIN_SHAPES: tuple[StandardShape, ...] = (
    _shape("G", 0, 0, 2, 3),
    _shape("C", 0, 2, 3, 0),
    _shape("D", 2, 0, 0, 2),
    _shape("A", 2, 2, 4, 5),
    _shape("E", 0, 4, 4, 2),
    _shape("F", 3, 5, 5, 3),
    _shape("Am", 2, 2, 0, 0),
    _shape("Em", 0, 4, 0, 2),
    _shape("Dm", 2, 0, 0, 1),
    _shape("Gm", 0, 0, 2, 1),
)

# Open G (gDGBD), drone string first
BANJO_SHAPES: tuple[StandardShape, ...] = (
    _shape("G", 0, 0, 0, 0, 0),
    _shape("C", None, 2, 0, 1, 2),
    _shape("C-alt", 0, 2, 0, 1, 2),
    _shape("D", None, 0, 0, 2, 4),
    _shape("D7", None, 0, 0, 2, 0),
    _shape("Em", None, 0, 0, 0, 2),
    _shape("Am", None, 2, 2, 0, 0),
    _shape("F", None, 2, 1, 0, 0),
    _shape("A", None, 0, 0, 0, 0),
    _shape("Bm", None, 2, 2, 1, 0),
)

SHAPE_CATALOGS: dict[str, tuple[StandardShape, ...]] = {
    "guitar": GUITAR_SHAPES,
    "ukulele": UKULELE_SHAPES,
    "mandolin": MANDOLIN_SHAPES,
    "banjo": BANJO_SHAPES,
}

_CATALOG_BY_STRING_COUNT = {6: "guitar", 5: "banjo", 4: "ukulele"}


def catalog_for(instrument: Instrument) -> tuple[StandardShape, ...]:
    key = instrument.shape_catalog
    if key is None:
        key = _CATALOG_BY_STRING_COUNT.get(int(instrument.string_count), "")
    return SHAPE_CATALOGS.get(str(key), ())


def find_matching_shape(
    fingering: Fingering,
    catalog: tuple[StandardShape, ...] = GUITAR_SHAPES,
) -> tuple[str, int] | None:
    """
    (shape name, base fret) of the first catalog shape the fingering matches.
    """
    for shape in catalog:
        base = shape.matches(fingering)
        if base is not None:
            return shape.name, base
    return None
