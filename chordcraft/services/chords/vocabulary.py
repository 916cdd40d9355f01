from __future__ import annotations

import re
from dataclasses import dataclass

from chordcraft.core.errors import InvalidChordName
from chordcraft.services.theory.notes import NOTE_TO_PC, note_to_pc, pc_to_name

_NO_CHORD = {"N", "NO_CHORD", "NOCHORD", "N.C.", "NC", "NONE"}
_ROOT_RE = re.compile(r"^([A-Ga-g])([#b♯♭]?)(.*)$")

# Labels are matched case-sensitively first so "M7" (major) and "m7" (minor) stay apart.
_QUALITY_MAP = {
    "": "maj",
    "maj": "maj",
    "major": "maj",
    "M": "maj",
    "m": "min",
    "min": "min",
    "minor": "min",
    "-": "min",
    "dim": "dim",
    "o": "dim",
    "°": "dim",
    "aug": "aug",
    "+": "aug",
    "sus2": "sus2",
    "sus4": "sus4",
    "sus": "sus4",
    "7": "7",
    "maj7": "maj7",
    "M7": "maj7",
    "Δ": "maj7",
    "Δ7": "maj7",
    "m7": "min7",
    "min7": "min7",
    "-7": "min7",
    "mmaj7": "minmaj7",
    "mM7": "minmaj7",
    "m(maj7)": "minmaj7",
    "minmaj7": "minmaj7",
    "dim7": "dim7",
    "o7": "dim7",
    "°7": "dim7",
    "m7b5": "min7b5",
    "min7b5": "min7b5",
    "hdim7": "min7b5",
    "ø": "min7b5",
    "9": "9",
    "maj9": "maj9",
    "M9": "maj9",
    "m9": "min9",
    "min9": "min9",
    "11": "11",
    "m11": "min11",
    "min11": "min11",
    "13": "13",
    "maj13": "maj13",
    "M13": "maj13",
    "m13": "min13",
    "min13": "min13",
    "7b9": "7b9",
    "7#9": "7#9",
    "7b5": "7b5",
    "7#5": "7#5",
    "7aug": "7#5",
    "+7": "7#5",
    "add9": "add9",
    "madd9": "madd9",
    "m(add9)": "madd9",
    "add11": "add11",
    "6": "6",
    "maj6": "6",
    "m6": "min6",
    "min6": "min6",
}

# quality -> (required intervals, optional intervals) in semitones above the root
_INTERVALS: dict[str, tuple[tuple[int, ...], tuple[int, ...]]] = {
    "maj": ((0, 4, 7), ()),
    "min": ((0, 3, 7), ()),
    "dim": ((0, 3, 6), ()),
    "aug": ((0, 4, 8), ()),
    "sus2": ((0, 2, 7), ()),
    "sus4": ((0, 5, 7), ()),
    "7": ((0, 4, 7, 10), ()),
    "maj7": ((0, 4, 7, 11), ()),
    "min7": ((0, 3, 7, 10), ()),
    "minmaj7": ((0, 3, 7, 11), ()),
    "dim7": ((0, 3, 6, 9), ()),
    "min7b5": ((0, 3, 6, 10), ()),
    "9": ((0, 4, 10, 14), (7,)),
    "maj9": ((0, 4, 11, 14), (7,)),
    "min9": ((0, 3, 10, 14), (7,)),
    "11": ((0, 4, 10, 14, 17), (7,)),
    "min11": ((0, 3, 10, 14, 17), (7,)),
    "13": ((0, 4, 10, 14, 21), (7, 17)),
    "maj13": ((0, 4, 11, 14, 21), (7, 17)),
    "min13": ((0, 3, 10, 14, 21), (7, 17)),
    "7b9": ((0, 4, 7, 10, 13), ()),
    "7#9": ((0, 4, 7, 10, 15), ()),
    "7b5": ((0, 4, 6, 10), ()),
    "7#5": ((0, 4, 8, 10), ()),
    "add9": ((0, 4, 7, 14), ()),
    "madd9": ((0, 3, 7, 14), ()),
    "add11": ((0, 4, 7, 17), ()),
    "6": ((0, 4, 7, 9), ()),
    "min6": ((0, 3, 7, 9), ()),
}

# Qualities whose perfect fifth is not needed to identify the chord
_OMIT_FIFTH = {
    "7", "maj7", "min7", "minmaj7",
    "9", "maj9", "min9",
    "11", "min11",
    "13", "maj13", "min13",
    "7b9", "7#9", "7b5", "7#5",
}

_DISPLAY = {
    "maj": "",
    "min": "m",
    "minmaj7": "m(maj7)",
    "min7": "m7",
    "min7b5": "m7b5",
    "min9": "m9",
    "min11": "m11",
    "min13": "m13",
    "min6": "m6",
}


@dataclass(frozen=True)
class ChordTones:
    root: int
    tones: tuple[int, ...]
    core_tones: tuple[int, ...]
    label: str = ""
    bass: int | None = None

    @property
    def name(self) -> str:
        return self.label or pc_to_name(self.root)


def _normalize_note_name(name: str) -> str | None:
    if not name:
        return None
    name = name.strip().replace("♯", "#").replace("♭", "b")
    if len(name) == 0:
        return None
    root = name[0].upper() + name[1:]
    if root in NOTE_TO_PC:
        return root
    return None


def _split_bass(label: str) -> tuple[str, str | None]:
    if "/" not in label:
        return label, None
    main, bass = label.split("/", 1)
    bass = bass.strip()
    if bass == "":
        bass = None
    return main, bass


def _parse_root_quality(main: str) -> tuple[str | None, str]:
    if ":" in main:
        root, qual = main.split(":", 1)
        return root.strip(), qual.strip()
    match = _ROOT_RE.match(main.strip())
    if match:
        root = f"{match.group(1).upper()}{match.group(2)}"
        return root, match.group(3) or ""
    return None, ""


def _normalize_quality(raw: str) -> str | None:
    qual = raw.strip().replace(" ", "").replace("♭", "b").replace("♯", "#")
    if qual in _QUALITY_MAP:
        return _QUALITY_MAP[qual]
    lowered = qual.lower()
    if lowered in _QUALITY_MAP:
        return _QUALITY_MAP[lowered]
    stripped = lowered.replace("(", "").replace(")", "")
    if stripped in _QUALITY_MAP:
        return _QUALITY_MAP[stripped]
    return None


def split_chord_label(label: str) -> tuple[str | None, str | None, str | None]:
    """
    Parse a chord label into (root, quality, bass_note). Returns (None, None, None)
    for no-chord labels and for labels that cannot be read.
    """
    if not label:
        return None, None, None
    raw = label.strip()
    if raw.upper() in _NO_CHORD:
        return None, None, None

    main, bass = _split_bass(raw)
    root_raw, qual_raw = _parse_root_quality(main)
    root = _normalize_note_name(root_raw or "")
    if root is None:
        return None, None, None

    quality = _normalize_quality(qual_raw)
    if quality is None:
        return None, None, None

    bass_note = None
    if bass is not None:
        bass_note = _normalize_note_name(bass)
        if bass_note is None:
            return None, None, None
    return root, quality, bass_note


def format_chord_label(root: str, quality: str, bass: str | None = None) -> str:
    label = f"{root}{_DISPLAY.get(quality, quality)}"
    if bass:
        label = f"{label}/{bass}"
    return label


def _tones_for(root_pc: int, intervals: tuple[int, ...]) -> tuple[int, ...]:
    out: list[int] = []
    for interval in intervals:
        pc = (int(root_pc) + int(interval)) % 12
        if pc not in out:
            out.append(pc)
    return tuple(out)


def chord_tones(label: str) -> ChordTones | None:
    """
    Resolve a chord label to its root, full tone set and core tone set, with
    the label rewritten in its canonical spelling ("C:min7" -> "Cm7").
    Returns None for labels that cannot be read.
    """
    root, quality, bass = split_chord_label(label)
    if root is None or quality is None:
        return None

    root_pc = note_to_pc(root)
    required, optional = _INTERVALS[quality]
    tones = _tones_for(root_pc, required + optional)
    if quality in _OMIT_FIFTH:
        core = _tones_for(root_pc, tuple(i for i in required if i != 7))
    else:
        core = _tones_for(root_pc, required)

    return ChordTones(
        root=int(root_pc),
        tones=tones,
        core_tones=core,
        label=format_chord_label(root, quality, bass),
        bass=note_to_pc(bass) if bass else None,
    )


def parse_chord(label: str) -> ChordTones:
    tones = chord_tones(label)
    if tones is None:
        raise InvalidChordName(label)
    return tones
