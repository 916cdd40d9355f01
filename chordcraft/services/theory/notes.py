from __future__ import annotations

from typing import Iterable

NOTE_NAMES_SHARP = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
NOTE_NAMES_FLAT = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]

NOTE_TO_PC: dict[str, int] = {
    "C": 0,
    "B#": 0,
    "C#": 1,
    "Db": 1,
    "D": 2,
    "D#": 3,
    "Eb": 3,
    "E": 4,
    "Fb": 4,
    "E#": 5,
    "F": 5,
    "F#": 6,
    "Gb": 6,
    "G": 7,
    "G#": 8,
    "Ab": 8,
    "A": 9,
    "A#": 10,
    "Bb": 10,
    "B": 11,
    "Cb": 11,
}


def pitch_class(pitch_midi: int) -> int:
    return int(pitch_midi) % 12


def pc_to_name(pc: int, *, flats: bool = False) -> str:
    names = NOTE_NAMES_FLAT if flats else NOTE_NAMES_SHARP
    return names[int(pc) % 12]


def note_to_pc(name: str) -> int | None:
    if not name:
        return None
    name = name.strip().replace("♯", "#").replace("♭", "b")
    if not name:
        return None
    key = name[0].upper() + name[1:]
    return NOTE_TO_PC.get(key)


def unique_pitch_classes(pitches: Iterable[int]) -> list[int]:
    return sorted({pitch_class(p) for p in pitches})
