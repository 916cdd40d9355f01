from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from chordcraft.core.errors import InvalidFingering
from chordcraft.services.fretted.instrument import Instrument
from chordcraft.services.theory.notes import unique_pitch_classes

MAX_NOTATION_FRET = 24

# Playability score terms (0..100 scale)
_BASE_PLAYABILITY = 100
_SPAN_PENALTY = 10
_HIGH_BARRE_PENALTY = 40
_INTERIOR_OPEN_PENALTY = 15
_OPEN_POSITION_BONUS = 10
_HIGH_FRET_START = 7
_HIGH_FRET_PENALTY = 2
_EXTRA_MUTE_PENALTY = 5
# (max finger ratio, score delta) checked in order; anything above uses the last delta
_FINGER_RATIO_BONUS = ((0.25, 15), (0.5, 10), (0.75, 0))
_ALL_FINGERS_PENALTY = -5


@dataclass(frozen=True)
class StringState:
    """One string of a fingering: muted (fret None) or fretted at `fret` (0 = open)."""

    fret: int | None = None

    @property
    def is_played(self) -> bool:
        return self.fret is not None

    @property
    def is_open(self) -> bool:
        return self.fret == 0

    @property
    def is_fretted(self) -> bool:
        """Pressed behind a fret, open strings excluded."""
        return self.fret is not None and self.fret > 0

    def __str__(self) -> str:
        if self.fret is None:
            return "x"
        if self.fret < 10:
            return str(self.fret)
        return f"({self.fret})"


MUTED = StringState(None)


def _runs(indices: Sequence[int]) -> list[list[int]]:
    """Split string indices into index-contiguous runs."""
    runs: list[list[int]] = []
    for idx in sorted(indices):
        if runs and idx == runs[-1][-1] + 1:
            runs[-1].append(idx)
        else:
            runs.append([idx])
    return runs


def _parse_group(text: str, pos: int) -> tuple[int, int]:
    end = text.find(")", pos)
    if end < 0:
        raise InvalidFingering("Unclosed parenthesis in fret notation")
    number = text[pos:end]
    if not (number.isascii() and number.isdigit()):
        raise InvalidFingering(f"Invalid fret number: {number}")
    fret = int(number)
    if fret > MAX_NOTATION_FRET:
        raise InvalidFingering(f"Fret {fret} exceeds maximum of {MAX_NOTATION_FRET}")
    return fret, end + 1


@dataclass(frozen=True)
class Fingering:
    """
    One left-hand position: a state per string, lowest-pitched string first.
    """

    strings: tuple[StringState, ...]

    @classmethod
    def parse(cls, text: str) -> Fingering:
        """
        Parse tab notation: x/X muted, 0-9 a fret, (NN) a fret of 10 or more.
        Spaces and dashes are ignored.
        """
        raw = (text or "").strip()
        if not raw:
            raise InvalidFingering("Empty fingering")

        states: list[StringState] = []
        pos = 0
        while pos < len(raw):
            ch = raw[pos]
            pos += 1
            if ch in "xX":
                states.append(MUTED)
            elif ch.isdigit() and ch.isascii():
                states.append(StringState(int(ch)))
            elif ch == "(":
                fret, pos = _parse_group(raw, pos)
                states.append(StringState(fret))
            elif ch in " -":
                continue
            else:
                raise InvalidFingering(f"Invalid character in fingering: '{ch}'")

        if not states:
            raise InvalidFingering("No strings found")
        return cls(tuple(states))

    @classmethod
    def from_frets(cls, frets: Iterable[int | None]) -> Fingering:
        """Build from per-string frets, None (or a negative fret) meaning muted."""
        states = []
        for fret in frets:
            if fret is None or int(fret) < 0:
                states.append(MUTED)
            else:
                states.append(StringState(int(fret)))
        return cls(tuple(states))

    def __str__(self) -> str:
        return "".join(str(s) for s in self.strings)

    @property
    def string_count(self) -> int:
        return len(self.strings)

    @property
    def frets(self) -> tuple[int | None, ...]:
        return tuple(s.fret for s in self.strings)

    @property
    def played_count(self) -> int:
        return sum(1 for s in self.strings if s.is_played)

    @property
    def muted_count(self) -> int:
        return sum(1 for s in self.strings if not s.is_played)

    def fretted_positions(self) -> list[tuple[int, int]]:
        """(string_index, fret) for every string pressed behind a fret."""
        return [(i, int(s.fret)) for i, s in enumerate(self.strings) if s.is_fretted]

    @property
    def min_fret(self) -> int | None:
        frets = [f for _i, f in self.fretted_positions()]
        return min(frets) if frets else None

    @property
    def max_fret(self) -> int | None:
        """Highest fret among played strings, open strings included."""
        frets = [int(s.fret) for s in self.strings if s.is_played]
        return max(frets) if frets else None

    @property
    def fret_span(self) -> int:
        frets = [f for _i, f in self.fretted_positions()]
        if not frets:
            return 0
        return int(max(frets) - min(frets))

    def _fret_groups(self) -> dict[int, list[int]]:
        groups: dict[int, list[int]] = {}
        for idx, fret in self.fretted_positions():
            groups.setdefault(fret, []).append(idx)
        return groups

    @property
    def min_fingers_required(self) -> int:
        """
        Fingers needed when every index-contiguous run at one fret is barred by
        a single finger. Non-contiguous strings at the same fret each count as
        another finger, so this can overstate shapes a player would bar across
        a gap (133211 counts 4).
        """
        return sum(len(_runs(strings)) for strings in self._fret_groups().values())

    @property
    def has_barre(self) -> bool:
        low = self.min_fret
        if low is None:
            return False
        return sum(1 for s in self.strings if s.fret == low) >= 2

    def has_high_barre_with_threshold(self, threshold: int) -> bool:
        low = self.min_fret
        if low is None:
            return False

        longest = 0
        longest_fret = 0
        groups = self._fret_groups()
        for fret in sorted(groups):
            run = max(len(r) for r in _runs(groups[fret]))
            if run > longest:
                longest = run
                longest_fret = fret
        return longest >= int(threshold) and longest_fret > low

    def has_high_barre(self, instrument: Instrument) -> bool:
        """
        True when the longest barre is long enough to matter and sits above the
        lowest fret used, i.e. it needs a ring or pinkie barre.
        """
        return self.has_high_barre_with_threshold(instrument.main_barre_threshold)

    @property
    def interior_open_count(self) -> int:
        """Open strings between the first and last fretted (non-open) strings."""
        fretted = [i for i, s in enumerate(self.strings) if s.is_fretted]
        if len(fretted) < 2:
            return 0
        first, last = fretted[0], fretted[-1]
        return sum(1 for s in self.strings[first : last + 1] if s.is_open)

    @property
    def interior_mute_count(self) -> int:
        """Muted strings between the first and last played strings."""
        played = [i for i, s in enumerate(self.strings) if s.is_played]
        if not played:
            return 0
        first, last = played[0], played[-1]
        return sum(1 for s in self.strings[first : last + 1] if not s.is_played)

    @property
    def has_open_string(self) -> bool:
        return any(s.is_open for s in self.strings)

    def is_open_position(self, instrument: Instrument) -> bool:
        return self.has_open_string and (self.max_fret or 0) <= int(instrument.open_position_threshold)

    def is_playable_with(self, max_stretch: int, max_fingers: int) -> bool:
        if self.fret_span > int(max_stretch):
            return False
        return self.min_fingers_required <= int(max_fingers)

    def is_playable(self, instrument: Instrument) -> bool:
        return self.is_playable_with(instrument.max_stretch, instrument.max_fingers)

    def playability_score(self, instrument: Instrument) -> int:
        """
        0-100, higher is easier to play, 0 when the hand cannot reach it.
        """
        span = self.fret_span
        if span > int(instrument.max_stretch):
            return 0
        fingers = self.min_fingers_required
        max_fingers = int(instrument.max_fingers)
        if fingers > max_fingers:
            return 0

        score = _BASE_PLAYABILITY - span * _SPAN_PENALTY

        ratio = float(fingers) / float(max_fingers)
        delta = _ALL_FINGERS_PENALTY
        for limit, bonus in _FINGER_RATIO_BONUS:
            if ratio <= limit:
                delta = bonus
                break
        score += delta

        if self.has_high_barre(instrument):
            score -= _HIGH_BARRE_PENALTY

        interior_opens = self.interior_open_count
        score -= interior_opens * _INTERIOR_OPEN_PENALTY
        if interior_opens == 0 and self.is_open_position(instrument):
            score += _OPEN_POSITION_BONUS

        low = self.min_fret
        if low is not None and low > _HIGH_FRET_START:
            score -= (low - _HIGH_FRET_START) * _HIGH_FRET_PENALTY

        muted = self.muted_count
        if muted > 1:
            score -= (muted - 1) * _EXTRA_MUTE_PENALTY

        return int(max(0, min(100, score)))

    def pitches(self, instrument: Instrument) -> list[int]:
        """MIDI pitch of every played string, lowest string first."""
        tuning = instrument.tuning
        out: list[int] = []
        for idx, state in enumerate(self.strings):
            if idx >= len(tuning) or not state.is_played:
                continue
            out.append(int(tuning[idx]) + int(state.fret))
        return out

    def unique_pitch_classes(self, instrument: Instrument) -> list[int]:
        return unique_pitch_classes(self.pitches(instrument))

    def bass_note(self, instrument: Instrument) -> int | None:
        """
        Pitch of the first played string counting up from the instrument's bass
        string; strings below it (re-entrant tunings) are only used when every
        string from the bass string up is muted.
        """
        tuning = instrument.tuning
        count = min(len(self.strings), len(tuning))
        bass_idx = min(int(instrument.bass_string_index), count)
        order = list(range(bass_idx, count)) + list(range(0, bass_idx))
        for idx in order:
            state = self.strings[idx]
            if state.is_played:
                return int(tuning[idx]) + int(state.fret)
        return None
