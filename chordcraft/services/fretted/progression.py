from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable

import numpy as np

from chordcraft.core.config import setting_int
from chordcraft.schemas import PlayingContext, ProgressionOptions
from chordcraft.services.chords.vocabulary import ChordTones, chord_tones
from chordcraft.services.fretted.fingering import Fingering
from chordcraft.services.fretted.generator import ScoredFingering, generate_fingerings
from chordcraft.services.fretted.instrument import Instrument
from chordcraft.services.fretted.shapes import StandardShape, catalog_for, find_matching_shape

_LOG = logging.getLogger(__name__)

ChordResolver = Callable[[str], "ChordTones | None"]


@dataclass(frozen=True)
class TransitionWeights:
    base_score: int
    # Points per finger below _MOVEMENT_BASELINE that has to move
    movement_weight: int
    anchor_bonus: int
    shape_slide_bonus: int
    barre_similarity_bonus: int
    open_position_bonus: int
    string_count_similarity_bonus: int
    distance_penalty: int


SOLO_TRANSITION_WEIGHTS = TransitionWeights(
    base_score=100,
    movement_weight=30,
    anchor_bonus=20,
    shape_slide_bonus=50,
    barre_similarity_bonus=15,
    open_position_bonus=10,
    string_count_similarity_bonus=5,
    distance_penalty=5,
)

# Band playing favours staying put over reaching for a fuller voicing
BAND_TRANSITION_WEIGHTS = TransitionWeights(
    base_score=100,
    movement_weight=40,
    anchor_bonus=20,
    shape_slide_bonus=50,
    barre_similarity_bonus=15,
    open_position_bonus=10,
    string_count_similarity_bonus=5,
    distance_penalty=8,
)

_MOVEMENT_BASELINE = 4


def transition_weights(context: PlayingContext) -> TransitionWeights:
    return BAND_TRANSITION_WEIGHTS if context == PlayingContext.BAND else SOLO_TRANSITION_WEIGHTS


@dataclass(frozen=True)
class ChordTransition:
    from_chord: str
    to_chord: str
    from_fingering: ScoredFingering
    to_fingering: ScoredFingering
    score: int
    finger_movements: int
    common_anchors: int
    position_distance: int


@dataclass(frozen=True)
class ProgressionSequence:
    chords: list[str]
    fingerings: list[ScoredFingering]
    transitions: list[ChordTransition]
    total_score: int
    avg_transition_score: float


@dataclass(frozen=True)
class _BeamEntry:
    path: tuple[ScoredFingering, ...]
    transitions: tuple[ChordTransition, ...]
    score: int


def finger_changes(from_fingering: Fingering, to_fingering: Fingering) -> tuple[int, int]:
    """
    (movements, anchors): strings whose state changes, and strings played at
    the same fret in both fingerings. Strings muted in both count as neither.
    """
    movements = 0
    anchors = 0
    for a, b in zip(from_fingering.strings, to_fingering.strings):
        if a.is_played and b.is_played:
            if a.fret == b.fret:
                anchors += 1
            else:
                movements += 1
        elif a.is_played or b.is_played:
            movements += 1
    return movements, anchors


def _same_shape(
    a: Fingering,
    b: Fingering,
    catalog: tuple[StandardShape, ...],
) -> bool:
    if not catalog:
        return False
    match_a = find_matching_shape(a, catalog)
    if match_a is None:
        return False
    match_b = find_matching_shape(b, catalog)
    return match_b is not None and match_a[0] == match_b[0]


def _shape_similarity(
    a: Fingering,
    b: Fingering,
    instrument: Instrument,
    weights: TransitionWeights,
) -> int:
    bonus = 0
    if _same_shape(a, b, catalog_for(instrument)):
        bonus += weights.shape_slide_bonus
    if a.has_barre and b.has_barre:
        bonus += weights.barre_similarity_bonus
    if a.is_open_position(instrument) and b.is_open_position(instrument):
        bonus += weights.open_position_bonus
    if abs(a.played_count - b.played_count) <= 1:
        bonus += weights.string_count_similarity_bonus
    return bonus


def score_transition(
    from_chord: str,
    to_chord: str,
    from_scored: ScoredFingering,
    to_scored: ScoredFingering,
    instrument: Instrument,
    playing_context: PlayingContext = PlayingContext.SOLO,
) -> ChordTransition:
    weights = transition_weights(playing_context)
    a = from_scored.fingering
    b = to_scored.fingering

    movements, anchors = finger_changes(a, b)
    distance = abs(int(to_scored.position) - int(from_scored.position))

    score = weights.base_score
    score += (_MOVEMENT_BASELINE - movements) * weights.movement_weight
    score += anchors * weights.anchor_bonus
    score += _shape_similarity(a, b, instrument, weights)
    score -= distance * weights.distance_penalty

    return ChordTransition(
        from_chord=from_chord,
        to_chord=to_chord,
        from_fingering=from_scored,
        to_fingering=to_scored,
        score=int(score),
        finger_movements=int(movements),
        common_anchors=int(anchors),
        position_distance=int(distance),
    )


def beam_width(limit: int) -> int:
    multiplier = setting_int("BEAM_WIDTH_MULTIPLIER", 3)
    minimum = setting_int("BEAM_WIDTH_MIN", 10)
    return max(minimum, multiplier * int(limit))


def _resolve_chords(
    chord_names: Iterable[str],
    resolver: ChordResolver,
) -> list[tuple[str, ChordTones]]:
    resolved: list[tuple[str, ChordTones]] = []
    for name in chord_names:
        tones = resolver(name)
        if tones is None:
            _LOG.info("Dropping unreadable chord %r from progression", name)
            continue
        resolved.append((str(name), tones))
    return resolved


def _to_sequence(chords: list[str], entry: _BeamEntry) -> ProgressionSequence:
    transitions = list(entry.transitions)
    avg = float(np.mean([t.score for t in transitions])) if transitions else 0.0
    return ProgressionSequence(
        chords=list(chords),
        fingerings=list(entry.path),
        transitions=transitions,
        total_score=int(entry.score),
        avg_transition_score=avg,
    )


def generate_progression(
    chord_names: Iterable[str],
    instrument: Instrument,
    options: ProgressionOptions | None = None,
    *,
    resolver: ChordResolver = chord_tones,
) -> list[ProgressionSequence]:
    """
    Best fingering sequences for a chord progression, best first.

    Candidates for each chord come from generate_fingerings. A beam of partial
    sequences is extended one chord at a time, keeping the highest running
    transition totals. Returns an empty list when the input is empty, when
    some chord has no fingering, or when no path keeps every move within
    options.max_fret_distance.
    """
    opts = options or ProgressionOptions()
    resolved = _resolve_chords(chord_names, resolver)
    if not resolved:
        return []

    labels = [label for label, _tones in resolved]
    gen_opts = opts.generator_options.model_copy(update={"limit": opts.candidates_per_chord})
    context = opts.generator_options.playing_context

    candidates: list[list[ScoredFingering]] = []
    for label, tones in resolved:
        found = generate_fingerings(tones, instrument, gen_opts)
        if not found:
            _LOG.debug("No fingerings for %s on %s", label, instrument.name)
            return []
        candidates.append(found)

    width = beam_width(opts.limit)
    beam = [_BeamEntry(path=(c,), transitions=(), score=0) for c in candidates[0]]

    for idx in range(1, len(candidates)):
        expanded: list[_BeamEntry] = []
        for entry in beam:
            prev = entry.path[-1]
            for cand in candidates[idx]:
                transition = score_transition(
                    labels[idx - 1],
                    labels[idx],
                    prev,
                    cand,
                    instrument,
                    context,
                )
                if transition.position_distance > opts.max_fret_distance:
                    continue
                expanded.append(
                    _BeamEntry(
                        path=entry.path + (cand,),
                        transitions=entry.transitions + (transition,),
                        score=entry.score + transition.score,
                    )
                )
        if not expanded:
            _LOG.debug(
                "No transition into %s within %d frets", labels[idx], opts.max_fret_distance
            )
            return []
        expanded.sort(key=lambda e: e.score, reverse=True)
        beam = expanded[:width]
        _LOG.debug("Beam after %s: %d kept of %d", labels[idx], len(beam), len(expanded))

    beam.sort(key=lambda e: e.score, reverse=True)
    return [_to_sequence(labels, entry) for entry in beam[: opts.limit]]
