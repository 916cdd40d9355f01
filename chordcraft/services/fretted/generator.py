from __future__ import annotations

import logging
from dataclasses import dataclass

from chordcraft.schemas import GeneratorOptions, PlayingContext, VoicingType
from chordcraft.services.chords.vocabulary import ChordTones, chord_tones
from chordcraft.services.fretted.fingering import MUTED, Fingering, StringState
from chordcraft.services.fretted.instrument import Instrument
from chordcraft.services.theory.notes import pitch_class

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class FingeringWeights:
    string_usage_bonus: int = 8
    interior_mute_penalty: int = 30
    preferred_position_penalty: int = 3


@dataclass(frozen=True)
class ContextWeights:
    root_in_bass_bonus: int
    full_voicing_bonus: int
    core_voicing_bonus: int
    jazzy_voicing_bonus: int
    jazzy_without_root_penalty: int
    avoid_low_strings_bonus: int
    # Without a preferred position, frets outside [comfort_min, comfort_max]
    # cost position_penalty each.
    comfort_min: int
    comfort_max: int
    position_penalty: int


FINGERING_WEIGHTS = FingeringWeights()

SOLO_WEIGHTS = ContextWeights(
    root_in_bass_bonus=30,
    full_voicing_bonus=20,
    core_voicing_bonus=5,
    jazzy_voicing_bonus=0,
    jazzy_without_root_penalty=15,
    avoid_low_strings_bonus=0,
    comfort_min=0,
    comfort_max=5,
    position_penalty=5,
)

# A bassist already covers the root and the low register
BAND_WEIGHTS = ContextWeights(
    root_in_bass_bonus=5,
    full_voicing_bonus=5,
    core_voicing_bonus=20,
    jazzy_voicing_bonus=20,
    jazzy_without_root_penalty=0,
    avoid_low_strings_bonus=10,
    comfort_min=3,
    comfort_max=10,
    position_penalty=3,
)


def context_weights(context: PlayingContext) -> ContextWeights:
    return BAND_WEIGHTS if context == PlayingContext.BAND else SOLO_WEIGHTS


@dataclass(frozen=True)
class ScoredFingering:
    fingering: Fingering
    score: int
    voicing_type: VoicingType
    has_root_in_bass: bool
    position: int

    def __str__(self) -> str:
        return str(self.fingering)


def _string_options(
    tuning: tuple[int, ...],
    tone_pcs: set[int],
    max_fret: int,
) -> list[list[StringState]]:
    options: list[list[StringState]] = []
    for open_pitch in tuning:
        states = [MUTED]
        for fret in range(0, int(max_fret) + 1):
            if pitch_class(int(open_pitch) + fret) in tone_pcs:
                states.append(StringState(fret))
        options.append(states)
    return options


def _should_continue(
    partial: tuple[StringState, ...],
    total_strings: int,
    max_stretch: int,
    min_played: int,
) -> bool:
    played = sum(1 for s in partial if s.is_played)
    remaining = total_strings - len(partial)
    if played + remaining < min_played:
        return False
    if played < 2:
        return True
    frets = [int(s.fret) for s in partial if s.is_fretted]
    if not frets:
        return True
    return max(frets) - min(frets) <= max_stretch


def _search(
    string_options: list[list[StringState]],
    max_stretch: int,
    min_played: int,
) -> list[tuple[StringState, ...]]:
    """
    Depth-first walk over one state per string. Children are pushed in reverse
    so they are visited, and complete assignments emitted, in option order.
    """
    total = len(string_options)
    results: list[tuple[StringState, ...]] = []
    stack: list[tuple[StringState, ...]] = [()]
    while stack:
        partial = stack.pop()
        if len(partial) == total:
            results.append(partial)
            continue
        for state in reversed(string_options[len(partial)]):
            candidate = partial + (state,)
            if _should_continue(candidate, total, max_stretch, min_played):
                stack.append(candidate)
    return results


def _position(fingering: Fingering) -> int:
    frets = [f for _i, f in fingering.fretted_positions()]
    if not frets:
        return 0
    return int(sum(frets) // len(frets))


def _low_string_indices(instrument: Instrument) -> tuple[int, ...]:
    # by string index, so re-entrant tunings still count their first two strings
    return tuple(range(min(2, int(instrument.string_count))))


def _classify(pcs: set[int], tones: ChordTones) -> VoicingType:
    if all(t in pcs for t in tones.tones):
        return VoicingType.FULL
    if all(t in pcs for t in tones.core_tones):
        return VoicingType.CORE
    return VoicingType.JAZZY


def _position_penalty(position: int, options: GeneratorOptions, weights: ContextWeights) -> int:
    if options.preferred_position is not None:
        distance = abs(int(position) - int(options.preferred_position))
        return distance * FINGERING_WEIGHTS.preferred_position_penalty
    if position < weights.comfort_min:
        return (weights.comfort_min - position) * weights.position_penalty
    if position > weights.comfort_max:
        return (position - weights.comfort_max) * weights.position_penalty
    return 0


def score_fingering(
    fingering: Fingering,
    instrument: Instrument,
    options: GeneratorOptions,
    *,
    voicing_type: VoicingType,
    has_root_in_bass: bool,
    position: int,
) -> int:
    weights = context_weights(options.playing_context)

    score = fingering.playability_score(instrument)
    score += fingering.played_count * FINGERING_WEIGHTS.string_usage_bonus
    score -= fingering.interior_mute_count * FINGERING_WEIGHTS.interior_mute_penalty

    if has_root_in_bass and options.root_in_bass:
        score += weights.root_in_bass_bonus

    if voicing_type == VoicingType.FULL:
        score += weights.full_voicing_bonus
    elif voicing_type == VoicingType.CORE:
        score += weights.core_voicing_bonus
    else:
        score += weights.jazzy_voicing_bonus
        if not has_root_in_bass:
            score -= weights.jazzy_without_root_penalty

    if weights.avoid_low_strings_bonus:
        low = _low_string_indices(instrument)
        if not any(fingering.strings[i].is_played for i in low if i < fingering.string_count):
            score += weights.avoid_low_strings_bonus

    score -= _position_penalty(position, options, weights)
    return int(score)


def _deduplicate(scored: list[ScoredFingering]) -> list[ScoredFingering]:
    seen: set[tuple[StringState, ...]] = set()
    unique: list[ScoredFingering] = []
    for item in scored:
        key = item.fingering.strings
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique


def generate_fingerings(
    tones: ChordTones,
    instrument: Instrument,
    options: GeneratorOptions | None = None,
) -> list[ScoredFingering]:
    """
    Playable fingerings for a chord, best first.

    Every string may be muted or fretted at any fret up to options.max_fret
    that sounds a chord tone. Returns an empty list when nothing playable
    exists; never raises for a chord that has no fingering.
    """
    opts = options or GeneratorOptions()
    tone_pcs = {pitch_class(t) for t in tones.tones}
    if not tone_pcs:
        return []

    max_fret = min(int(opts.max_fret), int(instrument.fret_range[1]))
    string_options = _string_options(instrument.tuning, tone_pcs, max_fret)
    if all(len(states) == 1 for states in string_options):
        _LOG.debug("No string reaches a tone of %s on %s", tones.name, instrument.name)
        return []

    min_played = int(instrument.min_played_strings)
    raw = _search(string_options, int(instrument.max_stretch), min_played)

    scored: list[ScoredFingering] = []
    root_pc = pitch_class(tones.root)
    for states in raw:
        fingering = Fingering(states)
        if not fingering.is_playable(instrument):
            continue
        if fingering.played_count < min_played:
            continue

        voicing = _classify(set(fingering.unique_pitch_classes(instrument)), tones)
        if opts.voicing_type is not None and voicing != opts.voicing_type:
            continue

        bass = fingering.bass_note(instrument)
        has_root_in_bass = bass is not None and pitch_class(bass) == root_pc
        position = _position(fingering)
        score = score_fingering(
            fingering,
            instrument,
            opts,
            voicing_type=voicing,
            has_root_in_bass=has_root_in_bass,
            position=position,
        )
        scored.append(
            ScoredFingering(
                fingering=fingering,
                score=max(0, score),
                voicing_type=voicing,
                has_root_in_bass=has_root_in_bass,
                position=position,
            )
        )

    scored.sort(key=lambda s: s.score, reverse=True)
    scored = _deduplicate(scored)
    _LOG.debug(
        "%s on %s: %d combinations, %d scored, returning %d",
        tones.name,
        instrument.name,
        len(raw),
        len(scored),
        min(len(scored), opts.limit),
    )
    return scored[: opts.limit]


def generate_fingerings_for_chord(
    label: str,
    instrument: Instrument,
    options: GeneratorOptions | None = None,
) -> list[ScoredFingering]:
    tones = chord_tones(label)
    if tones is None:
        _LOG.info("Could not read chord label %r", label)
        return []
    return generate_fingerings(tones, instrument, options)
