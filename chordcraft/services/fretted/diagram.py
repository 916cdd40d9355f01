from __future__ import annotations

from chordcraft.services.fretted.generator import ScoredFingering
from chordcraft.services.fretted.instrument import Instrument
from chordcraft.services.theory.notes import pc_to_name


def format_fingering_diagram(scored: ScoredFingering, instrument: Instrument) -> str:
    """
    Plain-text diagram, highest string on top:

        e|---0---
        B|---1---
        ...
        E|---x---

        Score: 155 | Position: Fret 1 | Voicing: Full
        Root in bass: Yes
        Notes: C, E, G
    """
    names = instrument.string_names
    lines: list[str] = []
    for idx in reversed(range(scored.fingering.string_count)):
        name = names[idx] if idx < len(names) else "?"
        fret = scored.fingering.strings[idx].fret
        lines.append(f"{name}|---{'x' if fret is None else fret}---")

    lines.append("")
    lines.append(
        f"Score: {scored.score} | Position: Fret {scored.position} "
        f"| Voicing: {scored.voicing_type.value.capitalize()}"
    )
    if scored.has_root_in_bass:
        lines.append("Root in bass: Yes")

    notes = [pc_to_name(pc) for pc in scored.fingering.unique_pitch_classes(instrument)]
    lines.append(f"Notes: {', '.join(notes)}")
    return "\n".join(lines)
