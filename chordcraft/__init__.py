from chordcraft.core.errors import (
    ChordCraftError,
    InvalidCapoPosition,
    InvalidChordName,
    InvalidFingering,
    InvalidInstrument,
)
from chordcraft.schemas import GeneratorOptions, PlayingContext, ProgressionOptions, VoicingType
from chordcraft.services.chords.vocabulary import ChordTones, chord_tones, parse_chord
from chordcraft.services.fretted import (
    CapoedInstrument,
    ChordTransition,
    ConfigurableInstrument,
    Fingering,
    Guitar,
    Instrument,
    ProgressionSequence,
    ScoredFingering,
    StringState,
    Ukulele,
    find_matching_shape,
    format_fingering_diagram,
    generate_fingerings,
    generate_fingerings_for_chord,
    generate_progression,
    get_instrument,
)

__all__ = [
    "ChordCraftError",
    "InvalidCapoPosition",
    "InvalidChordName",
    "InvalidFingering",
    "InvalidInstrument",
    "GeneratorOptions",
    "PlayingContext",
    "ProgressionOptions",
    "VoicingType",
    "ChordTones",
    "chord_tones",
    "parse_chord",
    "CapoedInstrument",
    "ChordTransition",
    "ConfigurableInstrument",
    "Fingering",
    "Guitar",
    "Instrument",
    "ProgressionSequence",
    "ScoredFingering",
    "StringState",
    "Ukulele",
    "find_matching_shape",
    "format_fingering_diagram",
    "generate_fingerings",
    "generate_fingerings_for_chord",
    "generate_progression",
    "get_instrument",
]
