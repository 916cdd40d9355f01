from .diagram import format_fingering_diagram
from .fingering import Fingering, StringState
from .generator import ScoredFingering, generate_fingerings, generate_fingerings_for_chord
from .instrument import (
    CapoedInstrument,
    ConfigurableInstrument,
    Guitar,
    Instrument,
    Ukulele,
    get_instrument,
    instrument_names,
)
from .progression import ChordTransition, ProgressionSequence, generate_progression, score_transition
from .shapes import StandardShape, catalog_for, find_matching_shape

__all__ = [
    "format_fingering_diagram",
    "Fingering",
    "StringState",
    "ScoredFingering",
    "generate_fingerings",
    "generate_fingerings_for_chord",
    "CapoedInstrument",
    "ConfigurableInstrument",
    "Guitar",
    "Instrument",
    "Ukulele",
    "get_instrument",
    "instrument_names",
    "ChordTransition",
    "ProgressionSequence",
    "generate_progression",
    "score_transition",
    "StandardShape",
    "catalog_for",
    "find_matching_shape",
]
