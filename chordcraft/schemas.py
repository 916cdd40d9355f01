from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from chordcraft.core.config import setting_bool, setting_int


class VoicingType(str, Enum):
    # every chord tone present
    FULL = "full"
    # every essential tone present (e.g. a 7th chord without its fifth)
    CORE = "core"
    # partial voicing that dropped essential tones
    JAZZY = "jazzy"


class PlayingContext(str, Enum):
    SOLO = "solo"
    BAND = "band"


class GeneratorOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    limit: int = Field(default_factory=lambda: setting_int("GENERATOR_LIMIT", 10), ge=1)
    preferred_position: Optional[int] = Field(default=None, ge=0)
    voicing_type: Optional[VoicingType] = None
    root_in_bass: bool = Field(default_factory=lambda: setting_bool("GENERATOR_ROOT_IN_BASS", True))
    max_fret: int = Field(default_factory=lambda: setting_int("GENERATOR_MAX_FRET", 12), ge=0, le=24)
    playing_context: PlayingContext = PlayingContext.SOLO


class ProgressionOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    limit: int = Field(default_factory=lambda: setting_int("PROGRESSION_LIMIT", 3), ge=1)
    max_fret_distance: int = Field(
        default_factory=lambda: setting_int("PROGRESSION_MAX_FRET_DISTANCE", 3), ge=0
    )
    candidates_per_chord: int = Field(
        default_factory=lambda: setting_int("PROGRESSION_CANDIDATES_PER_CHORD", 20), ge=1
    )
    generator_options: GeneratorOptions = Field(default_factory=GeneratorOptions)
