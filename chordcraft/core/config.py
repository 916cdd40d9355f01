import logging

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="CHORDCRAFT_", extra="ignore")

    APP_NAME: str = "chordcraft"

    # Instrument used when a caller does not name one
    # (guitar|ukulele|baritone_ukulele|bass|bass_5|mandolin|banjo|guitar_7|drop_d|open_g|dadgad)
    DEFAULT_INSTRUMENT: str = "guitar"

    # Fingering generation
    GENERATOR_LIMIT: int = 10
    GENERATOR_MAX_FRET: int = 12
    GENERATOR_ROOT_IN_BASS: bool = True

    # Progression beam search
    # beam width = max(BEAM_WIDTH_MIN, BEAM_WIDTH_MULTIPLIER * limit)
    PROGRESSION_LIMIT: int = 3
    PROGRESSION_MAX_FRET_DISTANCE: int = 3
    PROGRESSION_CANDIDATES_PER_CHORD: int = 20
    BEAM_WIDTH_MULTIPLIER: int = 3
    BEAM_WIDTH_MIN: int = 10

    LOG_LEVEL: str = "WARNING"


settings = Settings()


def setting_int(name: str, default: int) -> int:
    value = getattr(settings, name, default)
    if value is None:
        return int(default)
    return int(value)


def setting_bool(name: str, default: bool) -> bool:
    value = getattr(settings, name, default)
    if value is None:
        return bool(default)
    return bool(value)


def configure_logging(level: str | None = None) -> None:
    """
    Apply LOG_LEVEL to the package logger. Library code never calls this.
    """
    name = str(level or settings.LOG_LEVEL).upper()
    logging.getLogger("chordcraft").setLevel(getattr(logging, name, logging.WARNING))
