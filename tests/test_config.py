import logging
import unittest

from pydantic import ValidationError

from chordcraft.core.config import Settings, configure_logging, setting_int
from chordcraft.schemas import GeneratorOptions, PlayingContext, ProgressionOptions


class SettingsTests(unittest.TestCase):
    def test_defaults(self) -> None:
        s = Settings(_env_file=None)

        self.assertEqual(s.DEFAULT_INSTRUMENT, "guitar")
        self.assertEqual(s.GENERATOR_LIMIT, 10)
        self.assertEqual(s.GENERATOR_MAX_FRET, 12)
        self.assertTrue(s.GENERATOR_ROOT_IN_BASS)
        self.assertEqual(s.PROGRESSION_MAX_FRET_DISTANCE, 3)
        self.assertEqual(s.BEAM_WIDTH_MIN, 10)

    def test_setting_int_falls_back(self) -> None:
        self.assertEqual(setting_int("NOT_A_SETTING", 7), 7)

    def test_configure_logging(self) -> None:
        logger = logging.getLogger("chordcraft")
        previous = logger.level
        try:
            configure_logging("debug")
            self.assertEqual(logger.level, logging.DEBUG)
        finally:
            logger.setLevel(previous)


class OptionsTests(unittest.TestCase):
    def test_generator_defaults(self) -> None:
        opts = GeneratorOptions()

        self.assertEqual(opts.limit, 10)
        self.assertEqual(opts.max_fret, 12)
        self.assertIsNone(opts.preferred_position)
        self.assertIsNone(opts.voicing_type)
        self.assertTrue(opts.root_in_bass)
        self.assertEqual(opts.playing_context, PlayingContext.SOLO)

    def test_progression_defaults(self) -> None:
        opts = ProgressionOptions()

        self.assertEqual(opts.limit, 3)
        self.assertEqual(opts.max_fret_distance, 3)
        self.assertEqual(opts.candidates_per_chord, 20)

    def test_validation(self) -> None:
        with self.assertRaises(ValidationError):
            GeneratorOptions(limit=0)
        with self.assertRaises(ValidationError):
            GeneratorOptions(max_fret=30)
        with self.assertRaises(ValidationError):
            ProgressionOptions(max_fret_distance=-1)

    def test_string_enums_accepted(self) -> None:
        opts = GeneratorOptions(playing_context="band", voicing_type="core")

        self.assertEqual(opts.playing_context, PlayingContext.BAND)


if __name__ == "__main__":
    unittest.main()
