import unittest

from chordcraft.schemas import GeneratorOptions, PlayingContext, VoicingType
from chordcraft.services.chords.vocabulary import ChordTones, chord_tones
from chordcraft.services.fretted.fingering import Fingering
from chordcraft.services.fretted.generator import (
    _low_string_indices,
    generate_fingerings,
    generate_fingerings_for_chord,
    score_fingering,
)
from chordcraft.services.fretted.instrument import Guitar, Ukulele


def _shapes(results) -> list[str]:
    return [str(r.fingering) for r in results]


class GeneratorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.guitar = Guitar()

    def test_c_major_open_shape_ranks_high(self) -> None:
        results = generate_fingerings_for_chord("C", self.guitar, GeneratorOptions(limit=10))

        # three-string x320xx outscores the full open shape under the fixed weights
        self.assertEqual(str(results[0].fingering), "x320xx")
        self.assertEqual(results[0].score, 174)
        self.assertIn("x32010", _shapes(results))
        top = next(r for r in results if str(r.fingering) == "x32010")
        self.assertEqual(top.score, 155)
        self.assertEqual(top.voicing_type, VoicingType.FULL)
        self.assertTrue(top.has_root_in_bass)
        self.assertEqual(top.position, 2)

    def test_a_minor_open_shape(self) -> None:
        results = generate_fingerings_for_chord("Am", self.guitar, GeneratorOptions(limit=20))

        self.assertIn("x02210", _shapes(results))

    def test_results_sorted_and_limited(self) -> None:
        for label in ("C", "G7", "F#m", "Bbmaj7"):
            results = generate_fingerings_for_chord(label, self.guitar, GeneratorOptions(limit=7))
            scores = [r.score for r in results]

            self.assertLessEqual(len(results), 7)
            self.assertEqual(scores, sorted(scores, reverse=True))
            self.assertEqual(len(set(_shapes(results))), len(results))

    def test_every_result_is_playable_and_in_chord(self) -> None:
        tones = chord_tones("Dm7")
        results = generate_fingerings(tones, self.guitar, GeneratorOptions(limit=50))

        self.assertTrue(results)
        for r in results:
            f = r.fingering
            self.assertTrue(f.is_playable(self.guitar))
            self.assertGreaterEqual(f.played_count, self.guitar.min_played_strings)
            self.assertTrue(set(f.unique_pitch_classes(self.guitar)) <= set(tones.tones))
            self.assertGreaterEqual(r.score, 0)

    def test_deterministic(self) -> None:
        opts = GeneratorOptions(limit=15)

        first = generate_fingerings_for_chord("Em7", self.guitar, opts)
        second = generate_fingerings_for_chord("Em7", self.guitar, opts)

        self.assertEqual(first, second)

    def test_max_fret_respected(self) -> None:
        results = generate_fingerings_for_chord("E", self.guitar, GeneratorOptions(max_fret=4, limit=30))

        for r in results:
            self.assertLessEqual(r.fingering.max_fret or 0, 4)

    def test_voicing_filter(self) -> None:
        for voicing in (VoicingType.FULL, VoicingType.CORE):
            opts = GeneratorOptions(voicing_type=voicing, limit=10)
            results = generate_fingerings_for_chord("Cmaj7", self.guitar, opts)

            self.assertTrue(results)
            self.assertTrue(all(r.voicing_type == voicing for r in results))

        jazzy = generate_fingerings_for_chord(
            "C", self.guitar, GeneratorOptions(voicing_type=VoicingType.JAZZY, limit=10)
        )
        tones = chord_tones("C")
        for r in jazzy:
            pcs = set(r.fingering.unique_pitch_classes(self.guitar))
            self.assertFalse(set(tones.core_tones) <= pcs)

    def test_root_in_bass_option(self) -> None:
        f = Fingering.parse("x32010")
        kwargs = dict(voicing_type=VoicingType.FULL, has_root_in_bass=True, position=2)

        with_root = score_fingering(f, self.guitar, GeneratorOptions(), **kwargs)
        without = score_fingering(f, self.guitar, GeneratorOptions(root_in_bass=False), **kwargs)

        self.assertEqual(with_root, 155)
        self.assertEqual(without, 125)

    def test_band_context_scoring(self) -> None:
        f = Fingering.parse("x32010")
        opts = GeneratorOptions(playing_context=PlayingContext.BAND)

        score = score_fingering(
            f, self.guitar, opts, voicing_type=VoicingType.FULL, has_root_in_bass=True, position=2
        )

        self.assertEqual(score, 112)

    def test_band_low_strings_by_index(self) -> None:
        uke = Ukulele()
        opts = GeneratorOptions(playing_context=PlayingContext.BAND)
        kwargs = dict(voicing_type=VoicingType.JAZZY, has_root_in_bass=False, position=3)

        self.assertEqual(_low_string_indices(uke), (0, 1))
        self.assertEqual(_low_string_indices(self.guitar), (0, 1))
        # the re-entrant G string is still one of the two low strings
        self.assertEqual(score_fingering(Fingering.parse("0xx3"), uke, opts, **kwargs), 76)
        self.assertEqual(score_fingering(Fingering.parse("xx03"), uke, opts, **kwargs), 146)

    def test_preferred_position(self) -> None:
        f = Fingering.parse("x32010")
        kwargs = dict(voicing_type=VoicingType.FULL, has_root_in_bass=True, position=2)

        near = score_fingering(f, self.guitar, GeneratorOptions(preferred_position=2), **kwargs)
        far = score_fingering(f, self.guitar, GeneratorOptions(preferred_position=7), **kwargs)

        self.assertEqual(near, 155)
        self.assertEqual(far, 140)

    def test_no_fingering_is_empty(self) -> None:
        tones = ChordTones(root=1, tones=(1,), core_tones=(1,))

        self.assertEqual(generate_fingerings(tones, self.guitar, GeneratorOptions(max_fret=0)), [])
        self.assertEqual(generate_fingerings(ChordTones(root=0, tones=(), core_tones=()), self.guitar), [])
        self.assertEqual(generate_fingerings_for_chord("not a chord", self.guitar), [])

    def test_ukulele_c_major(self) -> None:
        results = generate_fingerings_for_chord("C", Ukulele(), GeneratorOptions(limit=3))

        self.assertIn("0003", _shapes(results))

    def test_capo_shifts_fret_numbers(self) -> None:
        capoed = Guitar().with_capo(2)
        results = generate_fingerings_for_chord("D", capoed, GeneratorOptions(limit=10))

        # D with capo 2 is played as a C shape
        self.assertIn("x32010", _shapes(results))


if __name__ == "__main__":
    unittest.main()
