import unittest

from chordcraft.core.errors import InvalidChordName
from chordcraft.services.chords.vocabulary import (
    chord_tones,
    format_chord_label,
    parse_chord,
    split_chord_label,
)
from chordcraft.services.theory.notes import note_to_pc, pc_to_name, unique_pitch_classes


class ChordVocabularyTests(unittest.TestCase):
    def test_split_labels(self) -> None:
        self.assertEqual(split_chord_label("C"), ("C", "maj", None))
        self.assertEqual(split_chord_label("Am"), ("A", "min", None))
        self.assertEqual(split_chord_label("C:min7"), ("C", "min7", None))
        self.assertEqual(split_chord_label("G7/B"), ("G", "7", "B"))
        self.assertEqual(split_chord_label("F#maj7"), ("F#", "maj7", None))
        self.assertEqual(split_chord_label("Bb"), ("Bb", "maj", None))
        self.assertEqual(split_chord_label("Dm7b5"), ("D", "min7b5", None))
        self.assertEqual(split_chord_label("CM7"), ("C", "maj7", None))

    def test_no_chord_and_garbage(self) -> None:
        for label in ("", "N", "N.C.", "Hmaj", "Cwhatever", "C/H"):
            self.assertEqual(split_chord_label(label), (None, None, None))
            self.assertIsNone(chord_tones(label))

    def test_triad_tones(self) -> None:
        tones = chord_tones("Am")

        self.assertEqual(tones.root, 9)
        self.assertEqual(tones.tones, (9, 0, 4))
        self.assertEqual(tones.core_tones, (9, 0, 4))
        self.assertEqual(tones.name, "Am")

    def test_seventh_core_drops_fifth(self) -> None:
        tones = chord_tones("Cmaj7")

        self.assertEqual(tones.tones, (0, 4, 7, 11))
        self.assertEqual(tones.core_tones, (0, 4, 11))

    def test_extended_chords_keep_optional_fifth_out_of_core(self) -> None:
        tones = chord_tones("G9")

        self.assertEqual(set(tones.tones), {7, 11, 5, 9, 2})
        self.assertNotIn(2, tones.core_tones)

    def test_slash_bass(self) -> None:
        self.assertEqual(chord_tones("G7/B").bass, 11)
        self.assertIsNone(chord_tones("G7").bass)

    def test_parse_chord_strict(self) -> None:
        self.assertEqual(parse_chord("E").tones, (4, 8, 11))
        with self.assertRaises(InvalidChordName) as ctx:
            parse_chord("Q7")
        self.assertEqual(ctx.exception.label, "Q7")

    def test_canonical_label(self) -> None:
        self.assertEqual(chord_tones("C:min7").name, "Cm7")
        self.assertEqual(chord_tones("a").name, "A")
        self.assertEqual(chord_tones("G7/B").name, "G7/B")

    def test_format_label(self) -> None:
        self.assertEqual(format_chord_label("A", "min"), "Am")
        self.assertEqual(format_chord_label("C", "maj"), "C")
        self.assertEqual(format_chord_label("G", "7", "B"), "G7/B")


class NoteTests(unittest.TestCase):
    def test_note_names(self) -> None:
        self.assertEqual(note_to_pc("bb"), 10)
        self.assertEqual(note_to_pc("F♯"), 6)
        self.assertIsNone(note_to_pc("H"))
        self.assertEqual(pc_to_name(10, flats=True), "Bb")
        self.assertEqual(pc_to_name(13), "C#")
        self.assertEqual(unique_pitch_classes([48, 64, 55, 60]), [0, 4, 7])


if __name__ == "__main__":
    unittest.main()
