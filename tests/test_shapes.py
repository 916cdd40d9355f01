import unittest

from chordcraft.services.fretted.fingering import Fingering
from chordcraft.services.fretted.instrument import Guitar, Ukulele, get_instrument
from chordcraft.services.fretted.shapes import (
    BANJO_SHAPES,
    GUITAR_SHAPES,
    MANDOLIN_SHAPES,
    UKULELE_SHAPES,
    catalog_for,
    find_matching_shape,
)


class ShapeTests(unittest.TestCase):
    def test_open_shapes(self) -> None:
        self.assertEqual(find_matching_shape(Fingering.parse("x32010")), ("C", 0))
        self.assertEqual(find_matching_shape(Fingering.parse("xx0232")), ("D", 0))
        self.assertEqual(find_matching_shape(Fingering.parse("320003")), ("G", 0))

    def test_barre_shapes_moved_up(self) -> None:
        self.assertEqual(find_matching_shape(Fingering.parse("x24432")), ("Am", 2))
        self.assertEqual(find_matching_shape(Fingering.parse("133211")), ("E", 1))
        self.assertEqual(find_matching_shape(Fingering.parse("x57775")), ("A", 5))

    def test_no_match(self) -> None:
        self.assertIsNone(find_matching_shape(Fingering.parse("x20402")))
        self.assertIsNone(find_matching_shape(Fingering.parse("0003")))

    def test_shape_at(self) -> None:
        e_shape = next(s for s in GUITAR_SHAPES if s.name == "E")

        self.assertEqual(str(e_shape.at(3)), "355433")
        self.assertEqual(e_shape.matches(e_shape.at(3)), 3)

    def test_catalog_selection(self) -> None:
        self.assertIs(catalog_for(Guitar()), GUITAR_SHAPES)
        self.assertIs(catalog_for(Ukulele()), UKULELE_SHAPES)
        self.assertIs(catalog_for(get_instrument("mandolin")), MANDOLIN_SHAPES)
        self.assertIs(catalog_for(get_instrument("banjo")), BANJO_SHAPES)
        self.assertEqual(catalog_for(get_instrument("bass")), ())
        self.assertIs(catalog_for(Guitar().with_capo(3)), GUITAR_SHAPES)

    def test_other_catalogs(self) -> None:
        self.assertEqual(find_matching_shape(Fingering.parse("0003"), UKULELE_SHAPES), ("C", 0))
        self.assertEqual(find_matching_shape(Fingering.parse("0023"), MANDOLIN_SHAPES), ("G", 0))
        self.assertEqual(find_matching_shape(Fingering.parse("x2012"), BANJO_SHAPES), ("C", 0))


if __name__ == "__main__":
    unittest.main()
