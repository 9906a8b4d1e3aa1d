"""Unit tests for scalar value normalization."""
import unittest

from block_converter.utils.units import length_to_px, rgb_to_hex
from block_converter.utils.values import (
    camel_to_kebab,
    clean_class,
    format_background_image,
    normalize_alignment,
    normalize_color,
    normalize_style_value,
    normalize_zero_dimension,
    sanitize_css_dimension,
    sanitize_font_family,
    sanitize_font_weight,
    split_classes,
    zero_dimension_or_none,
)


class ZeroDimensionTest(unittest.TestCase):
    """Zero-like lengths collapse to a canonical ``"0"``."""

    def test_zero_forms_collapse(self) -> None:
        for value in ("0", "0px", "0.00em", "0%", " 0REM ", 0):
            with self.subTest(value=value):
                self.assertEqual(normalize_zero_dimension(value), "0")

    def test_non_zero_values_do_not_collapse(self) -> None:
        self.assertEqual(normalize_zero_dimension("1px"), "1px")
        self.assertEqual(normalize_zero_dimension("auto"), "auto")
        self.assertEqual(normalize_zero_dimension(""), "")
        self.assertEqual(normalize_zero_dimension(None), "")
        self.assertEqual(normalize_zero_dimension({"size": 0}), "")

    def test_zero_or_none_signals_externalize(self) -> None:
        self.assertEqual(zero_dimension_or_none("0px"), "0")
        self.assertIsNone(zero_dimension_or_none("2px"))
        self.assertIsNone(zero_dimension_or_none(""))


class ColorTest(unittest.TestCase):
    def test_hex_and_rgb_forms(self) -> None:
        self.assertEqual(normalize_color("#ABC"), "#aabbcc")
        self.assertEqual(normalize_color("#336699"), "#336699")
        self.assertEqual(normalize_color("rgb(51, 102, 153)"), "#336699")
        self.assertEqual(normalize_color("rgba(51,102,153,0.5)"), "#336699")

    def test_transparent_and_references_are_dropped(self) -> None:
        self.assertEqual(normalize_color("rgba(0,0,0,0)"), "")
        self.assertEqual(normalize_color("transparent"), "")
        self.assertEqual(normalize_color("var(--e-global-color-primary)"), "")
        self.assertEqual(normalize_color("var:preset|color|primary"), "")
        self.assertEqual(normalize_color("rgb(300, 0, 0)"), "")
        self.assertEqual(normalize_color(["#fff"]), "")

    def test_rgb_to_hex_clamps(self) -> None:
        self.assertEqual(rgb_to_hex(-5, 128, 999), "#0080ff")


class DimensionTest(unittest.TestCase):
    def test_sanitize_css_dimension(self) -> None:
        self.assertEqual(sanitize_css_dimension("12PX"), "12px")
        self.assertEqual(sanitize_css_dimension("1.5rem"), "1.5rem")
        self.assertEqual(sanitize_css_dimension("50%"), "50%")
        self.assertEqual(sanitize_css_dimension(10), "10")
        self.assertEqual(sanitize_css_dimension("calc(1px + 2px)"), "")
        self.assertEqual(sanitize_css_dimension("12pt"), "")

    def test_length_to_px(self) -> None:
        self.assertEqual(length_to_px("18px"), 18.0)
        self.assertEqual(length_to_px("1.5rem"), 24.0)
        self.assertEqual(length_to_px("2em"), 32.0)
        self.assertEqual(length_to_px("14"), 14.0)
        self.assertIsNone(length_to_px("10vh"))
        self.assertIsNone(length_to_px(True))


class KeywordTest(unittest.TestCase):
    def test_font_weight(self) -> None:
        self.assertEqual(sanitize_font_weight("bold"), "700")
        self.assertEqual(sanitize_font_weight(600), "600")
        self.assertEqual(sanitize_font_weight("650"), "")

    def test_font_family(self) -> None:
        self.assertEqual(sanitize_font_family("Open Sans; color:red"), "Open Sans colorred")
        self.assertEqual(sanitize_font_family("inherit"), "")
        self.assertEqual(sanitize_font_family("var(--font)"), "")

    def test_classes(self) -> None:
        self.assertEqual(clean_class("foo<bar>"), "foobar")
        self.assertEqual(split_classes(" a  b a c%20d "), ["a", "b", "cd"])
        self.assertEqual(split_classes(None), [])

    def test_misc_helpers(self) -> None:
        self.assertEqual(camel_to_kebab("fontSize"), "font-size")
        self.assertEqual(camel_to_kebab("min_height"), "min-height")
        self.assertEqual(normalize_alignment("flex-start"), "start")
        self.assertEqual(normalize_alignment({"value": "space-between"}), "justify")
        self.assertEqual(normalize_alignment("diagonal"), "")
        self.assertEqual(format_background_image({"url": "a.png"}), "url(a.png)")
        self.assertEqual(format_background_image("url(b.png)"), "url(b.png)")
        self.assertEqual(
            normalize_style_value("var:preset|color|primary"), "var(--wp--preset--color--primary)"
        )
        self.assertEqual(normalize_style_value("12px"), "12px")


if __name__ == "__main__":
    unittest.main()
