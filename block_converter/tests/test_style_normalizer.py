"""Tests for attribute tree normalization."""
import unittest

from block_converter.parser.style_normalizer import (
    normalize_attributes,
    normalize_style_tree,
    prune_empty,
)


class PruneEmptyTest(unittest.TestCase):
    def test_nested_empties_are_removed(self) -> None:
        tree = {"a": None, "b": "", "c": {"d": {}, "e": []}, "f": "0", "g": 0, "h": False, "i": ["", "x"]}
        self.assertEqual(prune_empty(tree), {"f": "0", "g": 0, "h": False, "i": ["x"]})


class StyleTreeTest(unittest.TestCase):
    """Implicit defaults are elided and zero lengths kept as ``"0"``."""

    def test_typography_defaults_are_elided(self) -> None:
        style = {"typography": {"fontStyle": "Normal", "textDecoration": "NONE", "fontSize": "18px"}}
        self.assertEqual(normalize_style_tree("paragraph", style), {"typography": {"fontSize": "18px"}})

    def test_non_default_keywords_survive(self) -> None:
        style = {"typography": {"fontStyle": "italic", "textDecoration": "underline"}}
        self.assertEqual(normalize_style_tree("paragraph", style), style)

    def test_zero_spacing_is_kept_as_canonical_zero(self) -> None:
        style = {
            "spacing": {
                "padding": {"top": "0px", "right": "10px", "bottom": "0.00em", "left": ""},
                "margin": {"top": "0%"},
                "blockGap": "0rem",
            },
            "typography": {"letterSpacing": "0px", "wordSpacing": "2px"},
            "dimensions": {"minHeight": "0vh"},
        }
        self.assertEqual(
            normalize_style_tree("group", style),
            {
                "spacing": {
                    "padding": {"top": "0", "right": "10px", "bottom": "0"},
                    "margin": {"top": "0"},
                    "blockGap": "0",
                },
                "typography": {"letterSpacing": "0", "wordSpacing": "2px"},
                "dimensions": {"minHeight": "0vh"},
            },
        )

    def test_input_is_not_mutated(self) -> None:
        style = {"typography": {"fontStyle": "normal"}}
        normalize_style_tree("heading", style)
        self.assertEqual(style, {"typography": {"fontStyle": "normal"}})

    def test_malformed_style_yields_empty_tree(self) -> None:
        self.assertEqual(normalize_style_tree("heading", ["not", "a", "tree"]), {})
        self.assertEqual(normalize_style_tree("heading", None), {})


class NormalizeAttributesTest(unittest.TestCase):
    def test_blank_aria_label_and_empty_style_are_removed(self) -> None:
        attrs = {"ariaLabel": "   ", "style": {"typography": {"fontStyle": "normal"}}, "level": 2, "anchor": ""}
        self.assertEqual(normalize_attributes("heading", attrs), {"level": 2})

    def test_meaningful_aria_label_is_kept(self) -> None:
        self.assertEqual(normalize_attributes("button", {"ariaLabel": "Buy"}), {"ariaLabel": "Buy"})

    def test_non_mapping_attributes(self) -> None:
        self.assertEqual(normalize_attributes("button", "oops"), {})


if __name__ == "__main__":
    unittest.main()
