"""Tests for the ordered inline style shorthand."""
import unittest

from block_converter.renderer.inline_style import build_inline_style, inline_declarations


class InlineStyleOrderTest(unittest.TestCase):
    def test_fixed_property_order(self) -> None:
        # Keys are given in reverse of the render order.
        style = {
            "border": {"color": "#000", "style": "solid", "width": "1px"},
            "boxShadow": "0 0 2px #000",
            "dimensions": {"minHeight": "50vh"},
            "background": {"backgroundImage": {"url": "bg.png"}, "backgroundSize": "cover"},
            "color": {"text": "#111111", "background": "#eeeeee"},
            "typography": {"lineHeight": "1.5", "fontSize": "18px"},
            "spacing": {"padding": "2rem", "margin": {"top": "1px"}, "blockGap": "8px"},
        }
        self.assertEqual(
            [prop for prop, _ in inline_declarations(style)],
            [
                "gap",
                "margin-top",
                "padding",
                "font-size",
                "line-height",
                "background-color",
                "color",
                "background-image",
                "background-size",
                "min-height",
                "box-shadow",
                "border-color",
                "border-style",
                "border-width",
            ],
        )

    def test_shorthand_format(self) -> None:
        style = {"spacing": {"padding": {"top": "0", "left": "4px"}}, "color": {"text": "var:preset|color|primary"}}
        self.assertEqual(
            build_inline_style(style),
            "padding-top:0;padding-left:4px;color:var(--wp--preset--color--primary)",
        )

    def test_border_radius_corners_and_sides(self) -> None:
        style = {
            "border": {
                "radius": {"topLeft": "2px", "bottomRight": "3px"},
                "top": {"width": "1px", "color": "#ccc"},
            }
        }
        self.assertEqual(
            build_inline_style(style),
            "border-top-left-radius:2px;border-bottom-right-radius:3px;border-top-width:1px;border-top-color:#ccc",
        )

    def test_unknown_typography_keys_follow_known_ones(self) -> None:
        style = {"typography": {"fontVariant": "small-caps", "fontWeight": "700"}}
        self.assertEqual(build_inline_style(style), "font-weight:700;font-variant:small-caps")

    def test_empty_and_malformed_styles(self) -> None:
        self.assertEqual(build_inline_style(None), "")
        self.assertEqual(build_inline_style({}), "")
        self.assertEqual(build_inline_style({"spacing": {"margin": {}}, "typography": "bold", "border": []}), "")
        self.assertEqual(build_inline_style({"color": {"text": ["#fff"]}, "boxShadow": True}), "")


if __name__ == "__main__":
    unittest.main()
