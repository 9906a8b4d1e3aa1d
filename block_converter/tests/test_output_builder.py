"""Tests for the per-element conversion pipeline."""
import unittest

from block_converter.model.document_model import ElementInput
from block_converter.model.theme_model import ColorPreset, ThemePresets
from block_converter.parser.block_parser import parse_blocks
from block_converter.renderer.output_builder import BlockOutputBuilder, merge_trees
from block_converter.renderer.style_collector import ExternalStyleCollector
from block_converter.utils.config import ConverterConfig


class PrepareAttributesTest(unittest.TestCase):
    def setUp(self) -> None:
        self.collector = ExternalStyleCollector()
        self.builder = BlockOutputBuilder(self.collector)

    def test_unsupported_category_becomes_class(self) -> None:
        attrs = {
            "level": 2,
            "style": {"typography": {"fontSize": "18px", "fontStyle": "normal"}, "border": {"width": "1px"}},
        }
        native = self.builder.prepare_attributes("heading", attrs)

        class_name = self.collector.class_name("heading", {"border-width": "1px"})
        self.assertEqual(
            native,
            {"level": 2, "style": {"typography": {"fontSize": "18px"}}, "className": class_name},
        )
        self.assertEqual(self.collector.render_stylesheet(), f".{class_name} {{\n\tborder-width: 1px;\n}}\n")
        dropped = self.collector.get_inventory()["dropped"]
        self.assertEqual(dropped[0]["payload"], {"style": {"border": {"width": "1px"}}})

    def test_generated_class_merges_with_custom_classes(self) -> None:
        native = self.builder.prepare_attributes("marquee", {"className": "zeta", "style": {"color": {"text": "#000"}}})
        class_name = self.collector.class_name("marquee", {"color": "#000"})
        self.assertEqual(native, {"className": " ".join(sorted(["zeta", class_name]))})

    def test_fonts_are_registered(self) -> None:
        self.builder.prepare_attributes(
            "paragraph", {"style": {"typography": {"fontFamily": "Lora, serif", "fontWeight": "600"}}}
        )
        self.assertEqual(self.collector.get_font_usage(), {"Lora": {"weights": ["600"], "italics": ["0"]}})

    def test_theme_presets_are_applied(self) -> None:
        config = ConverterConfig(theme=ThemePresets(colors=(ColorPreset("primary", "#336699"),)))
        builder = BlockOutputBuilder(self.collector, config)
        native = builder.prepare_attributes("paragraph", {"style": {"color": {"text": "#336699"}}})
        self.assertEqual(native, {"textColor": "primary"})


class RenderTest(unittest.TestCase):
    def setUp(self) -> None:
        self.collector = ExternalStyleCollector()
        self.builder = BlockOutputBuilder(self.collector)

    def test_render_heading(self) -> None:
        markup = self.builder.render("heading", {"level": 2, "anchor": ""}, "<h2>Title</h2>")
        self.assertEqual(markup, '<!-- wp:heading {"level":2} --><h2>Title</h2><!-- /wp:heading -->')
        self.assertEqual(self.collector.get_inventory()["conversions"], [])

    def test_unmapped_style_paths_stay_out_of_stylesheet(self) -> None:
        attrs = {"style": {"elements": {"link": {"color": {"text": "#ff0000"}}}, "layout": {"selfStretch": "fill"}}}
        markup = self.builder.render("paragraph", attrs, "<p>x</p>")

        self.assertEqual(markup, "<!-- wp:paragraph --><p>x</p><!-- /wp:paragraph -->")
        self.assertEqual(self.collector.render_stylesheet(), "")
        dropped = {entry["type"]: entry["payload"] for entry in self.collector.get_inventory()["dropped"]}
        self.assertEqual(
            dropped["unmapped-style"],
            {"elements-link-color-text": "#ff0000", "layout-self-stretch": "fill"},
        )
        self.assertEqual(dropped["attrs"], attrs)

    def test_unsafe_values_stay_out_of_stylesheet(self) -> None:
        markup = self.builder.render("spacer", {"style": {"typography": {"fontSize": "1px} body{display:none"}}}, "")
        self.assertEqual(markup, "<!-- wp:spacer /-->")
        self.assertEqual(self.collector.render_stylesheet(), "")

    def test_unstable_markup_is_recorded(self) -> None:
        markup = self.builder.render("paragraph", {}, "<p><!-- wp:spacer --></p>")
        conversions = self.collector.get_inventory()["conversions"]
        self.assertEqual(conversions[0]["decision"], "unstable-serialization")
        self.assertEqual(conversions[0]["context"], {"markup": markup})

    def test_round_trip_check_can_be_disabled(self) -> None:
        builder = BlockOutputBuilder(self.collector, ConverterConfig(verify_round_trip=False))
        builder.render("paragraph", {}, "<p><!-- wp:spacer --></p>")
        self.assertEqual(self.collector.get_inventory()["conversions"], [])

    def test_inner_html_is_sanitized(self) -> None:
        cleaned = self.builder.sanitize_inner_html("html", "<p>a</p><SCRIPT src=x>alert(1)</script><style>p{}</style>")
        self.assertEqual(cleaned, "<p>a</p>")
        self.assertEqual(self.collector.get_inventory()["dropped"][0]["type"], "inner-html")

        self.assertEqual(self.builder.sanitize_inner_html("html", "<p>b</p>"), "<p>b</p>")
        self.assertEqual(self.builder.sanitize_inner_html("html", None), "")
        self.assertEqual(len(self.collector.get_inventory()["dropped"]), 1)


class RenderElementTest(unittest.TestCase):
    def setUp(self) -> None:
        self.collector = ExternalStyleCollector()
        self.builder = BlockOutputBuilder(self.collector)

    def test_settings_are_read_and_attrs_win(self) -> None:
        element = ElementInput(
            unit="heading",
            attrs={"level": 3, "style": {"typography": {"fontSize": "30px"}}},
            settings={"typography_font_size": {"size": 20, "unit": "px"}, "title_color": "#000"},
            content="<h3>t</h3>",
        )
        block = parse_blocks(self.builder.render_element(element))[0]
        self.assertEqual(
            block.attrs,
            {"level": 3, "style": {"typography": {"fontSize": "30px"}, "color": {"text": "#000000"}}},
        )

    def test_responsive_settings_become_media_rules(self) -> None:
        element = ElementInput(
            unit="paragraph",
            settings={"typography_font_size_mobile": {"size": 14, "unit": "px"}},
            content="<p>x</p>",
        )
        block = parse_blocks(self.builder.render_element(element))[0]

        class_name = block.attrs["className"]
        self.assertTrue(class_name.startswith("bc-ext-"))
        self.assertEqual(
            self.collector.render_stylesheet(),
            f"@media (max-width: 767px) {{\n\t.{class_name} {{\n\t\tfont-size: 14px;\n\t}}\n}}\n",
        )

    def test_element_path_forces_wrapper(self) -> None:
        element = ElementInput(unit="paragraph", content="<p>x</p>", path="heuristic")
        self.assertIn('<div class="wp-block-paragraph"><p>x</p></div>', self.builder.render_element(element))


class MergeTreesTest(unittest.TestCase):
    def test_override_wins_on_leaves(self) -> None:
        base = {"style": {"color": {"text": "#111", "background": "#222"}}, "align": "left"}
        override = {"style": {"color": {"text": "#333"}}, "align": "right"}
        self.assertEqual(
            merge_trees(base, override),
            {"style": {"color": {"text": "#333", "background": "#222"}}, "align": "right"},
        )
        self.assertEqual(base["style"]["color"]["text"], "#111")


if __name__ == "__main__":
    unittest.main()
