"""Tests for the external stylesheet collector."""
import unittest

from block_converter.renderer.style_collector import INVENTORY_TAG, ExternalStyleCollector
from block_converter.utils.config import ConverterConfig


class ClassGenerationTest(unittest.TestCase):
    def setUp(self) -> None:
        self.collector = ExternalStyleCollector()

    def test_identical_declarations_share_one_class(self) -> None:
        first = self.collector.externalize_declarations("heading", {"color": "red", "margin": "0"})
        second = self.collector.externalize_declarations("heading", {"margin": "0", "color": "red"})

        self.assertEqual(first, second)
        self.assertTrue(first.startswith("bc-ext-"))
        self.assertEqual(len(first), len("bc-ext-") + 10)
        self.assertEqual(self.collector.render_stylesheet().count(f".{first} "), 1)

    def test_different_unit_or_declarations_get_distinct_classes(self) -> None:
        base = self.collector.class_name("heading", {"color": "red"})
        self.assertNotEqual(base, self.collector.class_name("paragraph", {"color": "red"}))
        self.assertNotEqual(base, self.collector.class_name("heading", {"color": "blue"}))

    def test_blank_declarations_produce_no_class(self) -> None:
        self.assertEqual(self.collector.externalize_declarations("heading", {"color": "  ", "": "x"}), "")
        self.assertEqual(self.collector.render_stylesheet(), "")

    def test_custom_prefix_and_length(self) -> None:
        collector = ExternalStyleCollector(ConverterConfig(class_prefix="x-", class_hash_length=6))
        name = collector.class_name("heading", {"color": "red"})
        self.assertTrue(name.startswith("x-"))
        self.assertEqual(len(name), 8)


class RenderTest(unittest.TestCase):
    def setUp(self) -> None:
        self.collector = ExternalStyleCollector()

    def test_rule_format(self) -> None:
        self.collector.register_rule(".a", {"color": "red", "padding": " 1px "})
        self.assertEqual(self.collector.render_stylesheet(), ".a {\n\tcolor: red;\n\tpadding: 1px;\n}\n")

    def test_same_selector_merges_last_write_wins(self) -> None:
        self.collector.register_rule(".a", {"color": "red", "margin": "0"})
        self.collector.register_rule(".a", {"color": "blue"})
        self.assertEqual(self.collector.render_stylesheet(), ".a {\n\tcolor: blue;\n\tmargin: 0;\n}\n")

    def test_base_rule_renders_before_override(self) -> None:
        self.collector.register_rule(".x", {"color": "blue"})
        self.collector.register_rule(".x", {"color": "red"}, "kit-defaults")

        css = self.collector.render_stylesheet()
        self.assertEqual(css, ".x {\n\tcolor: red;\n}\n.x {\n\tcolor: blue;\n}\n")
        self.assertLess(css.index("red"), css.index("blue"))

    def test_media_rules_follow_static_rules(self) -> None:
        self.collector.register_media_rule("(max-width: 767px)", ".m", {"color": "green"})
        self.collector.register_media_rule("(max-width: 767px)", ".n", {"color": "teal"})
        self.collector.register_media_rule("(max-width: 1024px)", ".t", {"color": "navy"}, "theme")
        self.collector.register_rule(".s", {"color": "black"})

        self.assertEqual(
            self.collector.render_stylesheet(),
            ".s {\n\tcolor: black;\n}\n"
            "@media (max-width: 1024px) {\n\t.t {\n\t\tcolor: navy;\n\t}\n}\n"
            "@media (max-width: 767px) {\n\t.m {\n\t\tcolor: green;\n\t}\n\t.n {\n\t\tcolor: teal;\n\t}\n}\n",
        )

    def test_blank_selectors_queries_and_values_are_skipped(self) -> None:
        self.collector.register_rule("  ", {"color": "red"})
        self.collector.register_rule(".a", {})
        self.collector.register_rule(".b", ["color", "red"])  # type: ignore[arg-type]
        self.collector.register_media_rule("", ".c", {"color": "red"})
        self.collector.register_media_rule("(max-width: 1px)", ".d", {"color": ""})
        self.assertEqual(self.collector.render_stylesheet(), "")

    def test_unsafe_declarations_are_rejected(self) -> None:
        self.collector.register_rule(
            ".a",
            {
                "color": "red",
                "font-size": "1px} body{display:none",
                "margin": "0;position:fixed",
                "content": "</style>",
                "co lor": "blue",
                "x}y": "1",
            },
        )
        self.assertEqual(self.collector.render_stylesheet(), ".a {\n\tcolor: red;\n}\n")

    def test_unsafe_media_rules_are_not_written(self) -> None:
        self.assertFalse(self.collector.register_media_rule("(max-width: 1px)", ".m", {"color": "a{b"}))
        self.assertFalse(self.collector.register_media_rule("(x) { body", ".m", {"color": "red"}))
        self.assertTrue(self.collector.register_media_rule("(max-width: 1px)", ".m", {"color": "red"}))
        self.assertEqual(
            self.collector.render_stylesheet(),
            "@media (max-width: 1px) {\n\t.m {\n\t\tcolor: red;\n\t}\n}\n",
        )

    def test_unsafe_values_produce_no_class(self) -> None:
        self.assertEqual(self.collector.externalize_declarations("heading", {"color": "red;}"}), "")
        result = self.collector.externalize_attrs("group", {"style": {"boxShadow": "0 0 1px red}*{color:red"}})
        self.assertEqual(result, {})
        self.assertEqual(self.collector.render_stylesheet(), "")

    def test_reset_forgets_everything(self) -> None:
        self.collector.register_rule(".a", {"color": "red"})
        self.collector.register_font_usage("Roboto", "400")
        self.collector.record_dropped("heading", "attrs", {"dropCap": True})
        self.collector.reset()

        self.assertEqual(self.collector.render_stylesheet(), "")
        self.assertEqual(self.collector.get_font_usage(), {})
        self.assertEqual(self.collector.get_inventory(), {"externalized": [], "dropped": [], "conversions": []})


class FontUsageTest(unittest.TestCase):
    def test_concrete_weight_replaces_default(self) -> None:
        collector = ExternalStyleCollector()
        collector.register_font_usage("Open Sans", "", "italic")
        collector.register_font_usage("Open Sans", "700", "italic")
        self.assertEqual(collector.get_font_usage(), {"Open Sans": {"weights": ["700"], "italics": ["1"]}})

    def test_default_weight_when_none_seen(self) -> None:
        collector = ExternalStyleCollector()
        collector.register_font_usage("'Lato', sans-serif", "", "")
        self.assertEqual(collector.get_font_usage(), {"Lato": {"weights": ["400"], "italics": ["0"]}})

    def test_weights_and_italics_are_unioned(self) -> None:
        collector = ExternalStyleCollector()
        collector.register_font_usage("Lato", "700", "normal")
        collector.register_font_usage("Lato", "300", "oblique")
        self.assertEqual(collector.get_font_usage(), {"Lato": {"weights": ["300", "700"], "italics": ["0", "1"]}})

    def test_system_fonts_are_skipped(self) -> None:
        collector = ExternalStyleCollector()
        for family in ("sans-serif", "inherit", "system-ui", "", None):
            collector.register_font_usage(family, "400")
        self.assertEqual(collector.get_font_usage(), {})

    def test_aliases_resolve_family(self) -> None:
        config = ConverterConfig.from_mapping({"font_aliases": "opensans => Open Sans"})
        collector = ExternalStyleCollector(config)
        collector.register_font_usage("OpenSans", "600")
        self.assertEqual(list(collector.get_font_usage()), ["Open Sans"])


class ExternalizeAttrsTest(unittest.TestCase):
    def setUp(self) -> None:
        self.collector = ExternalStyleCollector()

    def test_backgrounds_shadows_and_spacing_are_extracted(self) -> None:
        attrs = {
            "className": "hero",
            "style": {
                "background": {"image": {"url": "a.png"}, "size": "cover"},
                "boxShadow": "0 0 2px #000",
                "typography": {"letterSpacing": "2px", "wordSpacing": "0px", "fontSize": "18px"},
            },
        }
        result = self.collector.externalize_attrs("group", attrs)

        expected_rules = {
            "background-image": "url(a.png)",
            "background-size": "cover",
            "box-shadow": "0 0 2px #000",
            "letter-spacing": "2px",
        }
        class_name = self.collector.class_name("group", expected_rules)
        self.assertEqual(result["className"], f"hero {class_name}")
        self.assertEqual(result["style"], {"typography": {"wordSpacing": "0px", "fontSize": "18px"}})
        self.assertIn("background", attrs["style"])
        self.assertIn(f".{class_name} {{\n\tbackground-image: url(a.png);\n", self.collector.render_stylesheet())

        externalized = self.collector.get_inventory()["externalized"]
        self.assertEqual(externalized, [
            {"block": "group", "rules": expected_rules, "reason": "style-tree", "class": class_name}
        ])

    def test_nothing_to_extract_returns_attrs(self) -> None:
        attrs = {"style": {"typography": {"fontSize": "18px"}}}
        self.assertEqual(self.collector.externalize_attrs("heading", attrs), attrs)
        self.assertEqual(self.collector.externalize_attrs("heading", {"level": 2}), {"level": 2})
        self.assertEqual(self.collector.render_stylesheet(), "")

    def test_style_removed_when_emptied(self) -> None:
        result = self.collector.externalize_attrs("group", {"style": {"boxShadow": "none"}})
        self.assertNotIn("style", result)
        self.assertTrue(result["className"].startswith("bc-ext-"))


class InventoryTest(unittest.TestCase):
    def test_entries_are_tagged_copies(self) -> None:
        collector = ExternalStyleCollector()
        payload = {"dropCap": True}
        collector.record_dropped("heading", "attrs", payload)
        collector.record_conversion("image", "unstable-serialization", {"markup": "<x>"})
        collector.record_inner_sanitization("html", "<p>ok</p>")
        payload["dropCap"] = False

        inventory = collector.get_inventory()
        self.assertEqual(inventory["dropped"][0]["payload"], {"dropCap": True})
        self.assertEqual(inventory["dropped"][1]["type"], "inner-html")
        self.assertEqual(inventory["conversions"][0]["decision"], "unstable-serialization")
        for entry in inventory["dropped"] + inventory["conversions"]:
            self.assertEqual(entry["tag"], INVENTORY_TAG)


if __name__ == "__main__":
    unittest.main()
