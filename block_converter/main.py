"""Entry-point for the element to block conversion pipeline."""
from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence

from block_converter.model.document_model import ConvertedDocument, ElementInput
from block_converter.renderer.output_builder import BlockOutputBuilder
from block_converter.renderer.style_collector import ExternalStyleCollector
from block_converter.utils.config import ConverterConfig
from block_converter.utils.debug import DebugDumper
from block_converter.utils.logger import get_logger, set_verbosity

LOGGER = get_logger(__name__)

MARKUP_FILE = "content.html"
STYLESHEET_FILE = "styles.css"
FONTS_FILE = "fonts.json"


def convert_document(
    elements: Iterable[Any], config: Optional[ConverterConfig] = None
) -> ConvertedDocument:
    """Convert one document's elements with a collector owned by this call."""
    config = config or ConverterConfig()
    collector = ExternalStyleCollector(config)
    builder = BlockOutputBuilder(collector, config)

    blocks: List[str] = []
    for element in elements:
        if isinstance(element, dict):
            element = ElementInput.from_mapping(element)
        if not isinstance(element, ElementInput):
            LOGGER.debug("Skipping element of type %s", type(element).__name__)
            continue
        markup = builder.render_element(element)
        if markup:
            blocks.append(markup)

    return ConvertedDocument(
        markup=config.block_separator.join(blocks),
        stylesheet=collector.render_stylesheet(),
        fonts=collector.get_font_usage(),
        inventory=collector.get_inventory(),
    )


def load_elements(path: Path) -> List[Any]:
    """Read the element list of one document from JSON."""
    if not path.exists():
        raise FileNotFoundError(f"Elements file not found: {path}")
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict) and isinstance(data.get("elements"), list):
        data = data["elements"]
    if not isinstance(data, list):
        raise ValueError(f"Elements file must contain a JSON list: {path}")
    return data


def write_outputs(document: ConvertedDocument, output_dir: Path) -> None:
    """Write markup, stylesheet and font usage into ``output_dir``."""
    output_dir.mkdir(parents=True, exist_ok=True)
    (output_dir / MARKUP_FILE).write_text(document.markup, encoding="utf-8")
    (output_dir / STYLESHEET_FILE).write_text(document.stylesheet, encoding="utf-8")
    (output_dir / FONTS_FILE).write_text(
        json.dumps(document.fonts, indent=2, ensure_ascii=False), encoding="utf-8"
    )


def main(
    elements_file: str,
    output_dir: Optional[str] = None,
    config_file: Optional[str] = None,
    debug: bool = False,
) -> ConvertedDocument:
    """Run the elements → blocks + stylesheet pipeline for one document."""
    elements_path = Path(elements_file).resolve()
    elements = load_elements(elements_path)
    config = ConverterConfig.from_file(Path(config_file).resolve()) if config_file else ConverterConfig()

    LOGGER.info("Converting %d element(s) from %s", len(elements), elements_path.name)
    document = convert_document(elements, config)

    if output_dir is None:
        output_dir = str(elements_path.with_suffix(""))
    output_path = Path(output_dir).resolve()
    LOGGER.info("Writing outputs into %s", output_path)
    write_outputs(document, output_path)

    if debug:
        DebugDumper(output_path / "debug").dump(document)
    return document


def cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Convert page-builder elements into block markup and a stylesheet")
    parser.add_argument("elements_file", help="Path to the input elements JSON file")
    parser.add_argument("--output", help="Directory to write generated artifacts")
    parser.add_argument("--config", help="Path to a JSON converter config")
    parser.add_argument("--debug", action="store_true", help="Log decisions and dump the conversion inventory")

    args = parser.parse_args(argv)
    set_verbosity(args.debug)
    main(args.elements_file, args.output, args.config, args.debug)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(cli())
