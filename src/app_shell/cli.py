import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from src.adapters.render_rules import RulesRenderAdapter
from src.components.render_posts import PostRenderer, RenderConfig
from src.components.richtext import ConvertToPortableTextInput, run_convert
from src.rules.loader import load_rules

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cli")

RULES_PATH = "rules.yaml"


def get_rules_adapter(args: argparse.Namespace) -> RulesRenderAdapter | None:
    rules_path = Path(args.rules)
    if not rules_path.exists():
        logger.warning(f"Rules file {rules_path} not found, using defaults.")
        return None
    return RulesRenderAdapter(load_rules(rules_path))


def get_config(args: argparse.Namespace, rules: RulesRenderAdapter | None) -> RenderConfig:
    if rules is None:
        return RenderConfig()
    return rules.build_config(styled=args.styled)


def get_source(args: argparse.Namespace, rules: RulesRenderAdapter | None) -> str:
    if args.source:
        return str(args.source)
    return rules.get_default_source() if rules else "auto"


def read_document(path: str) -> Any:
    if path == "-":
        return json.load(sys.stdin)

    file_path = Path(path)
    if not file_path.exists():
        logger.error(f"File {file_path} not found.")
        sys.exit(1)
    with open(file_path) as f:
        return json.load(f)


def handle_render(args: argparse.Namespace) -> None:
    rules = get_rules_adapter(args)
    renderer = PostRenderer(config=get_config(args, rules))
    print(renderer.render(read_document(args.file), get_source(args, rules)))


def handle_text(args: argparse.Namespace) -> None:
    source = get_source(args, get_rules_adapter(args))
    print(PostRenderer().extract_text(read_document(args.file), source))


def handle_convert(args: argparse.Namespace) -> None:
    result = run_convert(ConvertToPortableTextInput(document=read_document(args.file)))
    if not result.success:
        for error in result.errors:
            logger.error(error.message)
        sys.exit(1)
    print(json.dumps(result.blocks, indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Site rich text CLI")
    parser.add_argument("--rules", default=RULES_PATH, help="Path to rules.yaml")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # render
    render_parser = subparsers.add_parser("render", help="Render a document to HTML")
    render_parser.add_argument("file", help="JSON document path, or - for stdin")
    render_parser.add_argument(
        "--source", choices=["auto", "lexical", "portable_text"], default=None
    )
    render_parser.add_argument("--styled", action="store_true", help="Add site CSS classes")

    # text
    text_parser = subparsers.add_parser("text", help="Extract plain text")
    text_parser.add_argument("file", help="JSON document path, or - for stdin")
    text_parser.add_argument(
        "--source", choices=["auto", "lexical", "portable_text"], default=None
    )

    # convert
    convert_parser = subparsers.add_parser(
        "convert", help="Convert a Lexical document to Portable Text"
    )
    convert_parser.add_argument("file", help="JSON document path, or - for stdin")

    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    if args.command == "render":
        handle_render(args)
    elif args.command == "text":
        handle_text(args)
    elif args.command == "convert":
        handle_convert(args)


if __name__ == "__main__":
    main()
