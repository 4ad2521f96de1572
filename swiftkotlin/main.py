import dataclasses
import json
import logging
import sys

from rich.logging import RichHandler

from swiftkotlin.config import TranslatorConfig, UnsupportedPolicy
from swiftkotlin.errors import ResourceError, TranslationError
from swiftkotlin.swift_parser import parse_program
from swiftkotlin.translator import Translator

logger = logging.getLogger("swiftkotlin")


def setup_logging(verbose: bool):
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if isinstance(handler, RichHandler):
            root_logger.removeHandler(handler)
    root_logger.addHandler(RichHandler(show_time=False, show_path=False, rich_tracebacks=True))
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def node_to_dict(node):
    """JSON-friendly view of a syntax tree; every node records its class name under 'type'."""
    if dataclasses.is_dataclass(node) and not isinstance(node, type):
        out = {'type': type(node).__name__}
        for f in dataclasses.fields(node):
            out[f.name] = node_to_dict(getattr(node, f.name))
        return out
    if isinstance(node, (list, tuple)):
        return [node_to_dict(item) for item in node]
    return node


def output_path(ifile: str) -> str:
    if ifile.endswith('.swift'):
        return ifile[:-6] + '.kt'
    return ifile + '.kt'


def parse(ifile: str):
    ofile = (ifile[:-6] if ifile.endswith('.swift') else ifile) + '.json'
    try:
        with open(ifile, 'r', encoding='utf-8') as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ResourceError(ifile, str(e)) from e
    out = node_to_dict(parse_program(text))
    with open(ofile, 'w') as f:
        json.dump(out, f, indent=1, default=str)
    logger.info("Wrote %s", ofile)


def translate(ifile: str, ofile: str, config: TranslatorConfig):
    kotlin = Translator(config).translate_file(ifile)
    if ofile == '-':
        sys.stdout.write(kotlin)
        return
    try:
        with open(ofile, 'w', encoding='utf-8') as f:
            f.write(kotlin)
    except OSError as e:
        raise ResourceError(ofile, str(e)) from e
    logger.info("Wrote %s", ofile)


def main(argv=None):
    import argparse

    arg_parser = argparse.ArgumentParser(description="Swift to Kotlin source translator")
    subparsers = arg_parser.add_subparsers(dest="command", required=True)

    translate_parser = subparsers.add_parser("translate", help="Translate a Swift file to Kotlin")
    translate_parser.add_argument("input", help="Input .swift file")
    translate_parser.add_argument("-o", "--output", help="Output file, '-' for stdout (default: input with .kt)")
    translate_parser.add_argument("--config", help="TOML file with a [tool.swiftkotlin] table")
    translate_parser.add_argument("--policy", choices=[p.value for p in UnsupportedPolicy],
                                  help="Handling of constructs without a Kotlin counterpart")
    translate_parser.add_argument("--indent-width", type=int, help="Spaces per indentation level")
    translate_parser.add_argument("--dictionary-style", choices=["constructor", "bracket"],
                                  help="Rendering of non-empty dictionary literals")
    translate_parser.add_argument("-v", "--verbose", action="store_true", help="Log debug messages")

    parse_parser = subparsers.add_parser("parse", help="Parse a Swift file into a JSON syntax tree")
    parse_parser.add_argument("input", help="Input .swift file")
    parse_parser.add_argument("-v", "--verbose", action="store_true", help="Log debug messages")

    args = arg_parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        if args.command == "parse":
            parse(args.input)
        elif args.command == "translate":
            config = TranslatorConfig.load(
                args.config,
                unsupported_constructs=args.policy,
                indent_width=args.indent_width,
                dictionary_literal_style=args.dictionary_style,
            )
            translate(args.input, args.output or output_path(args.input), config)
    except TranslationError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
