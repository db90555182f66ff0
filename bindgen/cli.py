"""Command-line driver for the P/Invoke binding generator."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from . import constants
from .api import declaration_stats, generate_bindings, load_declarations
from .gen_types import GeneratorConfig
from .generator import PInvokeGenerator

logger = logging.getLogger(__name__)

DEMO_DECLARATIONS = """\
{
  "declarations": [
    {
      "kind": "namespace",
      "name": "Urho3D",
      "children": [
        {
          "kind": "class",
          "name": "Shape",
          "symbol_name": "Urho3D::Shape",
          "is_ref_counted": true,
          "children": [
            {"kind": "constructor", "name": "Shape", "symbol_name": "Urho3D::Shape::Shape"},
            {"kind": "field", "name": "Name", "symbol_name": "Urho3D::Shape::Name", "type": "Urho3D::String"},
            {"kind": "method", "name": "Area", "symbol_name": "Urho3D::Shape::Area", "return_type": "float", "is_virtual": true}
          ]
        }
      ]
    }
  ]
}
"""


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bindgen", description="P/Invoke boundary binding generator"
    )
    parser.add_argument(
        "input", nargs="?", help="Declaration tree JSON file (default: built-in demo)"
    )
    parser.add_argument(
        "--output-dir", "-o", default=".", help="Directory for the generated file"
    )
    parser.add_argument(
        "--output-name",
        default=constants.DEFAULT_OUTPUT_NAME,
        help=f"Generated file name (default: {constants.DEFAULT_OUTPUT_NAME})",
    )
    parser.add_argument(
        "--namespace",
        default=constants.DEFAULT_NAMESPACE,
        help=f"Managed namespace (default: {constants.DEFAULT_NAMESPACE})",
    )
    parser.add_argument(
        "--library",
        default=constants.DEFAULT_LIBRARY,
        help=f"Native library for DllImport (default: {constants.DEFAULT_LIBRARY})",
    )
    parser.add_argument(
        "--calling-convention",
        default=constants.DEFAULT_CALLING_CONVENTION,
        choices=["Cdecl", "StdCall", "ThisCall", "Winapi"],
        help="Native calling convention (default: Cdecl)",
    )
    parser.add_argument(
        "--ref-counted-base",
        default=constants.REF_COUNTED_BASE,
        help=f"Reference-counted base symbol (default: {constants.REF_COUNTED_BASE})",
    )
    parser.add_argument(
        "--stdout", action="store_true", help="Print the generated source instead of writing it"
    )
    parser.add_argument(
        "--stats", action="store_true", help="Print generation statistics"
    )
    parser.add_argument(
        "--kinds", action="store_true", help="Only print declaration kind counts"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = GeneratorConfig(
        namespace=args.namespace,
        library=args.library,
        calling_convention=args.calling_convention,
        ref_counted_base=args.ref_counted_base,
        output_name=args.output_name,
    )

    try:
        if args.input:
            tree = load_declarations(Path(args.input))
        else:
            logger.info("No input provided. Using built-in demo declarations")
            tree = load_declarations(DEMO_DECLARATIONS)

        if args.kinds:
            print(json.dumps(declaration_stats(tree), indent=2, sort_keys=True))
            return 0

        if args.stdout:
            result = PInvokeGenerator(config=config).generate(tree)
            sys.stdout.write(result.text)
        else:
            result = generate_bindings(tree, args.output_dir, config)
    except (OSError, ValueError) as e:
        logger.error("%s", e)
        return 1

    if args.stats:
        print(result.stats.report(), file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
