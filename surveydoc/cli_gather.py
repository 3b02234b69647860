"""
CLI Phase 1: Gather user requirements.

Parses command-line arguments and returns an ExportConfig dataclass.
No side effects - just parsing and conversion.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional

from .cli_config import ExportConfig, FontOverrides
from .logging_utils import VERBOSITY_NORMAL, VERBOSITY_QUIET, VERBOSITY_VERBOSE
from .rules import DEFAULT_RULEBOOK, list_rulebooks


def _build_parser() -> argparse.ArgumentParser:
    rulebook_names = [rb["name"] for rb in list_rulebooks()]
    parser = argparse.ArgumentParser(
        prog="surveydoc",
        description="Transform survey JSON data and render it into a Word template.",
        epilog="""
Examples:
  Render one document per survey file:
    surveydoc \\
      --mapping mappings/system.json \\
      --template templates/system.docx \\
      --data surveys/ \\
      --target output/

  Render a folder of process surveys into one ZIP:
    surveydoc \\
      --rulebook process \\
      --mapping mappings/process.json \\
      --template templates/process.docx \\
      --data surveys/ \\
      --zip processes.zip \\
      --target output/

  Only write the transformed template data:
    surveydoc \\
      --mapping mappings/system.json \\
      --data survey.json \\
      --transform-only \\
      --target output/
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("--mapping", help="Mapping file (placeholder -> JSON path).")
    parser.add_argument("--template", help="Template .docx.")
    parser.add_argument("--data", help="Survey JSON file or folder of JSON files.")
    parser.add_argument("--target", help="Target output directory.")
    parser.add_argument("--rulebook", default=DEFAULT_RULEBOOK, choices=rulebook_names,
                        help=f"Questionnaire kind (default: {DEFAULT_RULEBOOK}).")
    parser.add_argument("--list-rulebooks", action="store_true",
                        help="List the available rulebooks and exit.")

    fonts = parser.add_argument_group("fonts")
    fonts.add_argument("--persian-font", help="Font for Persian text (default: B Nazanin).")
    fonts.add_argument("--english-font", help="Font for English text (default: Times New Roman).")
    fonts.add_argument("--default-font", help="Fallback font (default: Times New Roman).")
    fonts.add_argument("--title-font", help="Heading font for the title placeholders (default: B Titr).")

    output = parser.add_argument_group("output")
    output.add_argument("--zip", nargs="?", const="", metavar="NAME", dest="zip_name",
                        help="Pack all documents into one ZIP (default name: batch_export_<date>.zip).")
    output.add_argument("--transform-only", action="store_true",
                        help="Write the transformed JSON only, do not render documents.")

    parser.add_argument("--strict", action="store_true",
                        help="Treat leaked markers and rule failures as errors.")
    parser.add_argument("--debug", action="store_true",
                        help="Verbose logs + stack traces on failure.")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log progress for every document.")
    parser.add_argument("--log-file",
                        help="Optional path to a log file. If set, all output is also written there.")
    return parser


def gather_user_requirements(argv: Optional[List[str]] = None) -> ExportConfig:
    """
    Phase 1: Parse command-line arguments and return the export configuration.

    No side effects - just parsing and conversion to ExportConfig.
    """
    args = _build_parser().parse_args(argv)

    if args.list_rulebooks:
        return ExportConfig(list_rulebooks=True, debug=args.debug, log_file=args.log_file)

    missing = [flag for flag, value in (("--mapping", args.mapping), ("--data", args.data), ("--target", args.target))
               if not value]
    if not args.transform_only and not args.template:
        missing.append("--template")
    if missing:
        raise ValueError(f"Missing required argument(s): {', '.join(missing)}")

    if args.transform_only and args.zip_name is not None:
        raise ValueError("--zip cannot be combined with --transform-only")

    if args.debug:
        verbosity = VERBOSITY_VERBOSE
    elif args.verbose:
        verbosity = VERBOSITY_NORMAL
    else:
        verbosity = VERBOSITY_QUIET

    return ExportConfig(
        mapping=Path(args.mapping),
        source=Path(args.data),
        template=Path(args.template) if args.template else None,
        target_dir=Path(args.target),
        rulebook=args.rulebook,
        fonts=FontOverrides(
            persian=args.persian_font,
            english=args.english_font,
            default=args.default_font,
            system_title_first=args.title_font,
        ),
        zip_name=args.zip_name or None,
        batch=args.zip_name is not None,
        transform_only=args.transform_only,
        strict=args.strict,
        debug=args.debug,
        verbosity=verbosity,
        log_file=args.log_file,
    )
