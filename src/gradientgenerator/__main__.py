"""
Command-line interface.

Usage:
    python -m gradientgenerator PARAMS.json [--log-level DEBUG] [--output result.json]
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from gradientgenerator.io import load_parameters, result_to_dict, save_result
from gradientgenerator.logging_config import setup_logging
from gradientgenerator.pipeline import create_gradient_generator

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gradientgenerator",
        description="Design the channel layout of a microfluidic gradient generator"
    )
    parser.add_argument(
        "parameters",
        type=Path,
        help="Path to the JSON file with the design parameters"
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="WARNING",
        help="Logging level (logs go to stderr)"
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Write the JSON result to this file instead of stdout"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI; returns 0 on success and 1 on any failure."""
    args = build_parser().parse_args(argv)
    setup_logging(level=getattr(logging, args.log_level), stream=sys.stderr)

    try:
        parameters = load_parameters(str(args.parameters))
    except FileNotFoundError:
        print(f"Error: Parameter file not found: {args.parameters}", file=sys.stderr)
        return 1
    except (ValueError, TypeError) as e:
        print(f"Error: Invalid parameter file: {e}", file=sys.stderr)
        return 1

    result = create_gradient_generator(parameters)

    if args.output is not None:
        save_result(result, str(args.output))
    else:
        print(json.dumps(result_to_dict(result), indent=2))

    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
