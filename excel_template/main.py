#!/usr/bin/env python
"""
Excel template filler - CLI entry point.

Usage:
    python -m excel_template.main <template.xlsx> <variables.yaml|json> [--output filled.xlsx]
        [--config config.yaml] [--direction vertical|horizontal]
        [--duplicate-all | --no-duplicate-all] [--remove-non-existent] [--log-level LEVEL]

The variables file holds a mapping of placeholder names to values, e.g.::

    customer: ACME
    dates: [2024-01-01, 2024-02-01]
    lines:
      - {item: Widget, qty: 3}
      - {item: Gadget, qty: 1}
"""

import argparse
import json
import logging
import os
import sys

import yaml

from excel_template.config import load_config, parse_direction, setup_logging
from excel_template.exceptions import TemplateError
from excel_template.template import Template

logger = logging.getLogger(__name__)


def load_variables(path) -> dict:
    """Read a YAML or JSON mapping of variables."""
    with open(path, "r", encoding="utf-8") as f:
        if path.lower().endswith(".json"):
            data = json.load(f)
        else:
            data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Variables file '{path}' must hold a mapping, got {type(data).__name__}")
    return data


def default_output_path(template_path):
    base, ext = os.path.splitext(template_path)
    return f"{base}_filled{ext}"


def build_parser():
    parser = argparse.ArgumentParser(
        description="Fill %placeholder% tokens of an Excel template with values"
    )
    parser.add_argument("template", help="Path to the template workbook (.xlsx/.xlsm)")
    parser.add_argument("variables", help="Path to a YAML or JSON file with the variables")
    parser.add_argument(
        "--output", "-o", default=None,
        help="Output workbook path (default: <template>_filled.xlsx)",
    )
    parser.add_argument("--config", default="config.yaml",
                        help="Path to config YAML file (default: config.yaml)")
    parser.add_argument(
        "--direction", choices=["vertical", "horizontal"], default=None,
        help="Direction in which lists and record-arrays expand (overrides config)",
    )
    parser.add_argument(
        "--duplicate-all", dest="duplicate_all", action="store_true", default=None,
        help="Copy every cell when duplicating a record-array column/row block",
    )
    parser.add_argument(
        "--no-duplicate-all", dest="duplicate_all", action="store_false",
        help="Only copy cells that belong to the record-array or hold constants",
    )
    parser.add_argument(
        "--remove-non-existent", action="store_true", default=None,
        help="Blank placeholders whose variable does not exist",
    )
    parser.add_argument("--log-level", default=None,
                        help="Logging level: DEBUG, INFO, WARNING, ERROR")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    if args.direction is not None:
        config["direction"] = parse_direction(args.direction)
    if args.duplicate_all is not None:
        config["duplicate_all"] = args.duplicate_all
    if args.remove_non_existent is not None:
        config["remove_non_existent"] = args.remove_non_existent
    if args.log_level:
        config["log_level"] = args.log_level
    output = args.output or config.get("output") or default_output_path(args.template)

    setup_logging(config["log_level"])

    for path in (args.template, args.variables):
        if not os.path.exists(path):
            logger.error(f"File not found: {path}")
            return 1

    try:
        variables = load_variables(args.variables)
    except (ValueError, yaml.YAMLError) as exc:
        logger.error(f"Cannot read variables: {exc}")
        return 1

    logger.info(f"Template: {args.template}")
    logger.info(f"Variables: {args.variables} ({len(variables)} entries)")
    logger.info(f"Direction: {config['direction'].value}, duplicate all: "
                f"{config['duplicate_all']}, remove non-existent: {config['remove_non_existent']}")

    try:
        Template(args.template).substitute_to_file(
            output,
            variables,
            duplicate_all=config["duplicate_all"],
            direction=config["direction"],
            remove_non_existent=config["remove_non_existent"],
        )
    except TemplateError as exc:
        logger.error(str(exc))
        return 1

    print(f"Generated: {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
