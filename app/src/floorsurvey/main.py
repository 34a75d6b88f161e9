#!/usr/bin/env python3
"""
floorsurvey/main.py

Command line entry point for the floor-plan survey tool.  Without options it
opens the desktop client on the bundled demo building; ``--plan`` points it at
another plan folder (``plan_template.json``, ``schema_version.json`` and the
GeoJSON backgrounds).  ``--overview`` renders a level to a PNG without
opening a window, which also works on machines without a display.

To start the application run:

    python3 -m floorsurvey.main

or, once installed, ``floorsurvey``.
"""

from __future__ import annotations

import argparse
import importlib.util
import logging
import sys
from typing import List, Optional

from .core.config import DEFAULT_CONFIG, load_config
from .file_io import DEMO_DIR, PlanLoadError

logger = logging.getLogger(__name__)

REQUIRED_PACKAGES = [
    ("PIL", "pillow"),
    ("matplotlib", "matplotlib"),
]


def check_requirements() -> None:
    missing = [pkg for mod, pkg in REQUIRED_PACKAGES if importlib.util.find_spec(mod) is None]
    if missing:
        print("\nERROR: Missing required packages:", file=sys.stderr)
        for pkg in missing:
            print(f"    pip install {pkg}", file=sys.stderr)
        print("Then re-run this command.\n", file=sys.stderr)
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='floorsurvey', description="Browse floor plans and record room inventories.")
    parser.add_argument('--plan', default=DEMO_DIR, help="plan folder (default: bundled demo)")
    parser.add_argument('--config', help="viewer configuration JSON")
    parser.add_argument('--overview', metavar='LEVEL', help="render LEVEL (name or id) to --output and exit")
    parser.add_argument('--output', default='overview.png', help="PNG path for --overview (default: %(default)s)")
    parser.add_argument('--log-level', default='INFO', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    return parser


def render_overview(plan_dir: str, level: str, output: str) -> int:
    from .features.inventory.seed import load_survey
    from .visualization.overview import render_survey_level

    try:
        survey = load_survey(plan_dir)
        img = render_survey_level(survey, level)
    except PlanLoadError as e:
        logger.error("Cannot load plan: %s", e)
        return 2
    except KeyError as e:
        logger.error("%s", e.args[0])
        return 2
    img.save(output)
    logger.info("Wrote %s", output)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    check_requirements()

    if args.overview:
        return render_overview(args.plan, args.overview, args.output)

    config = DEFAULT_CONFIG
    if args.config:
        try:
            config = load_config(args.config)
        except (OSError, ValueError) as e:
            logger.error("Cannot read config %s: %s", args.config, e)
            return 2

    from .gui_client import main as gui_main

    try:
        gui_main(args.plan, config)
    except PlanLoadError as e:
        logger.error("Cannot load plan: %s", e)
        return 2
    return 0


if __name__ == '__main__':
    sys.exit(main())
