#!/usr/bin/env python3
"""
Command-line replay of recorded tracked-ids snapshots.

Feeds a YAML script of snapshots through an in-process transport into an
HRIListener, logging every newly detected feature, and prints which IDs are
tracked at the end. Handy for checking what a perception pipeline's output
does to the registries without a running robot.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

import yaml

from ..core.config import ListenerConfig
from ..core.features import FeatureType
from ..core.listener import HRIListener
from ..transport.local import LocalTransport


def setup_logging(log_level: object = logging.INFO) -> object:
    """Set up console logging for the HRI listener tools."""
    handlers = [logging.StreamHandler(sys.stdout)]

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )

    logger = logging.getLogger(__name__)
    logger.debug(f"Python version: {sys.version}")
    logger.debug(f"Working directory: {os.getcwd()}")


def parse_arguments(argv=None) -> object:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Replay tracked-ids snapshots through an HRI listener",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Script format (YAML list of snapshots, applied in order):
  - {feature: face, ids: [f1, f2]}
  - {feature: person, ids: [p1]}
  - {feature: face, ids: [f2]}

Examples:
  hri-replay session.yaml
  hri-replay session.yaml --config listener.yaml --log-level DEBUG
        """,
    )

    parser.add_argument(
        "script", type=str, help="YAML file with the snapshots to replay"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="YAML file with ListenerConfig overrides",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Set the logging level (default: INFO)",
    )

    parser.add_argument("--version", action="version", version="hri-listener 1.0.0")

    return parser.parse_args(argv)


def load_script(path) -> list:
    """Load and validate a replay script; raises ValueError on bad content."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Replay script not found: {path}")
    steps = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(steps, list):
        raise ValueError("Replay script must be a list of snapshots")

    parsed = []
    for index, step in enumerate(steps):
        if not isinstance(step, dict) or "feature" not in step:
            raise ValueError(
                f"Step {index}: expected a mapping with 'feature' and 'ids'"
            )
        feature = FeatureType.parse(step["feature"])
        ids = step.get("ids") or []
        if not isinstance(ids, list):
            raise ValueError(f"Step {index}: 'ids' must be a list")
        parsed.append((feature, [str(i) for i in ids]))
    return parsed


def replay(steps, config=None) -> dict:
    """Publish ``steps`` in order and return the tracked IDs per category."""
    logger = logging.getLogger(__name__)
    transport = LocalTransport()
    config = config or ListenerConfig()

    with HRIListener(transport, config) as listener:
        listener.on_face(lambda view: logger.info("New face: %s", view.id))
        listener.on_body(lambda view: logger.info("New body: %s", view.id))
        listener.on_voice(lambda view: logger.info("New voice: %s", view.id))
        listener.on_person(lambda person: logger.info("New person: %s", person.id))

        for feature, ids in steps:
            transport.publish(config.tracked_topic(feature), ids)

        return {
            "face": sorted(str(i) for i in listener.get_faces()),
            "body": sorted(str(i) for i in listener.get_bodies()),
            "voice": sorted(str(i) for i in listener.get_voices()),
            "person": sorted(str(i) for i in listener.get_persons()),
        }


def main(argv=None) -> object:
    """
    Replay entry point.

    Parses command line arguments, sets up logging, loads the script and the
    optional config, replays the snapshots and prints the final state.
    """
    args = parse_arguments(argv)

    log_level = getattr(logging, args.log_level.upper())
    setup_logging(log_level=log_level)

    logger = logging.getLogger(__name__)

    try:
        config = (
            ListenerConfig.from_yaml(args.config) if args.config else ListenerConfig()
        )
        steps = load_script(args.script)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Failed to load replay inputs: {e}")
        print(f"Error: {e}")
        return 1

    logger.info(f"Replaying {len(steps)} snapshots from {args.script}")
    tracked = replay(steps, config)

    for feature, ids in tracked.items():
        print(f"{feature}: {' '.join(ids) if ids else '-'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
