"""CLI entrypoint for aggregated IP intelligence lookups."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from ipintel.common.config_loader import load_all_configs
from ipintel.common.constants import EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS, OPERATIONS
from ipintel.common.errors import IntelError
from ipintel.common.fs import write_json
from ipintel.common.ids import generate_request_id
from ipintel.common.logging import build_logger, close_logger, log_event
from ipintel.service import IntelService

# Number of positional IPs each operation takes; None means "one or more".
TARGET_ARITY = {
    "overview": 0,
    "lookup": 1,
    "full": 1,
    "threat": 1,
    "distance": 2,
    "batch": None,
}


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=OPERATIONS)
    parser.add_argument("targets", nargs="*", metavar="IP")
    parser.add_argument("--request-id", default=None)
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--log-level", default=None, choices=["DEBUG", "INFO", "WARN", "ERROR"])
    parser.add_argument("--log-file", default=None)
    parser.add_argument("--output", default=None)
    return parser.parse_args(argv)


def _check_arity(command: str, targets: list[str]) -> str | None:
    expected = TARGET_ARITY[command]
    if expected is None:
        return None if targets else f"{command} needs at least one IP"
    if len(targets) != expected:
        return f"{command} takes exactly {expected} IP argument(s), got {len(targets)}"
    return None


def execute_operation(service: IntelService, command: str, targets: list[str]) -> dict:
    if command == "overview":
        return service.overview()
    if command == "lookup":
        return service.lookup(targets[0])
    if command == "full":
        return service.full(targets[0])
    if command == "batch":
        return service.batch(list(targets))
    if command == "threat":
        return service.threat(targets[0])
    if command == "distance":
        return service.distance(targets[0], targets[1])
    raise ValueError(f"Unknown operation: {command}")


def run_command(args: argparse.Namespace, *, client=None) -> int:
    request_id = args.request_id or generate_request_id()
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None
    bundle = load_all_configs(Path(args.config_dir), overlay_config_dir=overlay_config_dir)

    level = args.log_level or bundle.service["logging"]["level"]
    log_path = Path(args.log_file) if args.log_file else None
    logger = build_logger(request_id, level=level, log_path=log_path)
    arity_error = _check_arity(args.command, args.targets)
    try:
        if arity_error is not None:
            log_event(logger, arity_error, request_id=request_id, operation=args.command, event="INVALID_INPUT", status="error")
            envelope = {"output": {"error": arity_error}}
        else:
            with IntelService(bundle, client=client, logger=logger) as service:
                envelope = execute_operation(service, args.command, args.targets)
    finally:
        close_logger(logger)

    print(json.dumps(envelope, ensure_ascii=False, indent=2))
    if args.output:
        write_json(Path(args.output), envelope)

    if "error" in envelope["output"]:
        return EXIT_PARTIAL
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv or sys.argv[1:])
    try:
        return run_command(args)
    except IntelError as exc:
        print(f"{exc.error_code}: {exc}", file=sys.stderr)
        return EXIT_HARD_FAIL
    except Exception as exc:
        print(f"UNEXPECTED_ERROR: {exc}", file=sys.stderr)
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
