# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from enum import StrEnum
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from dnssecsync import __version__
from dnssecsync.app import export_local_keys, reconciliation_session
from dnssecsync.config import ConfigurationError, configure_logging
from dnssecsync.domain.keys import normalize_origin
from dnssecsync.domain.reconciliation import (
    clean_corrupted_keys,
    clean_orphaned_keys,
    publish_unpublished_keys,
)
from dnssecsync.ui.report import (
    CLEAN_CORRUPTED_TITLE,
    CLEAN_ORPHANED_TITLE,
    PUBLISH_TITLE,
    header,
    keylist_lines,
    outcome_lines,
    report_lines,
    summary_lines,
    zone_list_lines,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence
    from types import FrameType

    from dnssecsync.domain.reconciliation import KeyOperationOutcome, ReconciliationContext

log = logging.getLogger(__name__)


class RegistrarAction(StrEnum):
    SUMMARY = "summary"
    REPORT = "report"
    LIST = "list"
    KEYLIST = "keylist"
    PUBLISH = "publish"
    CLEAN = "clean"
    CLEAN_ORPHANS = "clean_orphans"
    CLEAN_CORRUPT = "clean_corrupt"


@dataclass(frozen=True, slots=True)
class ActionStep:
    action: RegistrarAction
    origin: str | None = None


class _AppendStep(argparse.Action):
    """Record options in command-line order so they run in that order."""

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: str | Sequence[object] | None,
        option_string: str | None = None,
    ) -> None:
        steps: list[ActionStep] = list(getattr(namespace, "steps", None) or [])
        origin = values if isinstance(values, str) else None
        steps.append(ActionStep(action=RegistrarAction(self.dest), origin=origin))
        namespace.steps = steps


def _add_step(
    parser: argparse.ArgumentParser,
    *flags: str,
    action: RegistrarAction,
    help_text: str,
    metavar: str | None = None,
) -> None:
    parser.add_argument(
        *flags,
        dest=action.value,
        action=_AppendStep,
        nargs=0 if metavar is None else None,
        metavar=metavar,
        default=argparse.SUPPRESS,
        help=help_text,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dnssecsync",
        description="Synchronise DNSSEC keys between ISPConfig and INWX",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--export-file",
        type=str,
        help="Path of the exported key file (defaults to DNSSEC_EXPORT_FILE or dnsseckeydata.json)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    isp = subparsers.add_parser("isp", help="Load signed zones from ISPConfig")
    isp.add_argument(
        "--export",
        action="store_true",
        help="Write the collected keys to the export file",
    )

    inwx = subparsers.add_parser("inwx", help="Compare and synchronise keys at INWX")
    inwx.set_defaults(steps=[], print_help=inwx.print_help)
    _add_step(inwx, "-s", "--summary", action=RegistrarAction.SUMMARY, help_text="Print a status summary")
    _add_step(inwx, "-r", "--report", action=RegistrarAction.REPORT, help_text="Print the per-zone status report")
    _add_step(inwx, "-l", "--list", action=RegistrarAction.LIST, help_text="List zones known on each side")
    _add_step(
        inwx,
        "-k",
        "--keylist",
        action=RegistrarAction.KEYLIST,
        metavar="ORIGIN",
        help_text="Print every key stored for one zone",
    )
    _add_step(inwx, "-p", "--publish", action=RegistrarAction.PUBLISH, help_text="Publish all unpublished keys")
    _add_step(
        inwx,
        "-c",
        "--clean",
        action=RegistrarAction.CLEAN,
        metavar="ORIGIN",
        help_text="Remove corrupted and orphaned keys of one zone",
    )
    _add_step(
        inwx,
        "--clean-orphans",
        action=RegistrarAction.CLEAN_ORPHANS,
        help_text="Remove every orphaned key",
    )
    _add_step(
        inwx,
        "--clean-corrupt",
        action=RegistrarAction.CLEAN_CORRUPT,
        help_text="Remove every key with corrupted data",
    )
    return parser


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parsed = _build_parser().parse_args(list(argv))
    if parsed.command == "inwx":
        parsed.steps = [_validate_step(step) for step in parsed.steps]
    return parsed


def _validate_step(step: ActionStep) -> ActionStep:
    if step.origin is None:
        return step
    try:
        return ActionStep(action=step.action, origin=normalize_origin(step.origin))
    except ValueError as exc:
        raise ValueError(f"Invalid zone origin for --{step.action.value}: {step.origin!r}") from exc


def _emit(lines: Iterable[str]) -> None:
    for line in lines:
        print(line)


def _print_outcome(outcome: KeyOperationOutcome) -> None:
    _emit(outcome_lines(outcome))


def _run_batch(
    title: str,
    operation: Callable[[], list[KeyOperationOutcome]],
) -> None:
    print(header(title))
    operation()
    print()


def _run_step(context: ReconciliationContext, step: ActionStep) -> None:
    registry = context.registry
    if step.action is RegistrarAction.SUMMARY:
        _emit(summary_lines(registry))
    elif step.action is RegistrarAction.REPORT:
        _emit(report_lines(registry))
    elif step.action is RegistrarAction.LIST:
        _emit(zone_list_lines(registry))
    elif step.action is RegistrarAction.KEYLIST:
        _emit(keylist_lines(registry, step.origin or ""))
    elif step.action is RegistrarAction.PUBLISH:
        _run_batch(
            PUBLISH_TITLE,
            lambda: publish_unpublished_keys(context, on_outcome=_print_outcome),
        )
    elif step.action is RegistrarAction.CLEAN:
        _run_batch(
            CLEAN_CORRUPTED_TITLE,
            lambda: clean_corrupted_keys(context, step.origin, on_outcome=_print_outcome),
        )
        _run_batch(
            CLEAN_ORPHANED_TITLE,
            lambda: clean_orphaned_keys(context, step.origin, on_outcome=_print_outcome),
        )
    elif step.action is RegistrarAction.CLEAN_ORPHANS:
        _run_batch(
            CLEAN_ORPHANED_TITLE,
            lambda: clean_orphaned_keys(context, on_outcome=_print_outcome),
        )
    elif step.action is RegistrarAction.CLEAN_CORRUPT:
        _run_batch(
            CLEAN_CORRUPTED_TITLE,
            lambda: clean_corrupted_keys(context, on_outcome=_print_outcome),
        )


def run_registrar_steps(steps: Sequence[ActionStep], *, export_file: str | None = None) -> None:
    with reconciliation_session(export_path=export_file) as context:
        for step in steps:
            log.debug("Running %s", step.action.value)
            _run_step(context, step)


def run_export(*, export: bool, export_file: str | None = None) -> None:
    result = export_local_keys(export_path=export_file, write=export)
    for origin in result.unsigned:
        print(f"{'UNSIGNED:':<14} {origin}")
    print(f"{len(result.keys):<8} signed zones loaded from ISPConfig")
    print(f"{len(result.unsigned):<8} zones without DNSSEC skipped")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        configure_logging()
        parsed_args = _parse_args(args_list)
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    if parsed_args.command == "inwx" and not parsed_args.steps:
        log.warning("No action given for inwx")
        parsed_args.print_help()
        sys.exit(0)

    try:
        if parsed_args.command == "isp":
            run_export(export=parsed_args.export, export_file=parsed_args.export_file)
        elif parsed_args.command == "inwx":
            run_registrar_steps(parsed_args.steps, export_file=parsed_args.export_file)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
