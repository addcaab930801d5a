"""Command-line entry point: report on-call conflicts across PagerDuty schedules."""

from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime, timezone

import dateparser

from pdconflicts.clients.pagerduty import PagerDutyClient
from pdconflicts.config import Settings
from pdconflicts.domain.errors import AllRetrievalsFailedError, NormalizationError
from pdconflicts.domain.models import ConflictReport, TimeWindow
from pdconflicts.logging_config import get_logger, setup_logging
from pdconflicts.services.report import check_schedules

logger = get_logger(__name__)


def resolve_time(raw: str, now: datetime) -> datetime | None:
    """Resolve a relative or absolute time expression against *now* (UTC)."""
    settings = {
        "RELATIVE_BASE": now.astimezone(timezone.utc).replace(tzinfo=None),
        "TIMEZONE": "UTC",
        "TO_TIMEZONE": "UTC",
        "RETURN_AS_TIMEZONE_AWARE": False,
    }
    result = dateparser.parse(raw, settings=settings)
    if result is None:
        return None
    return result.replace(tzinfo=timezone.utc)


def _split_ids(values: list[str]) -> list[str]:
    ids: list[str] = []
    for value in values:
        ids.extend(part.strip() for part in value.split(",") if part.strip())
    return ids


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdconflicts",
        description="Find people scheduled on overlapping PagerDuty on-call shifts.",
    )
    parser.add_argument(
        "--auth-token",
        default=settings.auth_token,
        help="PagerDuty API token (default: $PAGERDUTY_AUTH_TOKEN)",
    )
    parser.add_argument(
        "-s",
        "--schedule",
        action="append",
        default=[],
        metavar="ID",
        help="schedule ID to check; repeat or comma-separate for several",
    )
    parser.add_argument(
        "--since",
        default=settings.default_since,
        help="start of the window, e.g. 'now' or '1 hour ago' (default: %(default)s)",
    )
    parser.add_argument(
        "--until",
        default=settings.default_until,
        help="end of the window, must be later than --since (default: %(default)s)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="print each schedule's entries as a JSON line",
    )
    parser.add_argument(
        "--skip-invalid",
        action="store_true",
        help="skip schedules with malformed entries instead of aborting",
    )
    parser.add_argument("--log-level", default=None, help="log level (default: INFO)")
    return parser


def _print_report(report: ConflictReport, as_json: bool) -> None:
    if as_json:
        for entries in report.schedule_entries:
            print(json.dumps([entry.model_dump(mode="json") for entry in entries]))

    for person_id in sorted(report.conflicts):
        for conflict in report.conflicts[person_id]:
            print(f"CONFLICT: {conflict.describe()}")

    print(
        f"{report.conflict_count} conflict(s) across {len(report.schedules)} schedule(s)"
    )


def main(argv: list[str] | None = None) -> int:
    settings = Settings.from_env()
    parser = build_parser(settings)
    args = parser.parse_args(argv)

    if not args.auth_token:
        parser.error("--auth-token is required (or set PAGERDUTY_AUTH_TOKEN)")

    schedule_ids = _split_ids(args.schedule)
    if not schedule_ids:
        parser.error("at least one --schedule is required")

    now = datetime.now(timezone.utc)
    since = resolve_time(args.since, now)
    until = resolve_time(args.until, now)
    if since is None:
        parser.error(f"could not understand --since {args.since!r}")
    if until is None:
        parser.error(f"could not understand --until {args.until!r}")
    if until <= since:
        parser.error(
            f"--until ({until.isoformat()}) must be later than --since ({since.isoformat()})"
        )

    setup_logging(args.log_level)
    window = TimeWindow(since=since, until=until)

    client = PagerDutyClient(args.auth_token, settings.api_url, settings.timeout)
    try:
        report = check_schedules(
            client,
            schedule_ids,
            window,
            on_conflict=None,
            skip_invalid=args.skip_invalid,
        )
    except AllRetrievalsFailedError as exc:
        logger.error("every schedule failed to retrieve", failures=len(exc.failures))
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except NormalizationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        client.close()

    _print_report(report, args.json)
    return 0


if __name__ == "__main__":
    sys.exit(main())
