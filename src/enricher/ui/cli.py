from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from enricher.app import enrich_titles, list_stored_items
from enricher.config import ConfigurationError, configure_logging
from enricher.domain.model import ItemStatus
from enricher.domain.readiness import BulkCriteria, evaluate_bulk, readiness_report

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from enricher.domain.model import EnrichedItem

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Enrich printer consumable supplier titles")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    enrich = subparsers.add_parser("enrich", help="Enrich one or more supplier titles")
    enrich.add_argument("titles", nargs="*", help="Raw supplier titles")
    enrich.add_argument(
        "--file",
        type=Path,
        help="Read titles from a file, one per line (blank lines are skipped)",
    )
    enrich.add_argument(
        "--no-persist",
        action="store_true",
        help="Do not store finished items in the database",
    )
    enrich.add_argument(
        "--summary",
        action="store_true",
        help="Append a readiness report and bulk approval decision to the output",
    )
    enrich.add_argument(
        "--min-score",
        type=float,
        default=BulkCriteria().min_score,
        help="Minimum readiness score for bulk approval (default: %(default)s)",
    )

    report = subparsers.add_parser("report", help="List stored items")
    report.add_argument(
        "--status",
        choices=[status.value for status in ItemStatus],
        help="Only list items with this status",
    )
    report.add_argument("--limit", type=int, help="Maximum number of items to list")

    return parser.parse_args(list(argv))


def _read_titles(args: argparse.Namespace) -> list[str]:
    titles = [title for title in args.titles if title.strip()]
    if args.file is not None:
        try:
            text = args.file.read_text(encoding="utf-8")
        except OSError as exc:
            raise ValueError(f"Cannot read {args.file}: {exc.strerror}") from exc
        titles.extend(line for line in text.splitlines() if line.strip())
    if not titles:
        raise ValueError("No titles given (pass TITLE arguments or --file)")
    return titles


def _summary_payload(items: Sequence[EnrichedItem], min_score: float) -> dict[str, object]:
    report = readiness_report(items)
    decision = evaluate_bulk(items, BulkCriteria(min_score=min_score))
    return {
        "readiness": {
            "total_items": report.total_items,
            "ready": report.ready,
            "needs_minor_fixes": report.needs_minor_fixes,
            "needs_major_work": report.needs_major_work,
            "blocked": report.blocked,
            "mean_score": round(report.mean_score, 4),
            "top_blocking_issues": [
                {"message": issue.message, "count": issue.count, "severity": issue.severity.value}
                for issue in report.top_blocking_issues
            ],
            "by_brand": {
                brand: {"total": stats.total, "ready": stats.ready, "mean_score": stats.mean_score}
                for brand, stats in sorted(report.by_brand.items())
            },
        },
        "bulk": {
            "approved": [str(item_id) for item_id in decision.approved],
            "rejected": [
                {"id": str(rejection.item_id), "reasons": list(rejection.reasons)}
                for rejection in decision.rejected
            ],
            "approval_rate": round(decision.summary.approval_rate, 4),
        },
    }


def _emit(payload: object) -> None:
    sys.stdout.write(json.dumps(payload, ensure_ascii=False, indent=2, default=str))
    sys.stdout.write("\n")


def _run_enrich(args: argparse.Namespace) -> int:
    items = enrich_titles(_read_titles(args), persist=not args.no_persist)
    payload: dict[str, object] = {"items": [item.to_record() for item in items]}
    if args.summary:
        payload["summary"] = _summary_payload(items, args.min_score)
    _emit(payload)
    return EXIT_OK


def _run_report(args: argparse.Namespace) -> int:
    status = ItemStatus(args.status) if args.status else None
    stored, summary = list_stored_items(status=status, limit=args.limit)
    _emit(
        {
            "summary": {
                "total": summary.total,
                "by_status": summary.by_status,
                "mean_score": round(summary.mean_score, 4),
            },
            "items": [
                {
                    "id": str(item.id),
                    "input_raw": item.input_raw,
                    "status": item.status.value,
                    "overall_score": item.overall_score,
                    "updated_at": item.updated_at.isoformat() if item.updated_at else None,
                }
                for item in stored
            ],
        }
    )
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
    except SystemExit as exc:
        return EXIT_USAGE if exc.code else EXIT_OK
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "enrich":
            return _run_enrich(parsed_args)
        if parsed_args.command == "report":
            return _run_report(parsed_args)
        raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except (ValueError, ConfigurationError) as exc:
        log.error("%s", exc)  # noqa: TRY400
        return EXIT_USAGE
    except Exception:
        log.exception("Fatal error during enrichment")
        return EXIT_FAILURE


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(EXIT_OK)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    sys.exit(main())


if __name__ == "__main__":
    run()
