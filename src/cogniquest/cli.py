"""
Module: cli

Purpose:
    Command-line entry point.

    cogniquest questions [--bank PATH]
    cogniquest score --answers PATH [--date YYYY-MM-DD] [--region NAME]
                     [--no-high-school] [--json-out PATH] [--pdf-out PATH]

Key Functions:
    - build_parser(): argparse parser
    - main(): Run a subcommand, return the exit code

Dependencies:
    - argparse (std)
    - exam.loading, exam.scoring, exam.output
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional, Sequence

from cogniquest import __version__
from cogniquest.core.models import Question
from cogniquest.core.schemas.validator import ValidationError
from cogniquest.core.utils.serialization import load_answers_json
from cogniquest.exam.collaborators import StaticRegionResolver
from cogniquest.exam.loading import LoaderError, load_questions
from cogniquest.exam.output import ReportError, build_report, render_report_pdf, write_report_json
from cogniquest.exam.scoring import score_exam

logger = logging.getLogger(__name__)


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date {value!r} (expected YYYY-MM-DD)") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cogniquest",
        description="Cognitive screening exam engine.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--bank", type=Path, default=None, help="Question bank JSON (default: packaged bank)")
    parser.add_argument("--strict", action="store_true", help="Validate the bank against the JSON schema")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("questions", help="List the questions in the bank")

    score = sub.add_parser("score", help="Score a saved answers file")
    score.add_argument("--answers", type=Path, required=True, help="Answers JSON file")
    score.add_argument("--date", type=_iso_date, default=None, help="Exam date (default: today)")
    score.add_argument("--region", type=str, default=None, help="Region name or abbreviation, e.g. VA")
    score.add_argument(
        "--no-high-school",
        dest="has_high_school_education",
        action="store_false",
        help="Use the cut lines for subjects without high-school education",
    )
    score.add_argument("--json-out", type=Path, default=None, help="Write the report as JSON")
    score.add_argument("--pdf-out", type=Path, default=None, help="Write the report as PDF")
    return parser


def _print_questions(questions: List[Question]) -> None:
    for q in questions:
        print(f"Q{q.id:<3} {q.type.value:<24} {q.max_points:>2} pts  {q.headline}")
    print(f"{len(questions)} questions, {sum(q.max_points for q in questions)} points")


def _run_score(args: argparse.Namespace, questions: List[Question]) -> int:
    answers = load_answers_json(args.answers)
    region = StaticRegionResolver(args.region).resolve_region()
    today = args.date or date.today()

    result = score_exam(
        answers,
        questions,
        has_high_school_education=args.has_high_school_education,
        region=region,
        today=today,
    )

    for q in questions:
        mark = "unscored" if result.is_unscored(q.id) else f"{result.points_for(q.id)}/{q.max_points}"
        print(f"Q{q.id:<3} {mark:>9}  {q.headline}")
    print(f"Total: {result.total}/{result.max_total} - {result.interpretation.label}")

    if args.json_out:
        report = build_report(
            questions,
            answers,
            result,
            has_high_school_education=args.has_high_school_education,
        )
        write_report_json(report, args.json_out)
    if args.pdf_out:
        render_report_pdf(
            questions,
            answers,
            result,
            args.pdf_out,
            has_high_school_education=args.has_high_school_education,
        )
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        questions = load_questions(args.bank, strict=args.strict)
        if args.command == "questions":
            _print_questions(questions)
            return 0
        return _run_score(args, questions)
    except (LoaderError, ValidationError, ReportError) as e:
        logger.error(str(e))
        return 1
    except FileNotFoundError as e:
        logger.error(f"File not found: {e.filename}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
