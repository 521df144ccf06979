#!/usr/bin/env python
"""
Score an answers file against the default rubric, offline.

The file holds either a flat {question_id: value} object or an evaluation
export with an "answers" key. Values are normalized answers (boolean 0/100,
likert 20..100). Nothing is written to the document store.

Usage:
    python -m project_eval.scripts.score_answers answers.json
    python -m project_eval.scripts.score_answers answers.json --json
    python -m project_eval.scripts.score_answers answers.json --strict
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from project_eval.core.exceptions import EvaluationException
from project_eval.scoring.answer_capture import AnswerSheet
from project_eval.scoring.criteria import build_default_rubric
from project_eval.scoring.evaluation_calculator import EvaluationScoreCalculator
from project_eval.scoring.presentation import score_band

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def load_answers(path: Path) -> Dict:
    """Read answers from a flat map or an {"answers": {...}} export."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict) and isinstance(data.get("answers"), dict):
        data = data["answers"]
    if not isinstance(data, dict):
        raise ValueError("answers file must contain a JSON object")
    return data


def score_file(path: Path, strict: bool = False) -> Dict:
    """
    Validate and score one answers file.

    Raises:
        EvaluationException: unknown question, invalid value, or (strict) incomplete
        ValueError: file is not a JSON object
    """
    rubric = build_default_rubric()
    sheet = AnswerSheet(rubric, load_answers(path))
    if strict:
        sheet.ensure_complete()

    scores = EvaluationScoreCalculator(rubric).calculate(sheet.answers).as_dict()
    return {
        "rubric_version": rubric.version,
        "answered": len(sheet),
        "question_count": rubric.question_count,
        "complete": sheet.is_complete(),
        "missing_questions": sheet.missing_questions(),
        "dimension_scores": scores["dimension_scores"],
        "total_score": scores["total_score"],
        "band": score_band(scores["total_score"]).value,
    }


def print_report(result: Dict) -> None:
    rubric = build_default_rubric()
    print("=" * 60)
    print(f"  Answered: {result['answered']}/{result['question_count']}"
          f"  (rubric {result['rubric_version']})")
    print("=" * 60)
    for dimension in rubric.dimensions:
        score = result["dimension_scores"][dimension.id]
        print(f"  {dimension.name:<40} {score:>6.1f}")
    print("-" * 60)
    print(f"  {'TOTAL':<40} {result['total_score']:>6.1f}  [{result['band']}]")
    if not result["complete"]:
        print("")
        print("  Unanswered questions count as 0:")
        for dim_id, missing in result["missing_questions"].items():
            print(f"    {dim_id}: {', '.join(missing)}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Score an evaluation answers file")
    parser.add_argument("path", type=Path, help="JSON file with answers")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail unless every question of every dimension is answered",
    )
    args = parser.parse_args(argv)

    try:
        result = score_file(args.path, strict=args.strict)
    except (OSError, ValueError) as e:
        logger.error(f"Cannot read {args.path}: {e}")
        return 1
    except EvaluationException as e:
        logger.error(str(e))
        return 1

    if args.json:
        print(json.dumps(result, indent=2, ensure_ascii=False))
    else:
        print_report(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
