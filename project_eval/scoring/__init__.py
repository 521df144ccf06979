"""
scoring/ - Evaluation Scoring Engine

Modules:
    utils.py                  - Decimal utilities (rounding, clamp, mean)
    criteria.py               - Default rubric data
    answer_capture.py         - Answer validation, AnswerSheet, EvaluationDraft
    evaluation_calculator.py  - Per-dimension and total score calculator
    presentation.py           - Breakdown, radar series, score bands, summaries
"""
