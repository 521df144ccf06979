from enum import Enum

class QuestionType(str, Enum):
    BOOLEAN = "boolean"   # No / Yes -> 0 / 100
    LIKERT = "likert"     # 1-5 agreement scale -> 20..100

class EvaluationStatus(str, Enum):
    DRAFT = "draft"          # Answers being captured
    SCORED = "scored"        # Calculator produced scores
    PERSISTED = "persisted"  # Written to the document store
    RETRIEVED = "retrieved"  # Loaded back for display

class ScoreBand(str, Enum):
    EXCELLENT = "excellent"  # >= 80
    GOOD = "good"            # >= 60
    FAIR = "fair"            # >= 40
    POOR = "poor"


# Valid normalized answer values per question type
ANSWER_DOMAINS = {
    QuestionType.BOOLEAN: (0, 100),
    QuestionType.LIKERT: (20, 40, 60, 80, 100),
}
