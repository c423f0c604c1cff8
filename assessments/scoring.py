"""
Grading of a frozen question snapshot against an answers map.

Nothing in here touches the database: the same snapshot and answers always
produce the same result.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class ScoreResult:
    score: int
    correct_count: int
    total_questions: int
    passed: bool


def percentage(correct, total):
    """Whole-number percentage, halves rounded up. Zero questions score 0."""
    if total <= 0:
        return 0
    return (200 * correct + total) // (2 * total)


def is_correct(question, selected_option_id):
    """
    True when the selected option exists on the question and is flagged
    correct. Unanswered or unknown selections are simply wrong.
    """
    if selected_option_id in (None, ""):
        return False
    for option in question.get('options', []):
        if str(option['id']) == str(selected_option_id):
            return bool(option.get('is_correct'))
    return False


def score_attempt(questions, answers, pass_mark):
    answers = answers or {}
    total = len(questions)
    correct = sum(1 for q in questions if is_correct(q, answers.get(str(q['id']))))
    score = percentage(correct, total)
    passed = total > 0 and score >= pass_mark
    return ScoreResult(score=score, correct_count=correct, total_questions=total, passed=passed)
