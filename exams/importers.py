"""
CSV import for the question bank.

Expected header: question_text, category, difficulty, points, options, correct_answer
``options`` is pipe-separated; ``correct_answer`` is either the option label
("B") or the option text.
"""
import csv
import io
import logging

from django.db import transaction

from .models import Question, Option

logger = logging.getLogger(__name__)

LABELS = "ABCD"


class ImportResult:
    def __init__(self):
        self.created = 0
        self.errors = []

    def __repr__(self):
        return f"<ImportResult created={self.created} errors={len(self.errors)}>"


def _build_options(row):
    raw_options = [opt.strip() for opt in (row.get('options') or '').split('|') if opt.strip()]
    if len(raw_options) < 2:
        raise ValueError("needs at least two options")
    if len(raw_options) > len(LABELS):
        raise ValueError(f"at most {len(LABELS)} options are supported")

    answer = (row.get('correct_answer') or '').strip().lower()
    options = []
    for label, text in zip(LABELS, raw_options):
        is_correct = answer == label.lower() or answer == text.lower()
        options.append({'label': label, 'text': text, 'is_correct': is_correct})

    if sum(opt['is_correct'] for opt in options) != 1:
        raise ValueError("correct_answer must match exactly one option")
    return options


def import_questions(stream, module=None):
    """Creates one Question per valid row; bad rows are reported, not fatal."""
    result = ImportResult()
    if isinstance(stream, bytes):
        stream = io.StringIO(stream.decode('utf-8-sig'))

    reader = csv.DictReader(stream)
    for line_no, row in enumerate(reader, start=2):
        text = (row.get('question_text') or '').strip()
        try:
            if not text:
                raise ValueError("question_text is empty")
            difficulty = (row.get('difficulty') or Question.Difficulty.MEDIUM).strip().lower()
            if difficulty not in Question.Difficulty.values:
                raise ValueError(f"unknown difficulty '{difficulty}'")
            options = _build_options(row)
            points = int(row.get('points') or 1)
            if points < 0:
                raise ValueError("points must be a positive integer")
        except ValueError as e:
            result.errors.append(f"line {line_no}: {e}")
            continue

        with transaction.atomic():
            question = Question.objects.create(
                module=module,
                text=text,
                category=(row.get('category') or 'General').strip(),
                difficulty=difficulty,
                points=points,
            )
            Option.objects.bulk_create(Option(question=question, **opt) for opt in options)
        result.created += 1

    logger.info(f"Imported {result.created} questions ({len(result.errors)} rows rejected)")
    return result
