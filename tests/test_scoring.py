"""Tests for grading a frozen snapshot."""
import pytest

from assessments.scoring import percentage, is_correct, score_attempt


def make_snapshot(n, correct_option=1):
    """``n`` questions with options 1-4 (offset per question); option ``correct_option`` is right."""
    snapshot = []
    for i in range(n):
        base = i * 10
        snapshot.append({
            'id': 100 + i,
            'text': f'Q{i}',
            'options': [
                {'id': base + k, 'label': 'ABCD'[k - 1], 'text': str(k), 'is_correct': k == correct_option}
                for k in range(1, 5)
            ],
        })
    return snapshot


def right(snapshot, count):
    return {str(q['id']): q['options'][0]['id'] for q in snapshot[:count]}


class TestPercentage:

    def test_rounds_half_up(self):
        assert percentage(1, 8) == 13  # 12.5
        assert percentage(7, 8) == 88  # 87.5

    def test_rounds_down_below_half(self):
        assert percentage(1, 3) == 33
        assert percentage(2, 3) == 67

    def test_empty_set_scores_zero(self):
        assert percentage(0, 0) == 0

    def test_bounds(self):
        assert percentage(0, 30) == 0
        assert percentage(30, 30) == 100


class TestIsCorrect:

    def test_unknown_option_is_wrong(self):
        question = make_snapshot(1)[0]
        assert is_correct(question, 999) is False

    def test_blank_is_wrong(self):
        question = make_snapshot(1)[0]
        assert is_correct(question, None) is False
        assert is_correct(question, "") is False

    def test_matches_string_ids(self):
        question = make_snapshot(1)[0]
        assert is_correct(question, str(question['options'][0]['id'])) is True

    def test_two_correct_flags_accept_either(self):
        question = make_snapshot(1)[0]
        question['options'][1]['is_correct'] = True
        assert is_correct(question, question['options'][0]['id'])
        assert is_correct(question, question['options'][1]['id'])


class TestScoreAttempt:

    def test_seventy_percent_passes_at_seventy(self):
        snapshot = make_snapshot(10)
        result = score_attempt(snapshot, right(snapshot, 7), pass_mark=70)
        assert result.score == 70
        assert result.correct_count == 7
        assert result.total_questions == 10
        assert result.passed is True

    def test_one_below_threshold_fails(self):
        snapshot = make_snapshot(10)
        result = score_attempt(snapshot, right(snapshot, 6), pass_mark=70)
        assert result.score == 60
        assert result.passed is False

    def test_empty_answers_score_zero(self):
        result = score_attempt(make_snapshot(5), {}, pass_mark=70)
        assert result.score == 0
        assert result.correct_count == 0
        assert result.passed is False

    def test_answers_none(self):
        assert score_attempt(make_snapshot(3), None, pass_mark=0).correct_count == 0

    def test_no_questions_never_passes(self):
        result = score_attempt([], {}, pass_mark=0)
        assert result.score == 0
        assert result.passed is False

    def test_extra_answers_ignored(self):
        snapshot = make_snapshot(2)
        answers = dict(right(snapshot, 2), **{'999': 1})
        assert score_attempt(snapshot, answers, pass_mark=70).score == 100

    @pytest.mark.parametrize("correct,expected", [(0, 0), (15, 50), (21, 70), (30, 100)])
    def test_score_bounded_and_deterministic(self, correct, expected):
        snapshot = make_snapshot(30)
        answers = right(snapshot, correct)
        first = score_attempt(snapshot, answers, pass_mark=70)
        assert first == score_attempt(snapshot, answers, pass_mark=70)
        assert first.score == expected
        assert 0 <= first.score <= 100
