"""Tests for question selection and snapshot handling."""
import random

import pytest
from rest_framework.exceptions import ValidationError

from assessments.assembler import (
    select_questions, build_snapshot, public_snapshot, validate_snapshot, validate_answers,
)


class TestSelectQuestions:

    def test_samples_requested_count_without_duplicates(self):
        picked = select_questions(range(50), 30, rng=random.Random(1))
        assert len(picked) == 30
        assert len(set(picked)) == 30

    def test_small_pool_returns_everything(self):
        picked = select_questions([1, 2, 3], 30, rng=random.Random(1))
        assert sorted(picked) == [1, 2, 3]

    def test_count_none_returns_everything(self):
        assert sorted(select_questions([3, 1, 2], None)) == [1, 2, 3]

    def test_seeded_rng_is_reproducible(self):
        assert select_questions(range(20), 5, rng=random.Random(7)) == select_questions(range(20), 5, rng=random.Random(7))

    def test_input_not_mutated(self):
        pool = [1, 2, 3, 4]
        select_questions(pool, None, rng=random.Random(3))
        assert pool == [1, 2, 3, 4]


@pytest.mark.django_db
class TestSnapshot:

    def test_snapshot_carries_options_and_correctness(self, make_question):
        question = make_question(correct='C')
        snapshot = build_snapshot([question])
        assert snapshot[0]['id'] == question.id
        assert [o['label'] for o in snapshot[0]['options']] == ['A', 'B', 'C', 'D']
        assert [o['is_correct'] for o in snapshot[0]['options']] == [False, False, True, False]

    def test_snapshot_is_frozen_against_bank_edits(self, make_question):
        question = make_question(text='Before?')
        snapshot = build_snapshot([question])
        question.text = 'After?'
        question.save()
        question.options.all().delete()
        assert snapshot[0]['text'] == 'Before?'
        assert len(snapshot[0]['options']) == 4

    def test_public_snapshot_hides_correct_flag(self, make_question):
        snapshot = build_snapshot([make_question()])
        public = public_snapshot(snapshot)
        assert all('is_correct' not in o for o in public[0]['options'])
        assert 'is_correct' in snapshot[0]['options'][0]

    def test_validate_snapshot_rejects_duplicates(self, make_question):
        snapshot = build_snapshot([make_question()])
        with pytest.raises(ValidationError):
            validate_snapshot(snapshot + snapshot)

    def test_validate_snapshot_rejects_missing_options(self):
        with pytest.raises(ValidationError):
            validate_snapshot([{'id': 1, 'text': 'Q', 'category': '', 'difficulty': 'easy'}])


SNAPSHOT = [
    {'id': 1, 'options': [{'id': 11}, {'id': 12}]},
    {'id': 2, 'options': [{'id': 21}, {'id': 22}]},
]


class TestValidateAnswers:

    def test_normalises_keys_and_values(self):
        assert validate_answers(SNAPSHOT, {1: '12', '2': 21}) == {'1': 12, '2': 21}

    def test_drops_blank_selections(self):
        assert validate_answers(SNAPSHOT, {'1': None, '2': ''}) == {}

    def test_none_is_empty(self):
        assert validate_answers(SNAPSHOT, None) == {}

    def test_unknown_question_rejected(self):
        with pytest.raises(ValidationError):
            validate_answers(SNAPSHOT, {'3': 11})

    def test_option_from_other_question_rejected(self):
        with pytest.raises(ValidationError):
            validate_answers(SNAPSHOT, {'1': 21})

    def test_boolean_rejected(self):
        with pytest.raises(ValidationError):
            validate_answers(SNAPSHOT, {'1': True})

    def test_non_mapping_rejected(self):
        with pytest.raises(ValidationError):
            validate_answers(SNAPSHOT, [11, 21])
