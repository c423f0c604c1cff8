"""Builds the frozen question set an attempt is taken and graded against."""
import random

from rest_framework import serializers


def select_questions(questions, count, rng=None):
    """Uniform random sample of ``count`` questions (all of them if fewer)."""
    rng = rng or random.SystemRandom()
    questions = list(questions)
    if count is None or count >= len(questions):
        picked = questions[:]
        rng.shuffle(picked)
        return picked
    return rng.sample(questions, count)


def snapshot_question(question):
    return {
        'id': question.id,
        'text': question.text,
        'category': question.category,
        'difficulty': question.difficulty,
        'points': question.points,
        'options': [
            {'id': opt.id, 'label': opt.label, 'text': opt.text, 'is_correct': opt.is_correct}
            for opt in question.options.all()
        ],
    }


def build_snapshot(questions):
    return [snapshot_question(q) for q in questions]


def public_snapshot(snapshot):
    """The snapshot as shown while the test is running: no correctness flags."""
    return [
        {
            **{k: v for k, v in q.items() if k != 'options'},
            'options': [{k: v for k, v in opt.items() if k != 'is_correct'} for opt in q['options']],
        }
        for q in snapshot
    ]


# --- Validation of client-held snapshots ---

class SnapshotOptionSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    label = serializers.CharField(max_length=2)
    text = serializers.CharField()
    is_correct = serializers.BooleanField()


class SnapshotQuestionSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    text = serializers.CharField()
    category = serializers.CharField(allow_blank=True)
    difficulty = serializers.ChoiceField(choices=['easy', 'medium', 'hard'])
    points = serializers.IntegerField(min_value=0, default=1)
    options = SnapshotOptionSerializer(many=True)


def validate_snapshot(data):
    """Rejects a malformed snapshot before it can be stored or graded."""
    serializer = SnapshotQuestionSerializer(data=data, many=True)
    serializer.is_valid(raise_exception=True)
    ids = [q['id'] for q in serializer.validated_data]
    if len(set(ids)) != len(ids):
        raise serializers.ValidationError({'questions_data': "Duplicate question ids."})
    return [dict(q, options=[dict(o) for o in q['options']]) for q in serializer.validated_data]


def validate_answers(snapshot, answers):
    """
    Normalises an answers payload to ``{str(question_id): option_id}``.

    Blank selections are dropped. Unknown question ids or options that do
    not belong to their question raise ValidationError.
    """
    if answers is None:
        return {}
    if not isinstance(answers, dict):
        raise serializers.ValidationError({'answers': "Expected a mapping of question id to option id."})

    options_by_question = {str(q['id']): {str(o['id']): o['id'] for o in q['options']} for q in snapshot}
    cleaned = {}
    errors = {}
    for question_id, option_id in answers.items():
        question_id = str(question_id)
        if question_id not in options_by_question:
            errors[question_id] = "Question is not part of this attempt."
            continue
        if option_id in (None, ""):
            continue
        if isinstance(option_id, bool) or str(option_id) not in options_by_question[question_id]:
            errors[question_id] = "Option does not belong to this question."
            continue
        cleaned[question_id] = options_by_question[question_id][str(option_id)]

    if errors:
        raise serializers.ValidationError({'answers': errors})
    return cleaned
