# exams/serializers.py
from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework import serializers

from .models import Module, Question, Option, Exam, ExamAssignment

User = get_user_model()

OPTION_LABELS = "ABCD"

# --- Helper Serializers ---

class OptionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Option
        fields = ['id', 'label', 'text', 'is_correct']
        read_only_fields = ['id']
        extra_kwargs = {'label': {'required': False}}


class CandidateOptionSerializer(serializers.ModelSerializer):
    """Options as shown to candidates: no correctness flag."""
    class Meta:
        model = Option
        fields = ['id', 'label', 'text']


class ModuleSerializer(serializers.ModelSerializer):
    total_questions = serializers.IntegerField(source='questions.count', read_only=True)

    class Meta:
        model = Module
        fields = ['id', 'name', 'description', 'is_active', 'total_questions']

# --- Question Serializers ---

class QuestionSerializer(serializers.ModelSerializer):
    options = OptionSerializer(many=True)
    module_name = serializers.CharField(source='module.name', read_only=True, default=None)

    class Meta:
        model = Question
        fields = [
            'id', 'module', 'module_name', 'text', 'category', 'difficulty',
            'points', 'is_active', 'options', 'created_at',
        ]
        read_only_fields = ['created_at']

    def validate_difficulty(self, value):
        return value.lower()

    def validate_options(self, value):
        if len(value) < 2:
            raise serializers.ValidationError("A question needs at least two options.")
        if len(value) > len(OPTION_LABELS):
            raise serializers.ValidationError(f"A question has at most {len(OPTION_LABELS)} options.")
        labels = []
        for i, opt in enumerate(value):
            label = opt.get('label') or (OPTION_LABELS[i] if i < len(OPTION_LABELS) else None)
            labels.append(label.upper() if label else None)
        if None in labels or len(set(labels)) != len(labels):
            raise serializers.ValidationError("Option labels must be present and unique.")
        correct = sum(1 for opt in value if opt.get('is_correct'))
        if correct != 1:
            raise serializers.ValidationError("Exactly one option must be marked correct.")
        for opt, label in zip(value, labels):
            opt['label'] = label
        return value

    @transaction.atomic
    def create(self, validated_data):
        options = validated_data.pop('options')
        question = Question.objects.create(**validated_data)
        Option.objects.bulk_create(Option(question=question, **opt) for opt in options)
        return question

    @transaction.atomic
    def update(self, instance, validated_data):
        options = validated_data.pop('options', None)
        instance = super().update(instance, validated_data)
        if options is not None:
            # Options are replaced wholesale; attempts keep their own snapshot
            instance.options.all().delete()
            Option.objects.bulk_create(Option(question=instance, **opt) for opt in options)
        return instance


class CandidateQuestionSerializer(serializers.ModelSerializer):
    options = CandidateOptionSerializer(many=True, read_only=True)

    class Meta:
        model = Question
        fields = ['id', 'text', 'category', 'difficulty', 'points', 'options']

# --- Exam Serializers ---

class ExamSerializer(serializers.ModelSerializer):
    # Frontend calls it 'passing_score'
    passing_score = serializers.IntegerField(source='pass_mark_percentage', min_value=0, max_value=100, required=False)
    question_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False)
    created_by = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        model = Exam
        fields = [
            'id', 'title', 'description', 'module', 'question_ids', 'total_questions',
            'duration_minutes', 'passing_score', 'is_active', 'created_by', 'created_at',
        ]
        read_only_fields = ['created_at']

    def validate_duration_minutes(self, value):
        if value < 1:
            raise serializers.ValidationError("Duration must be at least one minute.")
        return value

    def validate_question_ids(self, value):
        if len(set(value)) != len(value):
            raise serializers.ValidationError("Question ids must be unique.")
        found = set(Question.objects.filter(id__in=value).values_list('id', flat=True))
        missing = [qid for qid in value if qid not in found]
        if missing:
            raise serializers.ValidationError(f"Unknown question ids: {missing}")
        return value

    def validate(self, attrs):
        question_ids = attrs.get('question_ids')
        if question_ids:
            attrs['total_questions'] = len(question_ids)
        return attrs


class ExamListSerializer(serializers.ModelSerializer):
    module = serializers.CharField(source='module.name', default=None)
    passing_score = serializers.IntegerField(source='pass_mark_percentage')

    class Meta:
        model = Exam
        fields = ['id', 'title', 'module', 'total_questions', 'duration_minutes', 'passing_score']


class ExamAssignmentSerializer(serializers.ModelSerializer):
    user = serializers.PrimaryKeyRelatedField(queryset=User.objects.all())
    exam = serializers.PrimaryKeyRelatedField(queryset=Exam.objects.all())
    exam_title = serializers.CharField(source='exam.title', read_only=True)
    user_email = serializers.CharField(source='user.email', read_only=True)

    class Meta:
        model = ExamAssignment
        fields = ['id', 'user', 'user_email', 'exam', 'exam_title', 'available_from', 'available_until', 'is_completed', 'assigned_at']
        read_only_fields = ['is_completed', 'assigned_at']

    def validate(self, attrs):
        start, end = attrs.get('available_from'), attrs.get('available_until')
        if start and end and end <= start:
            raise serializers.ValidationError("available_until must be after available_from.")
        return attrs
