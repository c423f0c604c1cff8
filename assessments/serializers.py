from rest_framework import serializers

from .assembler import public_snapshot
from .models import OngoingAttempt, TestAttempt


class StartAttemptSerializer(serializers.Serializer):
    exam_id = serializers.IntegerField(required=False, allow_null=True)
    question_count = serializers.IntegerField(required=False, allow_null=True, min_value=1)


class OngoingAttemptSerializer(serializers.ModelSerializer):
    """Heavy serializer for taking the test. Includes the questions, without answers."""
    questions = serializers.SerializerMethodField()
    exam_title = serializers.CharField(source='exam.title', read_only=True, default=None)
    total_questions = serializers.IntegerField(read_only=True)

    class Meta:
        model = OngoingAttempt
        fields = [
            'id', 'exam', 'exam_title', 'questions', 'total_questions', 'answers_data',
            'current_question', 'time_left', 'time_limit', 'pass_mark', 'test_started',
            'version', 'started_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_questions(self, obj):
        return public_snapshot(obj.questions_data)


class OngoingAttemptUpdateSerializer(serializers.Serializer):
    answers = serializers.DictField(child=serializers.JSONField(allow_null=True), required=False, source='answers_data')
    current_question = serializers.IntegerField(required=False, min_value=0)
    time_left = serializers.IntegerField(required=False, min_value=0)
    test_started = serializers.BooleanField(required=False)
    version = serializers.IntegerField(required=False, min_value=1)

    def validate(self, attrs):
        if 'questions_data' in self.initial_data or 'questions' in self.initial_data:
            raise serializers.ValidationError("The question set of an ongoing test cannot be changed.")
        return attrs


class SubmitAttemptSerializer(serializers.Serializer):
    attempt_id = serializers.UUIDField()
    answers = serializers.DictField(child=serializers.JSONField(allow_null=True), required=False, allow_null=True)
    auto_submitted = serializers.BooleanField(required=False, default=False)


class TestAttemptSerializer(serializers.ModelSerializer):
    """Lightweight serializer for lists / dashboard history."""
    exam_title = serializers.CharField(source='exam.title', read_only=True, default=None)
    certificate_id = serializers.CharField(source='certificate.certificate_id', read_only=True, default=None)

    class Meta:
        model = TestAttempt
        fields = [
            'id', 'attempt_id', 'exam', 'exam_title', 'score', 'correct_count', 'total_questions',
            'pass_mark', 'passed', 'auto_submitted', 'completed_at', 'certificate_id',
        ]
        read_only_fields = fields


class TestAttemptDetailSerializer(TestAttemptSerializer):
    """Post-test review: the frozen questions with the candidate's answers."""
    class Meta(TestAttemptSerializer.Meta):
        fields = TestAttemptSerializer.Meta.fields + ['questions_data', 'answers_data']
        read_only_fields = fields


class AdminResultSerializer(TestAttemptSerializer):
    candidate_email = serializers.CharField(source='user.email', read_only=True)
    candidate_name = serializers.CharField(source='user.get_full_name', read_only=True)

    class Meta(TestAttemptSerializer.Meta):
        fields = ['candidate_email', 'candidate_name'] + TestAttemptSerializer.Meta.fields
        read_only_fields = fields
