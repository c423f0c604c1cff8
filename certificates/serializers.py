from rest_framework import serializers
from .models import Certificate

class CertificateSerializer(serializers.ModelSerializer):
    # Fetch details from the related attempt to show readable names
    candidate_name = serializers.CharField(source='attempt.user.get_full_name', read_only=True)
    candidate_email = serializers.CharField(source='attempt.user.email', read_only=True)
    exam_title = serializers.CharField(source='attempt.exam.title', read_only=True, default=None)
    score = serializers.IntegerField(source='attempt.score', read_only=True)
    completed_at = serializers.DateTimeField(source='attempt.completed_at', read_only=True)

    class Meta:
        model = Certificate
        fields = [
            'id',
            'certificate_id',
            'candidate_name',
            'candidate_email',
            'exam_title',
            'score',
            'completed_at',
            'issued_at',
            'file_url',
            'verification_url'
        ]


class CertificateVerificationSerializer(serializers.ModelSerializer):
    """Public view: enough to confirm a certificate, nothing more."""
    candidate_name = serializers.CharField(source='attempt.user.get_full_name', read_only=True)
    exam_title = serializers.CharField(source='attempt.exam.title', read_only=True, default=None)

    class Meta:
        model = Certificate
        fields = ['certificate_id', 'candidate_name', 'exam_title', 'issued_at']


class IssueCertificateSerializer(serializers.Serializer):
    attempt_id = serializers.IntegerField(help_text="Primary key of a finalised test attempt")
    file_url = serializers.URLField(required=False, allow_null=True)
