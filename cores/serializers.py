from rest_framework import serializers

from .models import PlatformSetting, AuditLog


class PlatformSettingSerializer(serializers.ModelSerializer):
    default_pass_mark = serializers.IntegerField(min_value=0, max_value=100, required=False)
    default_exam_duration = serializers.IntegerField(min_value=1, required=False)
    default_question_count = serializers.IntegerField(min_value=1, required=False)

    class Meta:
        model = PlatformSetting
        fields = [
            'site_name', 'support_email', 'default_pass_mark', 'default_exam_duration',
            'default_question_count', 'certificate_signer_name', 'certificate_signer_title',
        ]


class AuditLogSerializer(serializers.ModelSerializer):
    actor_email = serializers.CharField(source='actor.email', read_only=True, default=None)
    action_display = serializers.CharField(source='get_action_display', read_only=True)

    class Meta:
        model = AuditLog
        fields = [
            'id', 'actor', 'actor_email', 'action', 'action_display', 'target_model',
            'target_object_id', 'details', 'ip_address', 'timestamp',
        ]
        read_only_fields = fields
