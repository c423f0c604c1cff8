from django.conf import settings
from django.core.cache import cache
from django.db import models

SETTINGS_CACHE_KEY = 'platform_settings'


class PlatformSetting(models.Model):
    """
    Site-wide defaults, stored as a single row (pk=1) and served from the cache.

    The test defaults apply to free draws from the bank; an Exam carries its
    own pass mark and duration.
    """
    site_name = models.CharField(max_length=100, default="CertifyPro")
    support_email = models.EmailField(default="support@certify.example.org")

    default_pass_mark = models.PositiveIntegerField(default=70, help_text="Pass mark percentage for tests without an exam configuration")
    default_exam_duration = models.PositiveIntegerField(default=60, help_text="Default duration in minutes")
    default_question_count = models.PositiveIntegerField(default=30, help_text="Questions drawn from the bank per test")

    certificate_signer_name = models.CharField(max_length=100, default="Director of Certification")
    certificate_signer_title = models.CharField(max_length=100, default="Registrar")

    def __str__(self):
        return f"Settings for {self.site_name}"

    def save(self, *args, **kwargs):
        self.pk = 1
        super().save(*args, **kwargs)
        cache.set(SETTINGS_CACHE_KEY, self)

    def delete(self, *args, **kwargs):
        # The row is permanent; a reset means saving the defaults again
        return 0, {}

    @classmethod
    def load(cls):
        setting = cache.get(SETTINGS_CACHE_KEY)
        if setting is None:
            setting, _ = cls.objects.get_or_create(pk=1)
            cache.set(SETTINGS_CACHE_KEY, setting)
        return setting


class AuditLog(models.Model):
    class Action(models.TextChoices):
        CREATE = 'CREATE', 'Create'
        UPDATE = 'UPDATE', 'Update'
        DELETE = 'DELETE', 'Delete'
        SUBMIT = 'SUBMIT', 'Test Submitted'
        CERTIFICATE = 'CERTIFICATE', 'Certificate Issued'
        RETAKE = 'RETAKE', 'Retake Granted'
        SETTINGS = 'SETTINGS', 'Settings Changed'

    actor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, related_name='audit_logs')
    action = models.CharField(max_length=20, choices=Action.choices)
    target_model = models.CharField(max_length=50, help_text="e.g., TestAttempt, User, Certificate")
    target_object_id = models.CharField(max_length=100, blank=True, null=True)
    details = models.TextField(blank=True, help_text="Description of changes")
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-timestamp']

    def __str__(self):
        return f"{self.get_action_display()} {self.target_model}#{self.target_object_id} by {self.actor_id}"

    @classmethod
    def record(cls, actor_id, action, target, details='', request=None):
        """One entry per privileged write; ``target`` is any saved model instance."""
        return cls.objects.create(
            actor_id=actor_id,
            action=action,
            target_model=type(target).__name__,
            target_object_id=str(target.pk),
            details=details,
            ip_address=request.META.get('REMOTE_ADDR') if request is not None else None,
        )
