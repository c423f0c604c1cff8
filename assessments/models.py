# assessments/models.py
import uuid

from django.db import models
from django.conf import settings

from exams.models import Exam


class OngoingAttempt(models.Model):
    """
    The single in-progress test of a candidate. Survives reloads: every
    update overwrites this row, and resume reads it back as-is.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='ongoing_attempt')
    exam = models.ForeignKey(Exam, on_delete=models.SET_NULL, null=True, blank=True)

    # Frozen at assembly; never rewritten
    questions_data = models.JSONField(default=list)
    # question id (str) -> selected option id (int)
    answers_data = models.JSONField(default=dict, blank=True)

    current_question = models.PositiveIntegerField(default=0)
    time_left = models.PositiveIntegerField(help_text="Remaining seconds")
    time_limit = models.PositiveIntegerField(help_text="Configured limit in seconds")
    pass_mark = models.PositiveIntegerField()
    test_started = models.BooleanField(default=False)

    version = models.PositiveIntegerField(default=1)
    started_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.user} - ongoing ({self.time_left}s left)"

    @property
    def total_questions(self):
        return len(self.questions_data)


class TestAttempt(models.Model):
    """A finalised, scored attempt. One per ongoing attempt id."""
    attempt_id = models.UUIDField(unique=True, editable=False)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='test_attempts')
    exam = models.ForeignKey(Exam, on_delete=models.SET_NULL, null=True, blank=True)

    questions_data = models.JSONField(default=list)
    answers_data = models.JSONField(default=dict, blank=True)

    score = models.PositiveIntegerField()
    correct_count = models.PositiveIntegerField()
    total_questions = models.PositiveIntegerField()
    pass_mark = models.PositiveIntegerField()
    passed = models.BooleanField()
    auto_submitted = models.BooleanField(default=False)

    completed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-completed_at']

    def __str__(self):
        return f"{self.user} - {self.score}% ({'pass' if self.passed else 'fail'})"
