# exams/models.py
from django.conf import settings
from django.db import models
from django.utils import timezone


class Module(models.Model):
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)

    def __str__(self):
        return self.name


class Question(models.Model):
    class Difficulty(models.TextChoices):
        EASY = "easy", "Easy"
        MEDIUM = "medium", "Medium"
        HARD = "hard", "Hard"

    # Nullable module: questions can sit in the general bank
    module = models.ForeignKey(Module, related_name='questions', on_delete=models.SET_NULL, null=True, blank=True)

    text = models.TextField()
    category = models.CharField(max_length=100, blank=True, default="General")
    difficulty = models.CharField(max_length=20, choices=Difficulty.choices, default=Difficulty.MEDIUM)
    points = models.PositiveIntegerField(default=1)

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.text[:50]}..."

    @property
    def correct_option(self):
        for option in self.options.all():
            if option.is_correct:
                return option
        return None


class Option(models.Model):
    question = models.ForeignKey(Question, related_name='options', on_delete=models.CASCADE)
    label = models.CharField(max_length=2)  # "A".."D"
    text = models.CharField(max_length=255)
    is_correct = models.BooleanField(default=False)

    class Meta:
        ordering = ['label', 'id']

    def __str__(self):
        return f"{self.label}. {self.text}"


class Exam(models.Model):
    """A configured test: a fixed, ordered question list plus timing and pass mark."""
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    module = models.ForeignKey(Module, on_delete=models.SET_NULL, null=True, blank=True, related_name='exams')

    # Ordered question ids; empty means "draw total_questions from the active bank"
    question_ids = models.JSONField(default=list, blank=True)
    total_questions = models.PositiveIntegerField(default=30)

    duration_minutes = models.PositiveIntegerField(default=60)
    pass_mark_percentage = models.PositiveIntegerField(default=70)

    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='exams_created')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.title


class ExamAssignment(models.Model):
    """An exam scheduled for one candidate, optionally inside a time window."""
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='exam_assignments')
    exam = models.ForeignKey(Exam, on_delete=models.CASCADE, related_name='assignments')
    available_from = models.DateTimeField(null=True, blank=True)
    available_until = models.DateTimeField(null=True, blank=True)
    is_completed = models.BooleanField(default=False)
    assigned_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-assigned_at']

    def __str__(self):
        return f"{self.user} - {self.exam.title}"

    def is_available(self, now=None):
        now = now or timezone.now()
        if self.available_from and now < self.available_from:
            return False
        if self.available_until and now > self.available_until:
            return False
        return True
