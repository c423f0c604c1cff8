from django.contrib import admin

from .models import OngoingAttempt, TestAttempt


@admin.register(OngoingAttempt)
class OngoingAttemptAdmin(admin.ModelAdmin):
    list_display = ('user', 'exam', 'test_started', 'time_left', 'updated_at')
    readonly_fields = ('questions_data',)


@admin.register(TestAttempt)
class TestAttemptAdmin(admin.ModelAdmin):
    list_display = ('user', 'exam', 'score', 'passed', 'auto_submitted', 'completed_at')
    list_filter = ('passed', 'auto_submitted')
    readonly_fields = ('questions_data', 'answers_data')
