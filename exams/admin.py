from django.contrib import admin

from .models import Module, Question, Option, Exam, ExamAssignment


class OptionInline(admin.TabularInline):
    model = Option
    extra = 0


@admin.register(Question)
class QuestionAdmin(admin.ModelAdmin):
    list_display = ('__str__', 'module', 'category', 'difficulty', 'is_active')
    list_filter = ('difficulty', 'is_active', 'module')
    search_fields = ('text', 'category')
    inlines = [OptionInline]


admin.site.register(Module)
admin.site.register(Exam)
admin.site.register(ExamAssignment)
