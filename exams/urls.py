from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import (
    ModuleViewSet, QuestionViewSet, ExamViewSet, ExamAssignmentViewSet,
    QuestionBankView, ModuleQuestionsView, MyAssignmentsView,
)

router = DefaultRouter()
router.register(r'modules', ModuleViewSet, basename='modules')
router.register(r'questions', QuestionViewSet, basename='questions')
router.register(r'exams', ExamViewSet, basename='exams')
router.register(r'admin/assignments', ExamAssignmentViewSet, basename='assignments')

urlpatterns = [
    path('tests/questions/', QuestionBankView.as_view(), name='question-bank'),
    path('modules/<int:module_id>/questions/', ModuleQuestionsView.as_view(), name='module-questions'),
    path('assignments/', MyAssignmentsView.as_view(), name='my-assignments'),
    path('', include(router.urls)),
]
