import logging

from rest_framework import generics, viewsets, permissions, status, filters
from rest_framework.decorators import action
from rest_framework.parsers import MultiPartParser, FormParser, JSONParser
from rest_framework.response import Response
from rest_framework.views import APIView
from django.shortcuts import get_object_or_404

from assessments.permissions import IsPlatformAdmin, IsQuestionAuthor
from users.identity import Identity
from . import bank
from .importers import import_questions
from .models import Module, Question, Exam, ExamAssignment
from .serializers import (
    ModuleSerializer, QuestionSerializer, CandidateQuestionSerializer,
    ExamSerializer, ExamListSerializer, ExamAssignmentSerializer,
)

logger = logging.getLogger(__name__)


def question_serializer_for(identity):
    return QuestionSerializer if identity.is_elevated else CandidateQuestionSerializer


class ModuleViewSet(viewsets.ModelViewSet):
    queryset = Module.objects.all().order_by('name')
    serializer_class = ModuleSerializer

    def get_permissions(self):
        if self.action in ['list', 'retrieve']:
            return [permissions.IsAuthenticated()]
        return [IsQuestionAuthor()]


class QuestionViewSet(viewsets.ModelViewSet):
    """Question bank authoring. Candidates never reach this endpoint."""
    queryset = Question.objects.prefetch_related('options').select_related('module')
    serializer_class = QuestionSerializer
    permission_classes = [IsQuestionAuthor]
    parser_classes = (JSONParser, MultiPartParser, FormParser)

    filter_backends = [filters.SearchFilter]
    search_fields = ['text', 'category']

    def get_queryset(self):
        queryset = super().get_queryset()
        # Filter by module if provided ?module_id=1
        module_id = self.request.query_params.get('module_id')
        if module_id:
            queryset = queryset.filter(module_id=module_id)
        active = self.request.query_params.get('active')
        if active is not None:
            queryset = queryset.filter(is_active=active.lower() in ('1', 'true'))
        return queryset

    def perform_destroy(self, instance):
        # Soft delete: attempts in flight keep their own snapshot anyway
        instance.is_active = False
        instance.save(update_fields=['is_active'])

    @action(detail=False, methods=['post'], url_path='bulk-upload')
    def bulk_upload(self, request):
        """
        Upload questions via CSV.
        Expected CSV Header: question_text, category, difficulty, points, options, correct_answer
        """
        file_obj = request.FILES.get('file')
        if not file_obj:
            return Response({"error": "No file uploaded"}, status=status.HTTP_400_BAD_REQUEST)

        module = None
        module_id = request.data.get('module_id')
        if module_id:
            module = get_object_or_404(Module, id=module_id)

        try:
            result = import_questions(file_obj.read(), module=module)
        except UnicodeDecodeError:
            return Response({"error": "File must be UTF-8 encoded CSV"}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {"status": f"Successfully uploaded {result.created} questions", "created": result.created, "errors": result.errors},
            status=status.HTTP_201_CREATED if result.created else status.HTTP_400_BAD_REQUEST,
        )


class ExamViewSet(viewsets.ModelViewSet):
    queryset = Exam.objects.select_related('module').order_by('-created_at')

    filter_backends = [filters.SearchFilter]
    search_fields = ['title', 'module__name']

    def get_serializer_class(self):
        if self.action in ['list', 'retrieve'] and not Identity.from_request(self.request).is_elevated:
            return ExamListSerializer
        return ExamSerializer

    def get_permissions(self):
        if self.action in ['list', 'retrieve']:
            return [permissions.IsAuthenticated()]
        return [IsQuestionAuthor()]

    def get_queryset(self):
        queryset = super().get_queryset()
        if not Identity.from_request(self.request).is_elevated:
            queryset = queryset.filter(is_active=True)
        return queryset

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)

    @action(detail=True, methods=['post'], url_path='assign-questions')
    def assign_questions(self, request, pk=None):
        """
        Appends Question IDs to this exam's ordered list.
        Payload: { "question_ids": [1, 2, 3] }
        """
        exam = self.get_object()
        serializer = ExamSerializer(exam, data={'question_ids': exam.question_ids + request.data.get('question_ids', [])}, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({"status": f"{exam.title} now has {exam.total_questions} questions", "question_ids": exam.question_ids})

    @action(detail=True, methods=['post'], url_path='remove-questions')
    def remove_questions(self, request, pk=None):
        """Removes questions from the exam; they stay in the bank."""
        exam = self.get_object()
        to_remove = set(request.data.get('question_ids', []))
        exam.question_ids = [qid for qid in exam.question_ids if qid not in to_remove]
        exam.total_questions = len(exam.question_ids) or exam.total_questions
        exam.save(update_fields=['question_ids', 'total_questions'])
        return Response({"status": "Questions returned to bank", "question_ids": exam.question_ids})


class QuestionBankView(APIView):
    """
    GET: active questions (admins and master practitioners also see inactive ones).
    POST: create a question, authors only.
    """

    def get_permissions(self):
        if self.request.method == 'POST':
            return [IsQuestionAuthor()]
        return [permissions.IsAuthenticated()]

    def get(self, request):
        identity = Identity.from_request(request)
        questions = bank.get_questions(identity)
        return Response(question_serializer_for(identity)(questions, many=True).data)

    def post(self, request):
        serializer = QuestionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        question = serializer.save()
        logger.info(f"Question {question.id} created by user {request.user.id}")
        return Response(QuestionSerializer(question).data, status=status.HTTP_201_CREATED)


class ModuleQuestionsView(APIView):
    def get(self, request, module_id):
        get_object_or_404(Module, id=module_id)
        identity = Identity.from_request(request)
        questions = bank.get_questions(identity, module_id=module_id)
        return Response(question_serializer_for(identity)(questions, many=True).data)


class ExamAssignmentViewSet(viewsets.ModelViewSet):
    queryset = ExamAssignment.objects.select_related('user', 'exam')
    serializer_class = ExamAssignmentSerializer
    permission_classes = [IsPlatformAdmin]

    def get_queryset(self):
        queryset = super().get_queryset()
        user_id = self.request.query_params.get('user_id')
        if user_id:
            queryset = queryset.filter(user_id=user_id)
        return queryset


class MyAssignmentsView(generics.ListAPIView):
    """Exams scheduled for the logged-in candidate."""
    serializer_class = ExamAssignmentSerializer

    def get_queryset(self):
        return ExamAssignment.objects.filter(user=self.request.user).select_related('exam')
