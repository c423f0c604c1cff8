from rest_framework import generics, permissions, viewsets
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenObtainPairView
from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404

from exams.models import Exam, Question
from assessments.models import OngoingAttempt, TestAttempt
from assessments.permissions import IsPlatformAdmin
from assessments import services
from certificates.models import Certificate
from cores.models import AuditLog
from .identity import Identity

from .serializers import (
    RegisterSerializer,
    CustomTokenObtainPairSerializer,
    CandidateListSerializer,
    UserSerializer,
    AdminUserSerializer,
)

User = get_user_model()


# --- User Management (CRUD for Admin) ---
class UserViewSet(viewsets.ModelViewSet):
    """
    Admin-only endpoint to manage all users.
    Every write is recorded in the audit log.
    """
    queryset = User.objects.select_related('profile').order_by('-date_joined')
    permission_classes = [IsPlatformAdmin]

    def get_serializer_class(self):
        if self.action == 'create':
            return RegisterSerializer
        return AdminUserSerializer

    def perform_create(self, serializer):
        user = serializer.save()
        AuditLog.record(
            self.request.user.id, 'CREATE', user,
            details=f"Created new user: {user.email} (Role: {user.role})",
            request=self.request,
        )

    def perform_update(self, serializer):
        user = serializer.save()
        AuditLog.record(
            self.request.user.id, 'UPDATE', user,
            details=f"Updated profile for: {user.email}",
            request=self.request,
        )

    def perform_destroy(self, instance):
        AuditLog.record(
            self.request.user.id, 'DELETE', instance,
            details=f"Deleted user account: {instance.email}",
            request=self.request,
        )
        instance.delete()


# --- Authentication ---
class RegisterView(generics.CreateAPIView):
    serializer_class = RegisterSerializer
    permission_classes = [permissions.AllowAny]
    authentication_classes = []


class CustomLoginView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer


class UserProfileView(generics.RetrieveUpdateAPIView):
    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self):
        return User.objects.select_related('profile').get(pk=self.request.user.pk)


# --- Admin Dashboard ---
class AdminStatsView(APIView):
    permission_classes = [IsPlatformAdmin]

    def get(self, request):
        attempts = TestAttempt.objects.all()
        stats = {
            "total_exams": Exam.objects.count(),
            "active_questions": Question.objects.filter(is_active=True).count(),
            "total_candidates": User.objects.filter(role=User.Role.CANDIDATE).count(),
            "tests_in_progress": OngoingAttempt.objects.count(),
            "tests_completed": attempts.count(),
            "tests_passed": attempts.filter(passed=True).count(),
            "issued_certificates": Certificate.objects.count(),
        }
        return Response(stats)


class CandidateListView(generics.ListAPIView):
    serializer_class = CandidateListSerializer
    permission_classes = [IsPlatformAdmin]

    def get_queryset(self):
        return User.objects.filter(role=User.Role.CANDIDATE).select_related('profile').order_by('-date_joined')


class GrantRetakeView(APIView):
    """Reopens testing for a candidate whose test is already completed."""
    permission_classes = [IsPlatformAdmin]

    def post(self, request, user_id):
        user = get_object_or_404(User, pk=user_id)
        services.grant_retake(Identity.from_request(request), user.pk)
        user.profile.refresh_from_db()
        return Response(UserSerializer(user).data)
