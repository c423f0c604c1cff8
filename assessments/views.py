import logging

from rest_framework import generics, permissions, status, views
from rest_framework.response import Response
from django.shortcuts import get_object_or_404

from cores.exceptions import AttemptNotFound
from users.identity import Identity
from . import services
from .models import TestAttempt
from .permissions import HasPaidMembership, IsPlatformAdmin
from .serializers import (
    StartAttemptSerializer, OngoingAttemptSerializer, OngoingAttemptUpdateSerializer,
    SubmitAttemptSerializer, TestAttemptSerializer, TestAttemptDetailSerializer, AdminResultSerializer,
)
from .store import AttemptSessionStore

logger = logging.getLogger(__name__)


# --- STUDENT VIEWS ---

class OngoingAttemptView(views.APIView):
    """
    The candidate's in-progress test.

    GET returns null when there is nothing to resume. POST starts a new test
    (409 with the ongoing id if one exists). PATCH persists progress. DELETE
    abandons it.
    """
    store_class = AttemptSessionStore

    def get_permissions(self):
        if self.request.method == 'POST':
            return [permissions.IsAuthenticated(), HasPaidMembership()]
        return [permissions.IsAuthenticated()]

    def get_store(self):
        return self.store_class()

    def get(self, request):
        attempt = self.get_store().get(Identity.from_request(request))
        if attempt is None:
            return Response(None)
        return Response(OngoingAttemptSerializer(attempt).data)

    def post(self, request):
        payload = StartAttemptSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        attempt = services.start_attempt(
            Identity.from_request(request),
            exam_id=payload.validated_data.get('exam_id'),
            question_count=payload.validated_data.get('question_count'),
            store=self.get_store(),
        )
        return Response(OngoingAttemptSerializer(attempt).data, status=status.HTTP_201_CREATED)

    def patch(self, request):
        payload = OngoingAttemptUpdateSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = payload.validated_data
        attempt = self.get_store().update(
            Identity.from_request(request),
            answers=data.get('answers_data'),
            current_question=data.get('current_question'),
            time_left=data.get('time_left'),
            test_started=data.get('test_started'),
            expected_version=data.get('version'),
        )
        return Response(OngoingAttemptSerializer(attempt).data)

    def delete(self, request):
        if not self.get_store().delete(Identity.from_request(request)):
            raise AttemptNotFound()
        return Response(status=status.HTTP_204_NO_CONTENT)


class TestAttemptListCreateView(generics.ListAPIView):
    """
    GET: the logged-in candidate's finalised attempts.
    POST: submit an ongoing attempt. 201 on first submission, 200 with the
    stored result when the same attempt id is submitted again.
    """
    serializer_class = TestAttemptSerializer

    def get_queryset(self):
        return TestAttempt.objects.filter(user=self.request.user).select_related('exam', 'certificate')

    def post(self, request):
        payload = SubmitAttemptSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        attempt, created = services.submit_attempt(
            Identity.from_request(request),
            payload.validated_data['attempt_id'],
            answers=payload.validated_data.get('answers'),
            auto_submitted=payload.validated_data['auto_submitted'],
        )
        return Response(
            TestAttemptDetailSerializer(attempt).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class TestAttemptDetailView(generics.RetrieveAPIView):
    """Allow student to retrieve one finalised attempt, with the questions."""
    serializer_class = TestAttemptDetailSerializer

    def get_object(self):
        return get_object_or_404(TestAttempt, pk=self.kwargs['pk'], user=self.request.user)


# --- ADMIN VIEWS ---

class AdminResultsView(generics.ListAPIView):
    """Every finalised attempt, newest first. Filters: ?passed=true|false, ?user_id=."""
    permission_classes = [IsPlatformAdmin]
    serializer_class = AdminResultSerializer

    def get_queryset(self):
        queryset = TestAttempt.objects.select_related('user', 'exam', 'certificate')
        passed = self.request.query_params.get('passed')
        if passed is not None:
            queryset = queryset.filter(passed=passed.lower() in ('1', 'true'))
        user_id = self.request.query_params.get('user_id')
        if user_id:
            queryset = queryset.filter(user_id=user_id)
        return queryset
