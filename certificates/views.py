# certificates/views.py
from django.shortcuts import get_object_or_404
from rest_framework import generics, permissions, status
from rest_framework.response import Response

from assessments.models import TestAttempt
from assessments.permissions import IsPlatformAdmin
from users.identity import Identity
from .models import Certificate
from .serializers import CertificateSerializer, CertificateVerificationSerializer, IssueCertificateSerializer
from .services import issue_certificate


class StudentCertificateListView(generics.ListAPIView):
    """Certificates owned by the logged-in candidate; admins see every certificate."""
    permission_classes = [permissions.IsAuthenticated]
    serializer_class = CertificateSerializer

    def get_queryset(self):
        queryset = Certificate.objects.select_related('attempt__user', 'attempt__exam').order_by('-issued_at')
        if Identity.from_request(self.request).is_admin:
            return queryset
        return queryset.filter(attempt__user=self.request.user)


class CertificateInventoryView(generics.ListCreateAPIView):
    permission_classes = [IsPlatformAdmin]
    serializer_class = CertificateSerializer
    queryset = Certificate.objects.select_related('attempt__user', 'attempt__exam').order_by('-issued_at')

    def create(self, request, *args, **kwargs):
        payload = IssueCertificateSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        attempt = get_object_or_404(TestAttempt, pk=payload.validated_data['attempt_id'])
        certificate, created = issue_certificate(
            Identity.from_request(request), attempt, file_url=payload.validated_data.get('file_url'),
        )
        return Response(
            CertificateSerializer(certificate).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class CertificateVerifyView(generics.RetrieveAPIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []
    serializer_class = CertificateVerificationSerializer
    lookup_field = 'certificate_id'
    queryset = Certificate.objects.select_related('attempt__user', 'attempt__exam')
