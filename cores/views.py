import logging

from rest_framework import generics

from assessments.permissions import IsPlatformAdmin
from .models import PlatformSetting, AuditLog
from .serializers import PlatformSettingSerializer, AuditLogSerializer

logger = logging.getLogger(__name__)


class PlatformSettingView(generics.RetrieveUpdateAPIView):
    """GET the platform defaults; PUT/PATCH change any subset of them."""
    permission_classes = [IsPlatformAdmin]
    serializer_class = PlatformSettingSerializer

    def get_object(self):
        return PlatformSetting.load()

    def put(self, request, *args, **kwargs):
        return self.partial_update(request, *args, **kwargs)

    def perform_update(self, serializer):
        setting = serializer.save()
        changed = ', '.join(f"{k}={v}" for k, v in sorted(serializer.validated_data.items()))
        AuditLog.record(self.request.user.id, AuditLog.Action.SETTINGS, setting, details=changed, request=self.request)
        logger.info(f"Platform settings changed by user {self.request.user.id}: {changed}")


class AuditLogListView(generics.ListAPIView):
    """Newest first. Filters: ?action=SUBMIT, ?actor=<user id>, ?target_model=TestAttempt."""
    permission_classes = [IsPlatformAdmin]
    serializer_class = AuditLogSerializer

    def get_queryset(self):
        queryset = AuditLog.objects.select_related('actor')
        params = self.request.query_params
        if params.get('action'):
            queryset = queryset.filter(action=params['action'].upper())
        if params.get('actor'):
            queryset = queryset.filter(actor_id=params['actor'])
        if params.get('target_model'):
            queryset = queryset.filter(target_model=params['target_model'])
        return queryset
