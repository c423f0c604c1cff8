from django.urls import path

from . import views

urlpatterns = [
    path('settings/', views.PlatformSettingView.as_view(), name='platform-settings'),
    path('audit-logs/', views.AuditLogListView.as_view(), name='audit-log-list'),
]
