from django.urls import path
from .views import OngoingAttemptView, TestAttemptListCreateView, TestAttemptDetailView, AdminResultsView

urlpatterns = [
    # --- Student Test Flow ---
    path('tests/ongoing/', OngoingAttemptView.as_view(), name='ongoing-test'),
    path('tests/attempts/', TestAttemptListCreateView.as_view(), name='test-attempts'),
    path('tests/attempts/<int:pk>/', TestAttemptDetailView.as_view(), name='test-attempt-detail'),

    # --- Admin Reporting ---
    path('admin/results/', AdminResultsView.as_view(), name='admin-results'),
]
