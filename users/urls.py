from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView
from .views import (
    RegisterView,
    CustomLoginView,
    AdminStatsView,
    CandidateListView,
    GrantRetakeView,
    UserViewSet,
    UserProfileView
)

router = DefaultRouter()
router.register(r'admin/users', UserViewSet, basename='users')

urlpatterns = [
    # --- Authentication ---
    path('auth/register/', RegisterView.as_view(), name='register'),
    path('auth/login/', CustomLoginView.as_view(), name='login'),
    path('auth/refresh/', TokenRefreshView.as_view(), name='token-refresh'),

    # --- Admin Dashboard ---
    path('admin/stats/', AdminStatsView.as_view(), name='admin-stats'),
    path('admin/candidates/', CandidateListView.as_view(), name='admin-candidates'),
    path('admin/users/<int:user_id>/retake/', GrantRetakeView.as_view(), name='grant-retake'),

    path('profile/', UserProfileView.as_view(), name='user-profile'),
    path('', include(router.urls)),
]
