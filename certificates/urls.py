from django.urls import path
from .views import StudentCertificateListView, CertificateInventoryView, CertificateVerifyView

urlpatterns = [
    path('certificates/', StudentCertificateListView.as_view(), name='student-certificates'),
    path('certificates/verify/<str:certificate_id>/', CertificateVerifyView.as_view(), name='verify-certificate'),
    path('admin/certificates/', CertificateInventoryView.as_view(), name='admin-certificates'),
]
