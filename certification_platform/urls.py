from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),

    path('api/', include('users.urls')),
    path('api/', include('exams.urls')),
    path('api/', include('assessments.urls')),
    path('api/', include('certificates.urls')),
    path('api/', include('cores.urls')),
]
