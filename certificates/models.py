# certificates/models.py
import uuid
from django.conf import settings
from django.db import models
from assessments.models import TestAttempt


def new_certificate_id():
    return uuid.uuid4().hex


class Certificate(models.Model):
    # Unique ID for public verification
    certificate_id = models.CharField(max_length=50, unique=True, default=new_certificate_id, editable=False)
    attempt = models.OneToOneField(TestAttempt, on_delete=models.CASCADE, related_name='certificate')

    issued_at = models.DateTimeField(auto_now_add=True)
    file_url = models.URLField(null=True, blank=True) # Link to generated PDF

    def __str__(self):
        return f"Cert {self.certificate_id} for {self.attempt.user}"

    @property
    def verification_url(self):
        return f"{settings.CERTIFICATE_VERIFY_BASE_URL.rstrip('/')}/{self.certificate_id}"
