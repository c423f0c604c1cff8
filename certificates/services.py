import logging

from django.db import transaction

from cores.models import AuditLog
from users.models import Profile
from .models import Certificate

logger = logging.getLogger(__name__)


def apply_eligibility(attempt):
    """
    Reflects a finalised attempt on the owner's profile and issues the
    certificate when it passed. Only the certification fields are written;
    payment fields are left alone.

    Must run inside the transaction that recorded the attempt.
    """
    if not transaction.get_connection().in_atomic_block:
        raise RuntimeError("apply_eligibility must run inside transaction.atomic()")

    flags = {
        'test_completed': True,
        'test_score': attempt.score,
        'certificate_issued': attempt.passed,
    }
    if not attempt.passed:
        # A failed retake withdraws the link to any earlier certificate
        flags['certificate_url'] = ''

    updated = Profile.objects.filter(user_id=attempt.user_id).update(**flags)
    if not updated:
        Profile.objects.create(user_id=attempt.user_id, **flags)

    certificate = None
    if attempt.passed:
        certificate, _ = Certificate.objects.get_or_create(attempt=attempt)
        Profile.objects.filter(user_id=attempt.user_id).update(certificate_url=certificate.verification_url)
        logger.info(f"Certificate {certificate.certificate_id} issued to user {attempt.user_id}")
    return certificate


@transaction.atomic
def issue_certificate(identity, attempt, file_url=None):
    """Manual issue by an administrator, regardless of the attempt's pass flag."""
    certificate, created = Certificate.objects.get_or_create(attempt=attempt)
    if file_url:
        certificate.file_url = file_url
        certificate.save(update_fields=['file_url'])
    Profile.objects.filter(user_id=attempt.user_id).update(
        certificate_issued=True,
        certificate_url=file_url or certificate.verification_url,
    )
    if created:
        AuditLog.record(identity.user_id, 'CERTIFICATE', certificate, details=f"Manually issued for attempt {attempt.pk}")
        logger.info(f"Certificate {certificate.certificate_id} manually issued by user {identity.user_id}")
    return certificate, created
