"""
Test lifecycle: start (assemble + store), submit (score + eligibility), retake.

Every function takes the caller's Identity explicitly.
"""
import logging

from django.db import IntegrityError, transaction
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied

from certificates.services import apply_eligibility
from cores.exceptions import AttemptNotFound, Conflict, ExamUnavailable
from cores.models import AuditLog, PlatformSetting
from exams import bank
from exams.models import Exam, ExamAssignment
from users.models import Profile
from .assembler import build_snapshot, select_questions, validate_answers
from .models import OngoingAttempt, TestAttempt
from .scoring import score_attempt
from .store import AttemptSessionStore

logger = logging.getLogger(__name__)


def _pending_assignments(identity, exam_id=None):
    assignments = ExamAssignment.objects.filter(user_id=identity.user_id, is_completed=False).select_related('exam')
    if exam_id is not None:
        assignments = assignments.filter(exam_id=exam_id)
    return list(assignments)


def _resolve_exam(identity, exam_id, now):
    """
    The first pending assignment open at ``now`` wins. Assignments scheduled
    for another time only block a test started for that exam explicitly.
    """
    pending = _pending_assignments(identity, exam_id)
    for assignment in pending:
        if assignment.is_available(now):
            return assignment.exam
    if exam_id is None:
        return None
    if pending:
        raise ExamUnavailable()
    return get_object_or_404(Exam, pk=exam_id, is_active=True)


def start_attempt(identity, exam_id=None, question_count=None, store=None, rng=None, now=None):
    """
    Assembles a question set and stores it as the caller's ongoing attempt.

    A pending exam assignment takes precedence over a free draw from the
    bank. Raises Conflict if an ongoing attempt already exists.
    """
    store = store or AttemptSessionStore()
    now = now or timezone.now()

    existing = store.get(identity)
    if existing is not None:
        raise Conflict("An ongoing test already exists.", ongoing_attempt_id=existing.id)

    profile = Profile.objects.filter(user_id=identity.user_id).first()
    if profile is not None and profile.test_completed:
        raise PermissionDenied("Test already completed. A retake must be granted first.")

    exam = _resolve_exam(identity, exam_id, now)
    platform = PlatformSetting.load()

    if exam is not None:
        pass_mark = exam.pass_mark_percentage
        time_limit = exam.duration_minutes * 60
        if exam.question_ids:
            questions = bank.get_questions(identity, question_ids=exam.question_ids, include_inactive=False)
        else:
            pool = bank.get_questions(identity, module_id=exam.module_id, include_inactive=False)
            questions = select_questions(pool, question_count or exam.total_questions, rng=rng)
    else:
        pass_mark = platform.default_pass_mark
        time_limit = platform.default_exam_duration * 60
        pool = bank.get_questions(identity, include_inactive=False)
        questions = select_questions(pool, question_count or platform.default_question_count, rng=rng)

    return store.create(
        identity,
        build_snapshot(questions),
        time_limit=time_limit,
        pass_mark=pass_mark,
        exam=exam,
    )


def _finalised(identity, attempt_id):
    return TestAttempt.objects.filter(attempt_id=attempt_id, user_id=identity.user_id).first()


def _finalise(identity, attempt_id, answers, auto_submitted):
    ongoing = (
        OngoingAttempt.objects.select_for_update()
        .filter(pk=attempt_id, user_id=identity.user_id)
        .first()
    )
    if ongoing is None:
        existing = _finalised(identity, attempt_id)
        if existing is not None:
            return existing, False
        raise AttemptNotFound("No ongoing test with this id.")

    recorded = ongoing.answers_data if answers is None else validate_answers(ongoing.questions_data, answers)
    result = score_attempt(ongoing.questions_data, recorded, ongoing.pass_mark)

    attempt = TestAttempt.objects.create(
        attempt_id=ongoing.pk,
        user_id=identity.user_id,
        exam_id=ongoing.exam_id,
        questions_data=ongoing.questions_data,
        answers_data=recorded,
        score=result.score,
        correct_count=result.correct_count,
        total_questions=result.total_questions,
        pass_mark=ongoing.pass_mark,
        passed=result.passed,
        auto_submitted=auto_submitted,
    )
    apply_eligibility(attempt)

    if ongoing.exam_id:
        ExamAssignment.objects.filter(
            user_id=identity.user_id, exam_id=ongoing.exam_id, is_completed=False,
        ).update(is_completed=True)

    AuditLog.record(
        identity.user_id, 'SUBMIT', attempt,
        details=f"Scored {result.score}% ({result.correct_count}/{result.total_questions}), "
                f"{'passed' if result.passed else 'failed'}{' on timeout' if auto_submitted else ''}",
    )
    ongoing.delete()
    return attempt, True


def submit_attempt(identity, attempt_id, answers=None, auto_submitted=False):
    """
    Scores the ongoing attempt ``attempt_id`` and records the result.

    ``answers`` replaces the stored answers when given (validated first);
    otherwise whatever was last persisted is graded. The attempt record,
    profile flags, certificate, assignment and removal of the ongoing row
    commit together or not at all.

    Returns ``(attempt, created)``. Submitting an id that was already
    finalised returns the stored attempt with ``created=False``.
    """
    existing = _finalised(identity, attempt_id)
    if existing is not None:
        logger.info(f"Attempt {attempt_id} already submitted; returning stored score {existing.score}")
        return existing, False

    try:
        with transaction.atomic():
            attempt, created = _finalise(identity, attempt_id, answers, auto_submitted)
    except IntegrityError:
        existing = _finalised(identity, attempt_id)
        if existing is None:
            raise
        return existing, False

    if created:
        logger.info(
            f"Attempt {attempt_id} submitted by user {identity.user_id}: "
            f"{attempt.score}% passed={attempt.passed} auto={auto_submitted}"
        )
    return attempt, created


@transaction.atomic
def grant_retake(identity, user_id):
    """Re-opens testing for ``user_id``: clears the completion lock and any ongoing attempt."""
    if not identity.is_admin:
        raise PermissionDenied()
    profile, _ = Profile.objects.select_for_update().get_or_create(user_id=user_id)
    profile.test_completed = False
    profile.save(update_fields=['test_completed', 'updated_at'])
    OngoingAttempt.objects.filter(user_id=user_id).delete()
    AuditLog.record(identity.user_id, 'RETAKE', profile, details=f"Retake granted to user {user_id}")
    logger.info(f"Retake granted to user {user_id} by {identity.user_id}")
    return profile
