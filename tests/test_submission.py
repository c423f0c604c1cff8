"""Tests for starting, submitting and re-opening tests."""
import datetime
import uuid
from unittest import mock

import pytest
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied

from assessments import services
from assessments.assembler import build_snapshot
from assessments.models import OngoingAttempt, TestAttempt
from assessments.store import AttemptSessionStore
from certificates.models import Certificate
from certificates.services import apply_eligibility, issue_certificate
from cores.exceptions import AttemptNotFound, Conflict, ExamUnavailable, QuestionBankEmpty
from cores.models import AuditLog, PlatformSetting
from exams.models import Exam, ExamAssignment
from users.models import Profile
from .helpers import correct_answers, wrong_answers

pytestmark = pytest.mark.django_db


@pytest.fixture
def ten_question_attempt(identity, question_bank, rng):
    return services.start_attempt(identity, question_count=10, rng=rng)


class TestStartAttempt:

    def test_free_draw_uses_platform_defaults(self, identity, question_bank, rng):
        attempt = services.start_attempt(identity, question_count=4, rng=rng)
        assert attempt.total_questions == 4
        assert attempt.pass_mark == 70
        assert attempt.time_limit == 60 * 60
        assert attempt.exam is None

    def test_default_count_comes_from_settings(self, identity, question_bank, rng):
        setting = PlatformSetting.load()
        setting.default_question_count = 3
        setting.save()
        assert services.start_attempt(identity, rng=rng).total_questions == 3

    def test_never_draws_inactive_questions(self, identity, question_bank, rng):
        attempt = services.start_attempt(identity, question_count=50, rng=rng)
        assert attempt.total_questions == 10
        assert 'Retired question?' not in [q['text'] for q in attempt.questions_data]

    def test_exam_fixes_order_pass_mark_and_duration(self, identity, question_bank):
        ids = [question_bank[3].id, question_bank[0].id, question_bank[7].id]
        exam = Exam.objects.create(title='Foundations', question_ids=ids, pass_mark_percentage=50, duration_minutes=10)

        attempt = services.start_attempt(identity, exam_id=exam.id)

        assert [q['id'] for q in attempt.questions_data] == ids
        assert attempt.pass_mark == 50
        assert attempt.time_limit == 600
        assert attempt.exam_id == exam.id

    def test_exam_module_pool(self, identity, question_bank, module, make_question, rng):
        make_question()  # outside the module
        exam = Exam.objects.create(title='Ethics', module=module, total_questions=4)
        attempt = services.start_attempt(identity, exam_id=exam.id, rng=rng)
        ids = {q.id for q in question_bank}
        assert attempt.total_questions == 4
        assert all(q['id'] in ids for q in attempt.questions_data)

    def test_empty_bank(self, identity):
        with pytest.raises(QuestionBankEmpty):
            services.start_attempt(identity)

    def test_second_start_conflicts(self, identity, ten_question_attempt):
        with pytest.raises(Conflict) as excinfo:
            services.start_attempt(identity)
        assert excinfo.value.ongoing_attempt_id == ten_question_attempt.id

    def test_completed_candidate_needs_retake(self, identity, candidate, question_bank):
        Profile.objects.filter(user=candidate).update(test_completed=True)
        with pytest.raises(PermissionDenied):
            services.start_attempt(identity)

    def test_assignment_takes_precedence(self, identity, candidate, question_bank):
        exam = Exam.objects.create(title='Assigned', question_ids=[question_bank[0].id, question_bank[1].id])
        ExamAssignment.objects.create(user=candidate, exam=exam)
        assert services.start_attempt(identity).exam_id == exam.id

    def test_assignment_outside_window(self, identity, candidate, question_bank):
        exam = Exam.objects.create(title='Later', question_ids=[question_bank[0].id])
        ExamAssignment.objects.create(
            user=candidate, exam=exam, available_from=timezone.now() + datetime.timedelta(days=1),
        )
        with pytest.raises(ExamUnavailable):
            services.start_attempt(identity, exam_id=exam.id)
        assert not OngoingAttempt.objects.exists()

    def test_future_assignment_does_not_block_free_draw(self, identity, candidate, question_bank, rng):
        exam = Exam.objects.create(title='Later', question_ids=[question_bank[0].id])
        ExamAssignment.objects.create(
            user=candidate, exam=exam, available_from=timezone.now() + datetime.timedelta(days=3),
        )
        attempt = services.start_attempt(identity, question_count=2, rng=rng)
        assert attempt.exam is None
        assert attempt.total_questions == 2

    def test_open_assignment_wins_over_newer_scheduled_one(self, identity, candidate, question_bank):
        open_exam = Exam.objects.create(title='Open', question_ids=[question_bank[0].id])
        later_exam = Exam.objects.create(title='Later', question_ids=[question_bank[1].id])
        ExamAssignment.objects.create(user=candidate, exam=open_exam)
        ExamAssignment.objects.create(
            user=candidate, exam=later_exam, available_from=timezone.now() + datetime.timedelta(days=3),
        )
        assert services.start_attempt(identity).exam_id == open_exam.id


class TestSubmitAttempt:

    def test_pass_issues_certificate(self, identity, candidate, ten_question_attempt):
        answers = correct_answers(ten_question_attempt.questions_data, 7)

        attempt, created = services.submit_attempt(identity, ten_question_attempt.id, answers=answers)

        assert created is True
        assert attempt.score == 70
        assert attempt.correct_count == 7
        assert attempt.passed is True
        assert attempt.answers_data == answers

        profile = Profile.objects.get(user=candidate)
        assert profile.test_completed is True
        assert profile.test_score == 70
        assert profile.certificate_issued is True

        certificate = Certificate.objects.get(attempt=attempt)
        assert profile.certificate_url == certificate.verification_url
        assert not OngoingAttempt.objects.filter(user=candidate).exists()
        assert AuditLog.objects.filter(action='SUBMIT', target_object_id=str(attempt.pk)).exists()

    def test_fail_issues_nothing(self, identity, candidate, ten_question_attempt):
        answers = correct_answers(ten_question_attempt.questions_data, 6)

        attempt, _ = services.submit_attempt(identity, ten_question_attempt.id, answers=answers)

        assert attempt.score == 60
        assert attempt.passed is False
        profile = Profile.objects.get(user=candidate)
        assert profile.test_completed is True
        assert profile.test_score == 60
        assert profile.certificate_issued is False
        assert not Certificate.objects.exists()

    def test_all_wrong(self, identity, ten_question_attempt):
        attempt, _ = services.submit_attempt(
            identity, ten_question_attempt.id, answers=wrong_answers(ten_question_attempt.questions_data),
        )
        assert attempt.score == 0

    def test_grades_stored_answers_when_none_given(self, identity, ten_question_attempt):
        store_answers = correct_answers(ten_question_attempt.questions_data)
        OngoingAttempt.objects.filter(pk=ten_question_attempt.pk).update(answers_data=store_answers)
        attempt, _ = services.submit_attempt(identity, ten_question_attempt.id)
        assert attempt.score == 100

    def test_payment_fields_untouched(self, identity, candidate, ten_question_attempt):
        services.submit_attempt(identity, ten_question_attempt.id, answers={})
        profile = Profile.objects.get(user=candidate)
        assert profile.membership_fee_paid is True
        assert profile.payment_status == 'completed'

    def test_resubmit_returns_first_result(self, identity, ten_question_attempt):
        questions = ten_question_attempt.questions_data
        first, created = services.submit_attempt(identity, ten_question_attempt.id, answers=correct_answers(questions))
        again, created_again = services.submit_attempt(identity, ten_question_attempt.id, answers={})

        assert created is True
        assert created_again is False
        assert again.pk == first.pk
        assert again.score == 100
        assert TestAttempt.objects.count() == 1
        assert Certificate.objects.count() == 1

    def test_unknown_attempt(self, identity):
        with pytest.raises(AttemptNotFound):
            services.submit_attempt(identity, uuid.uuid4())

    def test_cannot_submit_someone_elses_attempt(self, admin_identity, ten_question_attempt):
        with pytest.raises(AttemptNotFound):
            services.submit_attempt(admin_identity, ten_question_attempt.id)

    def test_failure_rolls_back_everything(self, identity, candidate, ten_question_attempt):
        answers = correct_answers(ten_question_attempt.questions_data)
        with mock.patch.object(services, 'apply_eligibility', side_effect=RuntimeError("boom")):
            with pytest.raises(RuntimeError):
                services.submit_attempt(identity, ten_question_attempt.id, answers=answers)

        assert not TestAttempt.objects.exists()
        assert OngoingAttempt.objects.filter(pk=ten_question_attempt.pk).exists()
        profile = Profile.objects.get(user=candidate)
        assert profile.test_completed is False
        assert profile.test_score is None

        # still submittable afterwards
        attempt, created = services.submit_attempt(identity, ten_question_attempt.id, answers=answers)
        assert created is True
        assert attempt.passed is True

    def test_completes_assignment(self, identity, candidate, question_bank):
        exam = Exam.objects.create(title='Assigned', question_ids=[question_bank[0].id])
        assignment = ExamAssignment.objects.create(user=candidate, exam=exam)
        ongoing = services.start_attempt(identity)
        services.submit_attempt(identity, ongoing.id, answers={})
        assignment.refresh_from_db()
        assert assignment.is_completed is True


class TestEligibility:

    def test_requires_transaction(self, identity):
        attempt = TestAttempt(user_id=identity.user_id, score=100, passed=True)
        with mock.patch('certificates.services.transaction.get_connection') as get_connection:
            get_connection.return_value.in_atomic_block = False
            with pytest.raises(RuntimeError):
                apply_eligibility(attempt)

    def test_creates_missing_profile(self, identity, candidate, ten_question_attempt):
        Profile.objects.filter(user=candidate).delete()
        attempt, _ = services.submit_attempt(identity, ten_question_attempt.id, answers={})
        assert Profile.objects.get(user=candidate).test_score == attempt.score

    def test_manual_issue_for_failed_attempt(self, identity, admin_identity, candidate, ten_question_attempt):
        attempt, _ = services.submit_attempt(identity, ten_question_attempt.id, answers={})

        certificate, created = issue_certificate(admin_identity, attempt, file_url='https://files.example.org/c.pdf')
        _, created_again = issue_certificate(admin_identity, attempt)

        assert created is True
        assert created_again is False
        assert certificate.file_url == 'https://files.example.org/c.pdf'
        assert Profile.objects.get(user=candidate).certificate_issued is True
        assert AuditLog.objects.filter(action='CERTIFICATE').count() == 1


class TestGrantRetake:

    def test_retake_reopens_testing(self, identity, admin_identity, candidate, ten_question_attempt, rng):
        services.submit_attempt(identity, ten_question_attempt.id, answers={})

        services.grant_retake(admin_identity, candidate.pk)

        assert Profile.objects.get(user=candidate).test_completed is False
        assert AuditLog.objects.filter(action='RETAKE').exists()
        assert services.start_attempt(identity, question_count=2, rng=rng).total_questions == 2

    def test_retake_discards_ongoing_attempt(self, admin_identity, candidate, ten_question_attempt):
        services.grant_retake(admin_identity, candidate.pk)
        assert not OngoingAttempt.objects.filter(user=candidate).exists()

    def test_candidates_cannot_grant(self, identity, candidate):
        with pytest.raises(PermissionDenied):
            services.grant_retake(identity, candidate.pk)


def test_apply_eligibility_inside_atomic(identity, candidate, ten_question_attempt):
    with transaction.atomic():
        attempt = TestAttempt.objects.create(
            attempt_id=uuid.uuid4(), user=candidate, score=90, correct_count=9,
            total_questions=10, pass_mark=70, passed=True,
        )
        certificate = apply_eligibility(attempt)
    assert certificate.attempt_id == attempt.pk
    assert Profile.objects.get(user=candidate).test_score == 90


class TestTwoQuestionTests:
    """A two-question test with the default 70% pass mark, answered end to end."""

    @pytest.fixture
    def two_question_attempt(self, identity, make_question):
        snapshot = build_snapshot([make_question(correct='B'), make_question(correct='C')])
        return AttemptSessionStore().create(identity, snapshot, time_limit=60, pass_mark=70)

    def test_both_correct_passes(self, identity, candidate, two_question_attempt):
        answers = correct_answers(two_question_attempt.questions_data)

        attempt, _ = services.submit_attempt(identity, two_question_attempt.id, answers=answers)

        assert attempt.score == 100
        assert attempt.correct_count == 2
        assert attempt.passed is True
        assert Certificate.objects.filter(attempt=attempt).exists()
        assert Profile.objects.get(user=candidate).certificate_issued is True

    def test_one_correct_one_blank_fails(self, identity, candidate, two_question_attempt):
        questions = two_question_attempt.questions_data
        answers = correct_answers(questions, 1)
        answers[str(questions[1]['id'])] = None

        attempt, _ = services.submit_attempt(identity, two_question_attempt.id, answers=answers)

        assert attempt.score == 50
        assert attempt.passed is False
        assert attempt.answers_data == correct_answers(questions, 1)
        assert not Certificate.objects.exists()
        assert Profile.objects.get(user=candidate).certificate_issued is False

    def test_failed_retake_withdraws_certificate_link(self, identity, admin_identity, candidate, make_question):
        store = AttemptSessionStore()
        snapshot = build_snapshot([make_question(), make_question()])

        first = store.create(identity, snapshot, time_limit=60, pass_mark=70)
        services.submit_attempt(identity, first.id, answers=correct_answers(first.questions_data))
        assert Profile.objects.get(user=candidate).certificate_url

        services.grant_retake(admin_identity, candidate.pk)
        second = store.create(identity, snapshot, time_limit=60, pass_mark=70)
        services.submit_attempt(identity, second.id, answers={})

        profile = Profile.objects.get(user=candidate)
        assert profile.certificate_issued is False
        assert profile.certificate_url == ''
        assert profile.test_score == 0
