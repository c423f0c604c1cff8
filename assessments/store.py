"""
Persistence for the one in-progress attempt a candidate may hold.

Updates overwrite the row in place, so calling ``update`` on every timer
tick never grows storage. Concurrent updates are last-write-wins unless the
caller passes ``expected_version``.
"""
import logging

from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone
from rest_framework import serializers

from cores.exceptions import AttemptNotFound, Conflict
from .assembler import validate_answers, validate_snapshot
from .models import OngoingAttempt

logger = logging.getLogger(__name__)


class AttemptSessionStore:

    def get(self, identity):
        return OngoingAttempt.objects.filter(user_id=identity.user_id).first()

    def get_or_404(self, identity):
        attempt = self.get(identity)
        if attempt is None:
            raise AttemptNotFound()
        return attempt

    def create(self, identity, snapshot, time_limit, pass_mark, exam=None, test_started=False):
        existing = self.get(identity)
        if existing is not None:
            logger.info(f"User {identity.user_id} already has ongoing attempt {existing.id}")
            raise Conflict("An ongoing test already exists.", ongoing_attempt_id=existing.id)

        snapshot = validate_snapshot(snapshot)
        if time_limit <= 0:
            raise serializers.ValidationError({'time_limit': "Time limit must be positive."})

        try:
            with transaction.atomic():
                attempt = OngoingAttempt.objects.create(
                    user_id=identity.user_id,
                    exam=exam,
                    questions_data=snapshot,
                    answers_data={},
                    current_question=0,
                    time_left=time_limit,
                    time_limit=time_limit,
                    pass_mark=pass_mark,
                    test_started=test_started,
                )
        except IntegrityError:
            # Lost a race with another tab creating the same attempt
            existing = self.get(identity)
            raise Conflict("An ongoing test already exists.", ongoing_attempt_id=existing.id if existing else None)

        logger.info(f"Ongoing attempt {attempt.id} created for user {identity.user_id} ({len(snapshot)} questions)")
        return attempt

    def update(self, identity, answers=None, current_question=None, time_left=None,
               test_started=None, expected_version=None):
        attempt = self.get_or_404(identity)

        changes = {}
        if answers is not None:
            changes['answers_data'] = validate_answers(attempt.questions_data, answers)
        if current_question is not None:
            if not 0 <= current_question < max(attempt.total_questions, 1):
                raise serializers.ValidationError({'current_question': "Question index out of range."})
            changes['current_question'] = current_question
        if time_left is not None:
            if not 0 <= time_left <= attempt.time_limit:
                raise serializers.ValidationError({'time_left': "Remaining time must be between 0 and the time limit."})
            changes['time_left'] = time_left
        if test_started is not None:
            if attempt.test_started and not test_started:
                raise serializers.ValidationError({'test_started': "A started test cannot be un-started."})
            changes['test_started'] = test_started

        queryset = OngoingAttempt.objects.filter(pk=attempt.pk)
        if expected_version is not None:
            queryset = queryset.filter(version=expected_version)

        # .update() skips auto_now
        updated = queryset.update(version=F('version') + 1, updated_at=timezone.now(), **changes)
        if not updated:
            if expected_version is not None and OngoingAttempt.objects.filter(pk=attempt.pk).exists():
                raise Conflict("The ongoing test was changed elsewhere; reload it.", ongoing_attempt_id=attempt.pk)
            raise AttemptNotFound()

        attempt.refresh_from_db()
        return attempt

    def delete(self, identity):
        deleted, _ = OngoingAttempt.objects.filter(user_id=identity.user_id).delete()
        return bool(deleted)
