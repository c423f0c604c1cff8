"""
Drives a running test: start, answer, tick down, submit.

The controller owns the in-memory view of one ongoing attempt and writes it
back through the session store. Answer and navigation changes are persisted
straight away; clock ticks are batched every ``persist_every`` seconds, so a
resumed attempt is at most that many seconds more generous than the one that
was interrupted.

    NOT_STARTED -> IN_PROGRESS -> SUBMITTED
                   IN_PROGRESS -> TIMED_OUT -> SUBMITTED
"""
import enum
import logging

from .assembler import validate_answers
from .services import submit_attempt
from .store import AttemptSessionStore

logger = logging.getLogger(__name__)


class AttemptState(str, enum.Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    TIMED_OUT = "timed_out"
    SUBMITTED = "submitted"


class InvalidTransition(Exception):
    pass


def _default_submit(identity, attempt_id, answers, auto_submitted):
    attempt, _ = submit_attempt(identity, attempt_id, answers=answers, auto_submitted=auto_submitted)
    return attempt


class CountdownController:

    def __init__(self, identity, attempt, store=None, submit=None, persist_every=5):
        self.identity = identity
        self.store = store or AttemptSessionStore()
        self._submit = submit or _default_submit
        self.persist_every = persist_every

        self.attempt_id = attempt.id
        self.questions = attempt.questions_data
        self.time_limit = attempt.time_limit
        self.time_left = attempt.time_left
        self.answers = dict(attempt.answers_data or {})
        self.current_question = attempt.current_question

        self.state = AttemptState.IN_PROGRESS if attempt.test_started else AttemptState.NOT_STARTED
        self.result = None
        self._unsaved_seconds = 0

    @classmethod
    def resume(cls, identity, store=None, **kwargs):
        """Rebuilds the controller from the last persisted update."""
        store = store or AttemptSessionStore()
        controller = cls(identity, store.get_or_404(identity), store=store, **kwargs)
        if controller.state is AttemptState.IN_PROGRESS and controller.time_left <= 0:
            controller._time_out()
        return controller

    # --- transitions ---

    def start(self):
        if self.state is AttemptState.IN_PROGRESS:
            if self.time_left <= 0:
                self._time_out()
            return self.state
        if self.state is not AttemptState.NOT_STARTED:
            raise InvalidTransition(f"Cannot start a test that is {self.state.value}")

        self.time_left = self.time_limit
        self.state = AttemptState.IN_PROGRESS
        self.flush()
        return self.state

    def tick(self, seconds=1):
        if self.state is not AttemptState.IN_PROGRESS:
            return self.state

        self.time_left = max(0, self.time_left - seconds)
        self._unsaved_seconds += seconds
        if self.time_left == 0:
            self._time_out()
        elif self._unsaved_seconds >= self.persist_every:
            self.flush()
        return self.state

    def submit(self, auto=False):
        """Idempotent: once submitted, returns the first result unchanged."""
        if self.state is AttemptState.SUBMITTED:
            return self.result

        self.result = self._submit(self.identity, self.attempt_id, self.answers, auto)
        self.state = AttemptState.SUBMITTED
        return self.result

    def _time_out(self):
        self.state = AttemptState.TIMED_OUT
        try:
            self.flush()
        except Exception:
            logger.warning(f"Could not persist timed-out attempt {self.attempt_id}", exc_info=True)
        try:
            self.submit(auto=True)
        except Exception:
            # Timeouts never surface an error; a later submit() retries
            logger.exception(f"Auto-submit of attempt {self.attempt_id} failed")

    # --- answering ---

    def select_answer(self, question_id, option_id):
        self._require_running()
        answers = dict(self.answers)
        answers[str(question_id)] = option_id
        self.answers = validate_answers(self.questions, answers)
        self.flush()

    def go_to(self, index):
        self._require_running()
        if not 0 <= index < len(self.questions):
            raise IndexError(index)
        self.current_question = index
        self.flush()

    def _require_running(self):
        if self.state is not AttemptState.IN_PROGRESS:
            raise InvalidTransition(f"Test is {self.state.value}")

    # --- persistence ---

    def flush(self):
        if self.state is AttemptState.SUBMITTED:
            return
        self.store.update(
            self.identity,
            answers=self.answers,
            current_question=self.current_question,
            time_left=self.time_left,
            test_started=self.state is not AttemptState.NOT_STARTED,
        )
        self._unsaved_seconds = 0

    @property
    def remaining(self):
        minutes, seconds = divmod(self.time_left, 60)
        return f"{minutes:02d}:{seconds:02d}"
