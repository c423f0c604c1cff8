"""Read access to the question bank, scoped by module or explicit id list."""
import logging

from cores.exceptions import QuestionBankEmpty
from .models import Question

logger = logging.getLogger(__name__)


def get_questions(identity, module_id=None, question_ids=None, include_inactive=None):
    """
    Returns questions (with options prefetched) visible to ``identity``.

    Inactive questions are only returned to elevated roles, and only when
    ``include_inactive`` is not False. With ``question_ids`` the result
    follows that order; ids that do not resolve are dropped.
    Raises QuestionBankEmpty when nothing matches.
    """
    queryset = Question.objects.prefetch_related('options')
    if include_inactive is None:
        include_inactive = identity.is_elevated
    if not (include_inactive and identity.is_elevated):
        queryset = queryset.filter(is_active=True)
    if module_id is not None:
        queryset = queryset.filter(module_id=module_id)

    if question_ids is not None:
        by_id = {q.id: q for q in queryset.filter(id__in=question_ids)}
        questions = [by_id[qid] for qid in question_ids if qid in by_id]
        if len(questions) < len(question_ids):
            logger.warning(f"{len(question_ids) - len(questions)} configured question(s) missing or inactive")
    else:
        questions = list(queryset)

    if not questions:
        raise QuestionBankEmpty()
    return questions
