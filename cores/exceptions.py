import logging

from rest_framework import status
from rest_framework.exceptions import APIException, NotFound
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Conflicting state.'
    default_code = 'conflict'

    def __init__(self, detail=None, code=None, ongoing_attempt_id=None):
        super().__init__(detail, code)
        self.ongoing_attempt_id = ongoing_attempt_id


class AttemptNotFound(NotFound):
    default_detail = 'No ongoing test to resume.'
    default_code = 'attempt_not_found'


class QuestionBankEmpty(NotFound):
    default_detail = 'No questions are available for this test.'
    default_code = 'question_bank_empty'


class ExamUnavailable(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'This exam is not currently available.'
    default_code = 'exam_unavailable'


def api_exception_handler(exc, context):
    """
    Wraps DRF's handler so every error body carries an "error" key.
    Validation errors keep their field map under "details".
    """
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception(f"Unhandled error in {view.__class__.__name__ if view else 'unknown view'}")
        return None

    data = response.data
    if isinstance(data, dict) and set(data) == {'detail'}:
        body = {'error': str(data['detail'])}
    elif isinstance(data, dict):
        body = {'error': 'Invalid request.', 'details': data}
    else:
        body = {'error': 'Invalid request.', 'details': data}

    if isinstance(exc, Conflict) and exc.ongoing_attempt_id:
        body['ongoing_attempt_id'] = str(exc.ongoing_attempt_id)
        body['resume'] = '/api/tests/ongoing/'

    response.data = body
    return response
