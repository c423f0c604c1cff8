"""Shared fixtures: users in every role, a small question bank, API clients."""
import random

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from exams.models import Module, Question, Option
from users.identity import Identity
from users.models import User


@pytest.fixture(autouse=True)
def clear_cache():
    # PlatformSetting lives in the cache between tests otherwise
    cache.clear()
    yield
    cache.clear()


def make_user(email, role=User.Role.CANDIDATE, paid=True, **extra):
    user = User.objects.create_user(
        username=email.split('@')[0],
        email=email,
        password='s3cret-pass!',
        role=role,
        **extra,
    )
    if paid:
        user.profile.membership_fee_paid = True
        user.profile.payment_status = 'completed'
        user.profile.save()
    return user


@pytest.fixture
def candidate(db):
    return make_user('ada@example.org', first_name='Ada', last_name='Lovelace')


@pytest.fixture
def unpaid_candidate(db):
    return make_user('bob@example.org', paid=False)


@pytest.fixture
def admin_user(db):
    return make_user('root@example.org', role=User.Role.ADMIN, is_staff=True)


@pytest.fixture
def practitioner(db):
    return make_user('mp@example.org', role=User.Role.MASTER_PRACTITIONER)


@pytest.fixture
def identity(candidate):
    return Identity.from_user(candidate)


@pytest.fixture
def admin_identity(admin_user):
    return Identity.from_user(admin_user)


@pytest.fixture
def module(db):
    return Module.objects.create(name='Ethics')


@pytest.fixture
def make_question(db):
    """Creates a question with options A-D; ``correct`` is the label of the right one."""
    counter = {'n': 0}

    def _make(text=None, correct='A', module=None, is_active=True, labels='ABCD'):
        counter['n'] += 1
        question = Question.objects.create(
            text=text or f'Question {counter["n"]}?',
            module=module,
            is_active=is_active,
        )
        for label in labels:
            Option.objects.create(
                question=question, label=label, text=f'Option {label}', is_correct=(label == correct),
            )
        return question

    return _make


@pytest.fixture
def question_bank(make_question, module):
    """Ten active questions in ``module`` plus one inactive one."""
    questions = [make_question(module=module) for _ in range(10)]
    make_question(text='Retired question?', module=module, is_active=False)
    return questions


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def candidate_client(candidate):
    client = APIClient()
    client.force_authenticate(user=candidate)
    return client


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client
