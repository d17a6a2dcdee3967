"""Shared test fixtures for the applications app."""

import pytest
from django.contrib.auth import get_user_model

from apps.applications.models import Application, ApplicationStatus, Opportunity


@pytest.fixture
def student(db):
    return get_user_model().objects.create_user(
        username="student1",
        email="student1@example.com",
        password="pass",
        first_name="Ada",
        last_name="Lovelace",
    )


@pytest.fixture
def staff_user(db):
    return get_user_model().objects.create_user(
        username="reviewer", email="reviewer@example.com", password="pass", is_staff=True
    )


@pytest.fixture
def opportunity(db):
    return Opportunity.objects.create(title="Backend Intern", organization="Acme")


@pytest.fixture
def make_application(db, opportunity):
    """Factory creating applications in an arbitrary starting status."""
    counter = {"n": 0}

    def _make(status=ApplicationStatus.PENDING, user=None, **kwargs):
        if user is None:
            counter["n"] += 1
            user = get_user_model().objects.create_user(
                username=f"applicant{counter['n']}",
                email=f"applicant{counter['n']}@example.com",
                password="pass",
            )
        return Application.objects.create(
            user=user, opportunity=kwargs.pop("opportunity", opportunity), status=status, **kwargs
        )

    return _make
