import pytest
from django.contrib.auth import get_user_model

from apps.applications.models import Application, Opportunity


@pytest.fixture
def student(db):
    return get_user_model().objects.create_user(
        username="grace",
        email="grace@example.com",
        password="pass",
        first_name="Grace",
        last_name="Hopper",
    )


@pytest.fixture
def opportunity(db):
    return Opportunity.objects.create(title="Compiler Intern", organization="Navy Labs")


@pytest.fixture
def application(student, opportunity):
    return Application.objects.create(user=student, opportunity=opportunity)
