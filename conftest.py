"""Shared pytest fixtures."""

from __future__ import annotations

import pytest
from rest_framework.test import APIClient

from apps.users.models import User


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def client_user(db) -> User:
    return User.objects.create_user(
        email="cliente@example.com",
        password="ClientePass123",
        full_name="Maria Cliente",
        cpf="12345678901",
        phone="11987654321",
    )


@pytest.fixture
def provider_user(db) -> User:
    return User.objects.create_user(
        email="buffet@example.com",
        password="PrestadorPass123",
        role=User.RoleChoices.PROVIDER,
        full_name="Buffet Alegria",
        organization_name="Buffet Alegria",
        cnpj="12345678000190",
        phone="11912345678",
        city="São Paulo",
        state="SP",
    )


@pytest.fixture
def admin_user(db) -> User:
    return User.objects.create_user(
        email="admin@befest.com",
        password="AdminPass123",
        role=User.RoleChoices.ADMIN,
        full_name="Admin Be Fest",
    )
