"""
Fixtures para testes com Django.

Este arquivo fornece:
- Factory de usuários Django com perfil (papel/departamento)
- Factory de TicketModel
- Client autenticado por usuário
"""

import pytest


@pytest.fixture
def make_user(db):
    """Factory para criar auth.User + UserProfileModel."""
    from django.contrib.auth import get_user_model

    from helpdesk.adapters.django_app.accounts.models import UserProfileModel

    def create_user(username, role='EMPLOYEE', department=None, first_name='',
                    last_name='', with_profile=True, **kwargs):
        user = get_user_model().objects.create_user(
            username=username,
            password='secret-pass',
            first_name=first_name,
            last_name=last_name,
            **kwargs
        )
        if with_profile:
            UserProfileModel.objects.create(user=user, role=role, department=department)
        return user

    return create_user


@pytest.fixture
def employee_user(make_user):
    return make_user('ana@example.com', first_name='Ana', last_name='Lima')


@pytest.fixture
def other_user(make_user):
    return make_user('bruno', first_name='Bruno')


@pytest.fixture
def finance_manager_user(make_user):
    return make_user(
        'fin.manager@example.com',
        role='FINANCE_MANAGER',
        department='FINANCE',
        first_name='Fernanda',
    )


@pytest.fixture
def hr_manager_user(make_user):
    return make_user('hr.manager@example.com', role='HR_MANAGER', department='HR')


@pytest.fixture
def ticket_model_factory(db):
    """Factory para criar TicketModel direto no banco."""
    from helpdesk.adapters.django_app.tickets.models import TicketModel

    def create_ticket(created_by, **kwargs):
        defaults = {
            'subject': '[Payroll - Salary Slip] Need slip',
            'description': 'March payslip missing',
            'department': 'FINANCE',
            'category': 'Payroll',
            'subcategory': 'Salary Slip',
            'priority': 'MEDIUM',
            'status': 'OPEN',
        }
        defaults.update(kwargs)
        return TicketModel.objects.create(created_by=created_by, **defaults)

    return create_ticket


@pytest.fixture
def client_for():
    """Retorna um django.test.Client logado como o usuário informado."""
    from django.test import Client

    def build(user=None):
        client = Client()
        if user is not None:
            client.force_login(user)
        return client

    return build
