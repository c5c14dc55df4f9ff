"""
Configurações globais do Pytest para o HelpDesk.

Este arquivo é carregado automaticamente pelo pytest e:
- Configura o Django para testes (SQLite em memória, email locmem,
  anexos em diretório temporário)
- Fornece fixtures compartilhadas pelos testes do Core e dos Adapters
"""

import shutil
import tempfile
from pathlib import Path

import pytest

from helpdesk.core.accounts.entities import Department, Role, UserEntity

MEDIA_ROOT = tempfile.mkdtemp(prefix='helpdesk-tests-')


def pytest_configure(config):
    """Configura Django antes dos testes."""
    import django
    from django.conf import settings

    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )

    if not settings.configured:
        settings.configure(
            DEBUG=False,
            SECRET_KEY='test-secret-key',
            DATABASES={
                'default': {
                    'ENGINE': 'django.db.backends.sqlite3',
                    'NAME': ':memory:',
                }
            },
            INSTALLED_APPS=[
                'django.contrib.admin',
                'django.contrib.auth',
                'django.contrib.contenttypes',
                'django.contrib.sessions',
                'django.contrib.messages',
                'helpdesk.adapters.django_app.accounts.apps.AccountsConfig',
                'helpdesk.adapters.django_app.tickets.apps.TicketsConfig',
            ],
            MIDDLEWARE=[
                'django.contrib.sessions.middleware.SessionMiddleware',
                'django.contrib.auth.middleware.AuthenticationMiddleware',
                'django.contrib.messages.middleware.MessageMiddleware',
            ],
            TEMPLATES=[{
                'BACKEND': 'django.template.backends.django.DjangoTemplates',
                'DIRS': [],
                'APP_DIRS': True,
                'OPTIONS': {
                    'context_processors': [
                        'django.template.context_processors.request',
                        'django.contrib.auth.context_processors.auth',
                        'django.contrib.messages.context_processors.messages',
                    ],
                },
            }],
            ROOT_URLCONF='helpdesk.config.urls',
            DEFAULT_AUTO_FIELD='django.db.models.BigAutoField',
            USE_TZ=True,
            TIME_ZONE='UTC',
            PASSWORD_HASHERS=['django.contrib.auth.hashers.MD5PasswordHasher'],
            EMAIL_BACKEND='django.core.mail.backends.locmem.EmailBackend',
            DEFAULT_FROM_EMAIL='helpdesk@example.com',
            DEPARTMENT_EMAILS={
                'ADMIN': 'admin-desk@example.com',
                'FINANCE': 'finance-desk@example.com',
                'HR': 'hr-desk@example.com',
            },
            CC_EMAILS=['supervisor@example.com'],
            APP_BASE_URL='http://helpdesk.test',
            MEDIA_ROOT=MEDIA_ROOT,
            MEDIA_URL='/media/',
            OBJECT_STORAGE_BACKEND='django',
            ATTACHMENT_URL_TTL=300,
            TICKETS_STRICT_TAXONOMY=False,
            EVENT_PUBLISHER_MODE='sync',
        )
        django.setup()


def pytest_unconfigure(config):
    shutil.rmtree(MEDIA_ROOT, ignore_errors=True)


@pytest.fixture(scope="session")
def project_root():
    """Retorna o caminho raiz do projeto."""
    return Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def reset_di_container():
    """
    Reset do container de DI entre testes.

    Garante que overrides e singletons de um teste não vazam para o próximo.
    """
    from helpdesk.config.container import reset_container

    reset_container()
    yield
    reset_container()


# =============================================================================
# Identidades (Core)
# =============================================================================

@pytest.fixture
def employee():
    return UserEntity(id=1, role=Role.EMPLOYEE, username="ana@example.com", name="Ana")


@pytest.fixture
def other_employee():
    return UserEntity(id=2, role=Role.EMPLOYEE, username="bruno", name="Bruno")


@pytest.fixture
def finance_manager():
    return UserEntity(
        id=10,
        role=Role.FINANCE_MANAGER,
        department=Department.FINANCE,
        username="fin.manager@example.com",
        name="Fernanda",
    )


@pytest.fixture
def hr_manager():
    return UserEntity(
        id=11,
        role=Role.HR_MANAGER,
        department=Department.HR,
        username="hr.manager@example.com",
        name="Helena",
    )


@pytest.fixture
def system_admin():
    return UserEntity(id=99, role=Role.SYSTEM_ADMIN, username="root@example.com", name="Root")
