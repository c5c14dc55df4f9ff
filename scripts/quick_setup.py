#!/usr/bin/env python
"""
Setup rápido para desenvolvimento local.

Este script:
1. Configura Django settings
2. Cria banco de dados SQLite
3. Executa migrations
4. Cria usuários e tickets de exemplo (opcional)

Uso:
    python scripts/quick_setup.py
    python scripts/quick_setup.py --with-sample-data
"""

import os
import sys
import argparse

# Raiz do projeto no path (pacote helpdesk)
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

SAMPLE_PASSWORD = 'helpdesk123'

SAMPLE_USERS = [
    # username, nome, papel, departamento
    ('ana@example.com', 'Ana', 'EMPLOYEE', None),
    ('bruno@example.com', 'Bruno', 'EMPLOYEE', None),
    ('admin.manager@example.com', 'Alice', 'ADMIN_MANAGER', 'ADMIN'),
    ('fin.manager@example.com', 'Fernanda', 'FINANCE_MANAGER', 'FINANCE'),
    ('hr.manager@example.com', 'Helena', 'HR_MANAGER', 'HR'),
    ('root@example.com', 'Root', 'SYSTEM_ADMIN', None),
]

SAMPLE_TICKETS = [
    # dono, campos do ticket
    ('ana@example.com', {
        'subject': 'Need slip',
        'description': 'My March payslip is missing from the portal.',
        'department': 'FINANCE',
        'priority': 'MEDIUM',
        'category': 'Payroll',
        'subcategory': 'Salary Slip',
    }),
    ('ana@example.com', {
        'subject': 'Broken chair',
        'description': 'The chair at desk 3F-12 is broken.',
        'department': 'ADMIN',
        'priority': 'LOW',
        'category': 'Facilities',
        'subcategory': 'Office Maintenance',
    }),
    ('bruno@example.com', {
        'subject': 'Leave query',
        'description': 'My leave balance does not include the carried-over days.',
        'department': 'HR',
        'priority': 'HIGH',
        'category': 'Leave',
        'subcategory': 'Leave Balance',
    }),
    ('bruno@example.com', {
        'subject': 'Form needed',
        'description': 'Please share my tax form for last year.',
        'department': 'FINANCE',
        'priority': 'MEDIUM',
        'category': 'Taxation',
        'subcategory': 'Form 16',
    }),
]


def setup_django():
    """Configura Django para uso standalone."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'helpdesk.config.settings')

    # Forçar SQLite e emails no console para desenvolvimento rápido
    os.environ['DATABASE_URL'] = 'sqlite:///db.sqlite3'
    os.environ.setdefault('EMAIL_BACKEND', 'django.core.mail.backends.console.EmailBackend')
    os.environ.setdefault('EVENT_PUBLISHER_MODE', 'sync')

    import django
    django.setup()


def run_migrations():
    """Executa migrations."""
    from django.core.management import call_command

    print("📦 Executando migrations...")
    call_command('migrate', verbosity=1)
    print("✅ Migrations concluídas!")


def create_sample_users():
    """Cria usuários com perfil (papel/departamento)."""
    from django.contrib.auth import get_user_model
    from helpdesk.adapters.django_app.accounts.models import UserProfileModel

    User = get_user_model()

    print("👤 Criando usuários de exemplo...")

    users = {}
    for username, name, role, department in SAMPLE_USERS:
        user, created = User.objects.get_or_create(
            username=username,
            defaults={'first_name': name, 'email': username},
        )
        if created:
            user.set_password(SAMPLE_PASSWORD)
            user.save()
        UserProfileModel.objects.update_or_create(
            user=user,
            defaults={'role': role, 'department': department},
        )
        users[username] = user
        print(f"   ✓ {username} ({role})")

    return users


def create_sample_tickets(users):
    """Cria tickets pelos use cases (sanitização, prefixo e eventos)."""
    from helpdesk.adapters.django_app.accounts.identity import user_to_entity
    from helpdesk.config.container import get_container
    from helpdesk.core.tickets.dtos import CreateTicketInputDTO, UpdateTicketInputDTO

    container = get_container()

    print("📝 Criando tickets de exemplo...")

    created = []
    for username, fields in SAMPLE_TICKETS:
        actor = user_to_entity(users[username])
        output = container.create_ticket_service().execute(actor, CreateTicketInputDTO(**fields))
        created.append(output)
        print(f"   ✓ #{output.id} {output.subject[:50]}")

    # Gerente do Financeiro já começou a tratar o primeiro ticket
    manager = user_to_entity(users['fin.manager@example.com'])
    container.update_ticket_service().execute(manager, UpdateTicketInputDTO(
        ticket_id=created[0].id,
        status='IN_PROGRESS',
        comment='Checking with payroll.',
    ))

    print(f"✅ {len(created)} tickets criados!")


def check_connection():
    """Verifica conexão com o banco."""
    from django.db import connection

    print("🔍 Verificando conexão com o banco...")

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        print("✅ Conexão OK!")
        return True
    except Exception as e:
        print(f"❌ Erro de conexão: {e}")
        return False


def show_info():
    """Mostra informações do setup."""
    from django.conf import settings

    print("\n" + "=" * 60)
    print("📊 Informações do Setup")
    print("=" * 60)
    print(f"  Database Engine: {settings.DATABASES['default']['ENGINE']}")
    print(f"  Database Name: {settings.DATABASES['default']['NAME']}")
    print(f"  Object Storage: {settings.OBJECT_STORAGE_BACKEND}")
    print(f"  Event Publisher: {settings.EVENT_PUBLISHER_MODE}")
    print(f"  Debug Mode: {settings.DEBUG}")
    print("=" * 60)
    print("\n🚀 Próximos passos:")
    print("   1. django-admin runserver --settings=helpdesk.config.settings")
    print("   2. Acesse: http://localhost:8000/admin/")
    print("   3. Acesse: http://localhost:8000/api/tickets/")
    print(f"   Senha dos usuários de exemplo: {SAMPLE_PASSWORD}")
    print("\n")


def main():
    parser = argparse.ArgumentParser(description='Setup rápido para desenvolvimento')
    parser.add_argument(
        '--with-sample-data',
        action='store_true',
        help='Criar usuários e tickets de exemplo'
    )
    parser.add_argument(
        '--check-only',
        action='store_true',
        help='Apenas verificar conexão'
    )

    args = parser.parse_args()

    print("\n" + "=" * 60)
    print("🔧 HelpDesk Tickets - Quick Setup")
    print("=" * 60 + "\n")

    # Configurar Django
    setup_django()

    if args.check_only:
        check_connection()
        return

    # Verificar conexão
    if not check_connection():
        print("\n⚠️  Certifique-se de que o banco de dados está rodando.")
        print("   Para usar SQLite, defina: DATABASE_URL=sqlite:///db.sqlite3")
        return

    # Executar migrations
    run_migrations()

    # Criar dados de exemplo
    if args.with_sample_data:
        users = create_sample_users()
        create_sample_tickets(users)

    # Mostrar informações
    show_info()


if __name__ == '__main__':
    main()
