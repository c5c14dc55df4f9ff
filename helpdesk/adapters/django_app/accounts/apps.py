"""
Configuração do Django App para Contas.
"""

from django.apps import AppConfig


class AccountsConfig(AppConfig):
    """Configuração do app Contas (perfis de acesso)."""
    
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'helpdesk.adapters.django_app.accounts'
    label = 'accounts'
    verbose_name = 'Contas e Perfis'
