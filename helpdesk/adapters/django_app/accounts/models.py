"""
Django Models para o domínio de Contas.

O usuário é o `auth.User` padrão do Django; papel e departamento
ficam em um perfil one-to-one. Usuário sem perfil é tratado como
EMPLOYEE sem departamento.
"""

from django.conf import settings
from django.db import models


class RoleChoices(models.TextChoices):
    """Choices para papel (espelha Role do Core)."""
    EMPLOYEE = 'EMPLOYEE', 'Employee'
    ADMIN_MANAGER = 'ADMIN_MANAGER', 'Administration Manager'
    FINANCE_MANAGER = 'FINANCE_MANAGER', 'Finance Manager'
    HR_MANAGER = 'HR_MANAGER', 'HR Manager'
    SYSTEM_ADMIN = 'SYSTEM_ADMIN', 'System Administrator'


class DepartmentChoices(models.TextChoices):
    """Choices para departamento (espelha Department do Core)."""
    ADMIN = 'ADMIN', 'Administration'
    FINANCE = 'FINANCE', 'Finance'
    HR = 'HR', 'Human Resources'


class UserProfileModel(models.Model):
    """
    Perfil de acesso do usuário.

    Fields:
        user: Usuário Django (one-to-one)
        role: Papel no help desk
        department: Departamento gerenciado (obrigatório para gerentes)
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='helpdesk_profile',
        help_text="Usuário Django"
    )

    role = models.CharField(
        max_length=20,
        choices=RoleChoices.choices,
        default=RoleChoices.EMPLOYEE,
        db_index=True,
        help_text="Papel do usuário"
    )

    department = models.CharField(
        max_length=10,
        choices=DepartmentChoices.choices,
        null=True,
        blank=True,
        db_index=True,
        help_text="Departamento do usuário"
    )

    class Meta:
        db_table = 'user_profiles'
        verbose_name = 'Perfil de Usuário'
        verbose_name_plural = 'Perfis de Usuário'

    def __str__(self):
        department = self.department or '-'
        return f"{self.user} ({self.role}/{department})"
