"""
Domínio de Contas - Identidade e Autorização.

- Entidades: Role, Department, UserEntity
- Política: can_manage_department, is_owner, can_access
- Ports: IdentityResolver
"""

from .entities import Department, Role, UserEntity
from .policy import (
    can_access,
    can_manage_department,
    can_manage_ticket,
    is_manager_role,
    is_owner,
)
from .ports import IdentityResolver

__all__ = [
    "Department",
    "Role",
    "UserEntity",
    "can_access",
    "can_manage_department",
    "can_manage_ticket",
    "is_manager_role",
    "is_owner",
    "IdentityResolver",
]
