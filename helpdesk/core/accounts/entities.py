"""
Entidades do Domínio de Contas.

Papéis e departamentos são enumerações fechadas: adicionar um valor
obriga a revisar a política de autorização (ver policy.py), que
trata cada papel explicitamente.

Entidades:
- Role: Papéis de usuário
- Department: Departamentos para os quais tickets são roteados
- UserEntity: Identidade autenticada da requisição
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from helpdesk.core.shared.exceptions import ValidationError


class Department(Enum):
    """
    Departamentos que recebem tickets.
    
    O valor é o identificador persistido; `label` é o nome
    exibido em emails e telas.
    """
    
    ADMIN = "ADMIN"
    FINANCE = "FINANCE"
    HR = "HR"
    
    @property
    def label(self) -> str:
        labels = {
            Department.ADMIN: "Administration",
            Department.FINANCE: "Finance",
            Department.HR: "Human Resources",
        }
        return labels[self]
    
    @classmethod
    def from_string(cls, value: str) -> "Department":
        """
        Converte string para enum.
        
        Raises:
            ValidationError: Se valor inválido
        """
        try:
            return cls[value.strip().upper()]
        except (KeyError, AttributeError):
            raise ValidationError(f"Invalid department: {value}", field="department")


class Role(Enum):
    """
    Papéis de usuário.
    
    EMPLOYEE: abre tickets e acompanha os próprios
    *_MANAGER: gerente de exatamente um departamento
    SYSTEM_ADMIN: gerencia todos os departamentos
    """
    
    EMPLOYEE = "EMPLOYEE"
    ADMIN_MANAGER = "ADMIN_MANAGER"
    FINANCE_MANAGER = "FINANCE_MANAGER"
    HR_MANAGER = "HR_MANAGER"
    SYSTEM_ADMIN = "SYSTEM_ADMIN"
    
    @property
    def is_manager(self) -> bool:
        """True para os papéis de gerente de departamento."""
        return self in (Role.ADMIN_MANAGER, Role.FINANCE_MANAGER, Role.HR_MANAGER)
    
    @classmethod
    def from_string(cls, value: str) -> "Role":
        try:
            return cls[value.strip().upper()]
        except (KeyError, AttributeError):
            raise ValidationError(f"Invalid role: {value}", field="role")


@dataclass(frozen=True)
class UserEntity:
    """
    Identidade autenticada, imutável durante a requisição.
    
    Attributes:
        id: Identificador do usuário
        role: Papel do usuário
        department: Departamento (obrigatório apenas para gerentes)
        username: Login, também usado como endereço de email
        name: Nome de exibição
    """
    
    id: int
    role: Role = Role.EMPLOYEE
    department: Optional[Department] = None
    username: str = ""
    name: str = ""
    
    def to_summary(self) -> dict:
        """Projeção pública (id, name, username, role, department)."""
        return {
            "id": self.id,
            "name": self.name,
            "username": self.username,
            "role": self.role.value,
            "department": self.department.value if self.department else None,
        }
