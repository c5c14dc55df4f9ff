"""
Política de Autorização.

Funções puras e totais: mesma entrada, mesma saída, sem efeitos
colaterais. São usadas tanto para filtrar visibilidade quanto para
autorizar mutações.

Regra combinada de acesso (leitura, atualização e exclusão):
    is_owner(ator, ticket) OR can_manage_department(papel, depto_ator, depto_ticket)
"""

from typing import Optional, TYPE_CHECKING

from .entities import Department, Role, UserEntity

if TYPE_CHECKING:
    from helpdesk.core.tickets.entities import TicketEntity


def is_manager_role(role: Role) -> bool:
    """Papel de gerente de departamento (não inclui SYSTEM_ADMIN)."""
    return role.is_manager


def can_manage_department(
    role: Role,
    actor_department: Optional[Department],
    ticket_department: Department,
) -> bool:
    """
    Verifica se o papel pode gerenciar tickets do departamento.
    
    Args:
        role: Papel do ator
        actor_department: Departamento do ator (pode ser None)
        ticket_department: Departamento do ticket
        
    Returns:
        True para SYSTEM_ADMIN; para gerentes, apenas quando o
        departamento coincide; False para os demais papéis.
    """
    if role is Role.SYSTEM_ADMIN:
        return True
    if role in (Role.ADMIN_MANAGER, Role.FINANCE_MANAGER, Role.HR_MANAGER):
        return actor_department is not None and actor_department == ticket_department
    if role is Role.EMPLOYEE:
        return False
    raise AssertionError(f"Unhandled role: {role!r}")


def is_owner(actor: UserEntity, ticket: "TicketEntity") -> bool:
    """Dono do ticket, independente do papel."""
    return ticket.created_by == actor.id


def can_manage_ticket(actor: UserEntity, ticket: "TicketEntity") -> bool:
    """Atalho de can_manage_department para o departamento atual do ticket."""
    return can_manage_department(actor.role, actor.department, ticket.department)


def can_access(actor: UserEntity, ticket: "TicketEntity") -> bool:
    """Regra combinada: dono OU gerente autorizado do departamento."""
    return is_owner(actor, ticket) or can_manage_ticket(actor, ticket)
