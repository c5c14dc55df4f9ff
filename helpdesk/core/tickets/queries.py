"""
Escopo de visibilidade, filtros e estatísticas de tickets.

O escopo define o que o ator pode ver; os filtros são sempre
combinados com AND ao escopo e nunca o ampliam.

Regras de escopo (build_scope):
1. my_tickets → apenas tickets do ator
2. EMPLOYEE → apenas tickets do ator
3. Gerente com departamento → tickets do departamento
4. Demais (SYSTEM_ADMIN, gerente sem departamento) → sem restrição

Estatísticas são calculadas sobre o conjunto escopado, sem filtros.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from helpdesk.core.accounts.entities import Department, Role, UserEntity

from .dtos import TicketQueryDTO, TicketStatsDTO
from .entities import TicketEntity, TicketPriority, TicketStatus


@dataclass(frozen=True)
class TicketScope:
    """
    Restrição de visibilidade derivada do ator.

    Attributes:
        created_by: Restringe ao dono (None = sem restrição)
        department: Restringe ao departamento (None = sem restrição)
    """

    created_by: Optional[int] = None
    department: Optional[Department] = None

    @property
    def is_unrestricted(self) -> bool:
        return self.created_by is None and self.department is None


@dataclass(frozen=True)
class TicketFilters:
    """Filtros já convertidos para os tipos do domínio."""

    department: Optional[Department] = None
    priority: Optional[TicketPriority] = None
    status: Optional[TicketStatus] = None
    search: Optional[str] = None

    @classmethod
    def from_query(cls, query: TicketQueryDTO) -> "TicketFilters":
        """
        Converte os filtros brutos da requisição.

        Raises:
            ValidationError: Se algum valor não pertence ao enum
        """
        return cls(
            department=Department.from_string(query.department) if query.department else None,
            priority=TicketPriority.from_string(query.priority) if query.priority else None,
            status=TicketStatus.from_string(query.status) if query.status else None,
            search=(query.search or "").strip() or None,
        )


def build_scope(actor: UserEntity, my_tickets: bool = False) -> TicketScope:
    """Monta o escopo de visibilidade do ator."""
    if my_tickets:
        return TicketScope(created_by=actor.id)
    if actor.role is Role.EMPLOYEE:
        return TicketScope(created_by=actor.id)
    if actor.role.is_manager and actor.department is not None:
        return TicketScope(department=actor.department)
    return TicketScope()


def matches(
    ticket: TicketEntity,
    scope: TicketScope,
    filters: Optional[TicketFilters] = None,
) -> bool:
    """
    Avalia escopo e filtros em memória.

    Mesma semântica que o repositório Django traduz para Q objects.
    """
    if scope.created_by is not None and ticket.created_by != scope.created_by:
        return False
    if scope.department is not None and ticket.department != scope.department:
        return False
    if filters is None:
        return True
    if filters.department is not None and ticket.department != filters.department:
        return False
    if filters.priority is not None and ticket.priority != filters.priority:
        return False
    if filters.status is not None and ticket.status != filters.status:
        return False
    if filters.search:
        needle = filters.search.lower()
        if needle not in ticket.subject.lower() and needle not in ticket.description.lower():
            return False
    return True


_STATUS_FIELDS = {
    TicketStatus.OPEN: "open",
    TicketStatus.IN_PROGRESS: "in_progress",
    TicketStatus.ON_HOLD: "on_hold",
    TicketStatus.CANCELLED: "cancelled",
    TicketStatus.CLOSED: "closed",
}


def compute_stats(tickets: Iterable[TicketEntity]) -> TicketStatsDTO:
    """
    Reduz tickets às contagens do dashboard.

    Example:
        prioridades [LOW, HIGH, HIGH] e status [OPEN, OPEN, CLOSED]
        → total=3, open=2, closed=1, by_priority={low: 1, medium: 0, high: 2}
    """
    stats = TicketStatsDTO()
    for ticket in tickets:
        stats.total += 1
        status_field = _STATUS_FIELDS[ticket.status]
        setattr(stats, status_field, getattr(stats, status_field) + 1)
        stats.by_department[ticket.department.value.lower()] += 1
        stats.by_priority[ticket.priority.value.lower()] += 1
    return stats
