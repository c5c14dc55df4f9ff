"""
Domain Events do Domínio de Tickets.

Eventos:
- TicketCreatedEvent: Novo ticket foi criado
- TicketStatusChangedEvent: Gerente alterou o status
- TicketDeletedEvent: Ticket foi removido

Uso:
    Eventos são criados nos use cases e publicados através do
    UnitOfWork após commit bem-sucedido.

    with uow:
        repo.add(ticket)
        uow.publish_event(TicketCreatedEvent(aggregate_id=ticket.id, ...))
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from helpdesk.core.shared.events import DomainEvent


@dataclass
class TicketCreatedEvent(DomainEvent):
    """
    Evento: Ticket foi criado.

    Handlers típicos:
    - Enviar email para a caixa do departamento (com cópias)

    Attributes:
        created_by: ID do dono
        subject: Assunto persistido (com prefixo)
        department: Valor do departamento
        priority: Valor da prioridade
    """

    created_by: int = 0
    subject: str = ""
    department: str = ""
    priority: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Ticket"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "created_by": self.created_by,
            "subject": self.subject,
            "department": self.department,
            "priority": self.priority,
        }


@dataclass
class TicketStatusChangedEvent(DomainEvent):
    """
    Evento: Status do ticket foi alterado.

    Só é disparado quando o novo status difere do anterior.

    Handlers típicos:
    - Enviar email ao dono do ticket

    Attributes:
        old_status: Valor do status anterior
        new_status: Valor do novo status
        comment: Comentário opcional do gerente
        changed_by: ID de quem alterou
    """

    old_status: str = ""
    new_status: str = ""
    comment: Optional[str] = None
    changed_by: Optional[int] = None

    @property
    def aggregate_type(self) -> str:
        return "Ticket"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "old_status": self.old_status,
            "new_status": self.new_status,
            "comment": self.comment,
            "changed_by": self.changed_by,
        }


@dataclass
class TicketDeletedEvent(DomainEvent):
    """Evento: Ticket foi removido (apenas auditoria, sem email)."""

    deleted_by: Optional[int] = None
    department: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Ticket"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "deleted_by": self.deleted_by,
            "department": self.department,
        }
