"""
Data Transfer Objects (DTOs) do Domínio de Tickets.

DTOs são estruturas simples para transportar dados entre camadas,
evitando vazamento de entidades para as views.

Tipos de DTOs:
- Input DTOs: dados de entrada vindos de Forms/APIs (valores brutos)
- Output DTOs: formatam dados para resposta JSON
- Query DTOs: filtros de listagem
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from helpdesk.core.accounts.entities import UserEntity
from helpdesk.core.shared.exceptions import ValidationError

from .entities import TicketEntity


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class AttachmentUploadDTO:
    """
    Arquivo recebido no multipart de criação.

    Attributes:
        filename: Nome original do arquivo
        content: Bytes do arquivo
        content_type: MIME type informado pelo cliente
    """

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


@dataclass(frozen=True)
class CreateTicketInputDTO:
    """
    DTO de entrada para criar ticket.

    Os valores chegam como strings brutas; a conversão para enums
    e a validação acontecem no use case, para que campos ausentes
    sejam reportados juntos em MissingFieldsError.
    """

    subject: str = ""
    description: str = ""
    department: str = ""
    priority: str = ""
    category: str = ""
    subcategory: str = ""
    attachments: Tuple[AttachmentUploadDTO, ...] = field(default_factory=tuple)

    REQUIRED_FIELDS = ("subject", "description", "department", "priority")

    def missing_fields(self) -> List[str]:
        """Campos obrigatórios vazios ou só com espaços."""
        return [
            name for name in self.REQUIRED_FIELDS
            if not (getattr(self, name) or "").strip()
        ]


def _optional_str(data: Mapping[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError(f"Field '{key}' must be a string", field=key)
    return value


@dataclass(frozen=True)
class UpdateTicketInputDTO:
    """
    DTO de entrada para atualizar ticket.

    None significa "não informado". Strings vazias no payload
    também contam como não informadas.
    """

    ticket_id: int
    subject: Optional[str] = None
    description: Optional[str] = None
    department: Optional[str] = None
    priority: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    status: Optional[str] = None
    comment: Optional[str] = None

    @classmethod
    def from_dict(cls, ticket_id: int, data: Mapping[str, Any]) -> "UpdateTicketInputDTO":
        """
        Monta o DTO a partir do corpo JSON do PUT.

        Raises:
            ValidationError: Se algum campo não for string
        """
        return cls(
            ticket_id=ticket_id,
            subject=_optional_str(data, "subject"),
            description=_optional_str(data, "description"),
            department=_optional_str(data, "department"),
            priority=_optional_str(data, "priority"),
            category=_optional_str(data, "category"),
            subcategory=_optional_str(data, "subcategory"),
            status=_optional_str(data, "status"),
            comment=_optional_str(data, "comment"),
        )

    @property
    def has_content_fields(self) -> bool:
        return any(
            value is not None
            for value in (
                self.subject,
                self.description,
                self.department,
                self.priority,
                self.category,
                self.subcategory,
            )
        )


# =============================================================================
# QUERY DTOs (Filtros de Busca)
# =============================================================================

@dataclass(frozen=True)
class TicketQueryDTO:
    """
    Filtros de listagem, combinados com AND ao escopo do ator.

    Attributes:
        my_tickets: Restringe aos tickets do próprio ator
        department: Valor exato do departamento
        priority: Valor exato da prioridade
        status: Valor exato do status
        search: Trecho buscado em assunto OU descrição (case-insensitive)
    """

    my_tickets: bool = False
    department: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    search: Optional[str] = None


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class TicketOutputDTO:
    """
    DTO de saída com dados completos do ticket.

    `attachments` contém URLs pré-assinadas, não as chaves do storage.
    `user` é o resumo público do dono (None se o usuário foi removido).
    """

    id: int
    subject: str
    description: str
    department: str
    category: str
    subcategory: str
    priority: str
    status: str
    created_by: int
    created_at: datetime
    updated_at: datetime
    attachments: List[str] = field(default_factory=list)
    user: Optional[Dict[str, Any]] = None

    @classmethod
    def from_entity(
        cls,
        entity: TicketEntity,
        creator: Optional[UserEntity] = None,
        attachment_urls: Optional[List[str]] = None,
    ) -> "TicketOutputDTO":
        """
        Factory method para converter entidade em DTO.

        Args:
            entity: Entidade TicketEntity
            creator: Dono do ticket (já carregado, evita N+1)
            attachment_urls: URLs pré-assinadas dos anexos
        """
        return cls(
            id=entity.id,
            subject=entity.subject,
            description=entity.description,
            department=entity.department.value,
            category=entity.category,
            subcategory=entity.subcategory,
            priority=entity.priority.value,
            status=entity.status.value,
            created_by=entity.created_by,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            attachments=list(attachment_urls or []),
            user=creator.to_summary() if creator else None,
        )

    def to_dict(self) -> dict:
        """Converte para dicionário (serialização JSON)."""
        return {
            "id": self.id,
            "subject": self.subject,
            "description": self.description,
            "department": self.department,
            "category": self.category,
            "subcategory": self.subcategory,
            "priority": self.priority,
            "status": self.status,
            "created_by": self.created_by,
            "attachments": self.attachments,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "user": self.user,
        }


@dataclass
class TicketStatsDTO:
    """Contagens do dashboard sobre o conjunto escopado (sem filtros)."""

    total: int = 0
    open: int = 0
    in_progress: int = 0
    on_hold: int = 0
    cancelled: int = 0
    closed: int = 0
    by_department: Dict[str, int] = field(
        default_factory=lambda: {"admin": 0, "finance": 0, "hr": 0}
    )
    by_priority: Dict[str, int] = field(
        default_factory=lambda: {"low": 0, "medium": 0, "high": 0}
    )

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "open": self.open,
            "in_progress": self.in_progress,
            "on_hold": self.on_hold,
            "cancelled": self.cancelled,
            "closed": self.closed,
            "by_department": dict(self.by_department),
            "by_priority": dict(self.by_priority),
        }
