"""
Entidades do Domínio de Tickets.

Este módulo define as entidades de domínio que encapsulam
regras de negócio relacionadas a tickets de suporte.

Entidades:
- TicketEntity: Agregado principal do domínio
- TicketStatus: Estados possíveis de um ticket
- TicketPriority: Níveis de prioridade

Regras de Negócio Encapsuladas:
- Assunto sanitizado e prefixado com a classificação na criação
- Conteúdo editável pelo dono apenas enquanto o ticket está aberto
- Status alterável livremente (sem máquina de transições)
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from helpdesk.core.accounts.entities import Department
from helpdesk.core.shared.events import utc_now
from helpdesk.core.shared.exceptions import InvalidStateError, ValidationError

from .subjects import build_subject, sanitize_subject, split_subject_prefix


class TicketStatus(Enum):
    """
    Estados possíveis de um ticket.

    Estado inicial: OPEN. Qualquer estado pode ir para qualquer outro,
    inclusive reabrir um ticket CLOSED.
    """

    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    CANCELLED = "CANCELLED"
    CLOSED = "CLOSED"

    @property
    def label(self) -> str:
        """Nome exibido em emails ("In Progress")."""
        return self.value.replace("_", " ").title()

    @classmethod
    def from_string(cls, value: str) -> "TicketStatus":
        """
        Converte string para enum.

        Aceita o nome ("IN_PROGRESS") ou o rótulo ("In Progress").

        Raises:
            ValidationError: Se valor inválido
        """
        try:
            return cls[value.strip().upper().replace(" ", "_")]
        except (KeyError, AttributeError):
            raise ValidationError(f"Invalid status: {value}", field="status")


class TicketPriority(Enum):
    """Níveis de prioridade. HIGH marca o email de criação como urgente."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @property
    def label(self) -> str:
        return self.value.title()

    @classmethod
    def from_string(cls, value: str) -> "TicketPriority":
        """
        Converte string para enum.

        Raises:
            ValidationError: Se valor inválido
        """
        try:
            return cls[value.strip().upper()]
        except (KeyError, AttributeError):
            raise ValidationError(f"Invalid priority: {value}", field="priority")


@dataclass
class TicketEntity:
    """
    Entidade de Domínio: Ticket.

    Agregado principal do domínio de suporte. O id é atribuído
    pelo repositório no primeiro insert (None antes disso).

    Invariantes:
    - Assunto nunca vazio depois de sanitizado
    - Exatamente um dono (created_by), que nunca muda
    - Conteúdo só muda enquanto status == OPEN

    Attributes:
        id: Identificador inteiro atribuído pelo repositório
        subject: Assunto sanitizado, com prefixo "[Categoria - Subcategoria]"
        description: Descrição detalhada
        department: Departamento que atende o ticket
        category: Categoria da taxonomia (pode ser vazia)
        subcategory: Subcategoria da taxonomia (pode ser vazia)
        priority: Nível de prioridade
        status: Estado atual
        created_by: ID do usuário dono do ticket
        attachments: Chaves dos anexos no object storage, em ordem
        created_at: Data/hora de criação (UTC)
        updated_at: Data/hora da última alteração (UTC)

    Example:
        ticket = TicketEntity.create(
            subject="Need slip",
            description="March payslip missing",
            department=Department.FINANCE,
            priority=TicketPriority.MEDIUM,
            created_by=7,
            category="Payroll",
            subcategory="Salary Slip",
        )
        ticket.subject  # "[Payroll - Salary Slip] Need slip"
    """

    id: Optional[int] = None

    subject: str = ""
    description: str = ""
    department: Department = Department.ADMIN
    category: str = ""
    subcategory: str = ""

    priority: TicketPriority = TicketPriority.MEDIUM
    status: TicketStatus = TicketStatus.OPEN

    created_by: Optional[int] = None
    attachments: List[str] = field(default_factory=list)

    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def create(
        cls,
        subject: str,
        description: str,
        department: Department,
        priority: TicketPriority,
        created_by: int,
        category: str = "",
        subcategory: str = "",
        attachments: Optional[List[str]] = None,
    ) -> "TicketEntity":
        """
        Factory method para criar ticket aberto.

        Args:
            subject: Assunto bruto informado pelo usuário
            description: Descrição (espaços nas bordas removidos)
            department: Departamento de destino
            priority: Prioridade
            created_by: ID do dono
            category: Categoria já resolvida na taxonomia
            subcategory: Subcategoria já resolvida na taxonomia
            attachments: Chaves de anexos já enviados ao storage

        Returns:
            Nova instância com status OPEN e id None

        Raises:
            ValidationError: Se assunto ou descrição ficam vazios
        """
        clean_subject = cls._clean_subject(subject)
        clean_description = cls._clean_description(description)

        now = utc_now()
        return cls(
            subject=build_subject(clean_subject, category, subcategory),
            description=clean_description,
            department=department,
            category=category,
            subcategory=subcategory,
            priority=priority,
            status=TicketStatus.OPEN,
            created_by=created_by,
            attachments=list(attachments or []),
            created_at=now,
            updated_at=now,
        )

    @staticmethod
    def _clean_subject(subject: str) -> str:
        clean = sanitize_subject(subject)
        if not clean:
            raise ValidationError("Subject is empty after sanitization", field="subject")
        return clean

    @staticmethod
    def _clean_description(description: str) -> str:
        clean = (description or "").strip()
        if not clean:
            raise ValidationError("Description is required", field="description")
        return clean

    @property
    def is_open(self) -> bool:
        return self.status is TicketStatus.OPEN

    @property
    def subject_text(self) -> str:
        """Assunto sem o prefixo de classificação."""
        return split_subject_prefix(self.subject)[2]

    def apply_owner_changes(
        self,
        subject: Optional[str] = None,
        description: Optional[str] = None,
        department: Optional[Department] = None,
        priority: Optional[TicketPriority] = None,
        category: Optional[str] = None,
        subcategory: Optional[str] = None,
    ) -> List[str]:
        """
        Aplica alterações de conteúdo feitas pelo dono.

        None significa "não informado". O assunto é re-sanitizado e
        re-prefixado com a classificação efetiva (nova, ou a atual
        quando não informada); um prefixo já presente no texto é
        removido antes, de modo que prefixos nunca se acumulam.

        Returns:
            Nomes dos campos aceitos, na ordem de aplicação

        Raises:
            InvalidStateError: Se o ticket não está aberto
            ValidationError: Se assunto ou descrição ficam vazios
        """
        if not self.is_open:
            raise InvalidStateError("Only open tickets may be edited by their owner")

        accepted: List[str] = []

        if department is not None:
            self.department = department
            accepted.append("department")
        if priority is not None:
            self.priority = priority
            accepted.append("priority")
        if category is not None:
            self.category = category
            accepted.append("category")
        if subcategory is not None:
            self.subcategory = subcategory
            accepted.append("subcategory")
        if description is not None:
            self.description = self._clean_description(description)
            accepted.append("description")

        if subject is not None:
            text = self._clean_subject(split_subject_prefix(subject)[2])
            self.subject = build_subject(text, self.category, self.subcategory)
            accepted.append("subject")
        elif category is not None or subcategory is not None:
            self.subject = build_subject(self.subject_text, self.category, self.subcategory)

        return accepted

    def change_status(self, new_status: TicketStatus) -> TicketStatus:
        """
        Altera o status sem restrição de transição.

        Returns:
            Status anterior
        """
        old_status = self.status
        self.status = new_status
        return old_status

    def touch(self) -> None:
        """Atualiza timestamp de modificação."""
        self.updated_at = utc_now()

    def __repr__(self) -> str:
        return (
            f"TicketEntity("
            f"id={self.id}, "
            f"subject='{self.subject[:30]}', "
            f"department={self.department.value}, "
            f"status={self.status.value}, "
            f"priority={self.priority.value}"
            f")"
        )
