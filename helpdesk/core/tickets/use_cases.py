"""
Use Cases (Application Services) do Domínio de Tickets.

Este módulo contém os casos de uso da aplicação, que orquestram
a lógica de negócio coordenando entidades, repositórios e eventos.

Use Cases implementados:
- CreateTicketService: Cria ticket (com upload de anexos)
- GetTicketService: Obtém ticket específico
- UpdateTicketService: Conteúdo pelo dono, status pelo gerente
- DeleteTicketService: Remove ticket
- ListTicketsService: Lista tickets escopados e filtrados
- TicketStatsService: Contagens do dashboard

Responsabilidades dos Use Cases:
- Exigir identidade (AuthenticationRequiredError quando ausente)
- Aplicar a política de autorização
- Gerenciar transações (via UoW)
- Disparar eventos de domínio
- Retornar DTOs de saída

Princípios:
- Um Use Case = Uma operação de negócio
- Dependências injetadas (DI)
- Sem lógica de infraestrutura
"""

import logging
from typing import Iterable, List, Optional

from helpdesk.core.accounts.entities import Department, UserEntity
from helpdesk.core.accounts.policy import can_access, can_manage_ticket, is_owner
from helpdesk.core.shared.exceptions import (
    AuthenticationRequiredError,
    EntityNotFoundError,
    InvalidStateError,
    MissingFieldsError,
    NoValidFieldsError,
    PermissionDeniedError,
)
from helpdesk.core.shared.interfaces import UnitOfWork

from . import taxonomy
from .attachments import DEFAULT_URL_TTL, presign_all, upload_all
from .dtos import (
    CreateTicketInputDTO,
    TicketOutputDTO,
    TicketQueryDTO,
    TicketStatsDTO,
    UpdateTicketInputDTO,
)
from .entities import TicketEntity, TicketPriority, TicketStatus
from .events import TicketCreatedEvent, TicketDeletedEvent, TicketStatusChangedEvent
from .ports import ObjectStorage, TicketRepository
from .queries import TicketFilters, build_scope, compute_stats

logger = logging.getLogger(__name__)


def _require_actor(actor: Optional[UserEntity]) -> UserEntity:
    if actor is None:
        raise AuthenticationRequiredError()
    return actor


def _get_or_404(ticket_repo: TicketRepository, ticket_id: int) -> TicketEntity:
    ticket = ticket_repo.get_by_id(ticket_id)
    if not ticket:
        raise EntityNotFoundError(
            "Ticket not found",
            entity_type="Ticket",
            entity_id=ticket_id,
        )
    return ticket


def present_tickets(
    ticket_repo: TicketRepository,
    storage: ObjectStorage,
    tickets: Iterable[TicketEntity],
    url_ttl: int = DEFAULT_URL_TTL,
) -> List[TicketOutputDTO]:
    """
    Converte entidades em DTOs de saída.

    Carrega os donos em lote e troca as chaves dos anexos por
    URLs pré-assinadas.
    """
    tickets = list(tickets)
    creators = ticket_repo.get_creators({t.created_by for t in tickets})
    return [
        TicketOutputDTO.from_entity(
            ticket,
            creator=creators.get(ticket.created_by),
            attachment_urls=presign_all(storage, ticket.attachments, url_ttl),
        )
        for ticket in tickets
    ]


class CreateTicketService:
    """
    Use Case: Criar um novo ticket.

    Fluxo:
    1. Exigir identidade
    2. Validar campos obrigatórios, enums e taxonomia
    3. Montar entidade (assunto sanitizado e prefixado)
    4. Enviar todos os anexos ao object storage
    5. Persistir via repositório, dentro da UoW
    6. Disparar TicketCreatedEvent (publicado após commit)

    Example:
        service = CreateTicketService(ticket_repo, uow, storage)
        output = service.execute(actor, CreateTicketInputDTO(
            subject="Need slip",
            description="March payslip missing",
            department="FINANCE",
            priority="MEDIUM",
            category="Payroll",
            subcategory="Salary Slip",
        ))
        output.subject  # "[Payroll - Salary Slip] Need slip"
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        uow: UnitOfWork,
        storage: ObjectStorage,
        url_ttl: int = DEFAULT_URL_TTL,
        strict_taxonomy: bool = False,
    ):
        self.ticket_repo = ticket_repo
        self.uow = uow
        self.storage = storage
        self.url_ttl = url_ttl
        self.strict_taxonomy = strict_taxonomy

    def execute(
        self,
        actor: Optional[UserEntity],
        input_dto: CreateTicketInputDTO,
    ) -> TicketOutputDTO:
        """
        Executa criação de ticket.

        Raises:
            AuthenticationRequiredError: Sem identidade
            MissingFieldsError: Campos obrigatórios ausentes
            ValidationError: Departamento/prioridade inválidos, assunto vazio
                após sanitização, ou taxonomia inválida em modo estrito
            StorageError: Falha no upload (nenhum ticket é gravado)
        """
        actor = _require_actor(actor)

        missing = input_dto.missing_fields()
        if missing:
            raise MissingFieldsError(missing)

        department = Department.from_string(input_dto.department)
        priority = TicketPriority.from_string(input_dto.priority)
        category, subcategory = taxonomy.resolve(
            department,
            input_dto.category,
            input_dto.subcategory,
            strict=self.strict_taxonomy,
        )

        ticket = TicketEntity.create(
            subject=input_dto.subject,
            description=input_dto.description,
            department=department,
            priority=priority,
            created_by=actor.id,
            category=category,
            subcategory=subcategory,
        )

        ticket.attachments = upload_all(self.storage, input_dto.attachments)

        with self.uow:
            self.ticket_repo.add(ticket)
            self.uow.publish_event(
                TicketCreatedEvent(
                    aggregate_id=ticket.id,
                    created_by=ticket.created_by,
                    subject=ticket.subject,
                    department=ticket.department.value,
                    priority=ticket.priority.value,
                )
            )

        logger.info(
            f"Ticket #{ticket.id} criado por usuário {actor.id} "
            f"({ticket.department.value}, {ticket.priority.value}, "
            f"{len(ticket.attachments)} anexos)"
        )

        return TicketOutputDTO.from_entity(
            ticket,
            creator=actor,
            attachment_urls=presign_all(self.storage, ticket.attachments, self.url_ttl),
        )


class GetTicketService:
    """
    Use Case: Obter ticket específico.

    Acesso permitido ao dono ou a um gerente do departamento do ticket.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        storage: ObjectStorage,
        url_ttl: int = DEFAULT_URL_TTL,
    ):
        self.ticket_repo = ticket_repo
        self.storage = storage
        self.url_ttl = url_ttl

    def execute(self, actor: Optional[UserEntity], ticket_id: int) -> TicketOutputDTO:
        """
        Raises:
            AuthenticationRequiredError: Sem identidade
            EntityNotFoundError: Se ticket não existe
            PermissionDeniedError: Se ator não pode acessar
        """
        actor = _require_actor(actor)
        ticket = _get_or_404(self.ticket_repo, ticket_id)

        if not can_access(actor, ticket):
            raise PermissionDeniedError()

        return present_tickets(self.ticket_repo, self.storage, [ticket], self.url_ttl)[0]


class UpdateTicketService:
    """
    Use Case: Atualizar ticket.

    Regras:
    - Gerente do departamento (ou SYSTEM_ADMIN) pode alterar o status,
      para qualquer valor, a qualquer momento
    - Dono pode alterar o conteúdo enquanto o ticket está OPEN
    - Dono que não é gerente recebe InvalidStateError fora de OPEN
    - Campos que o ator não pode alterar são ignorados; se nada
      sobrar, NoValidFieldsError (comentário sozinho não conta)

    O comentário acompanha apenas a notificação de mudança de status.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        uow: UnitOfWork,
        storage: ObjectStorage,
        url_ttl: int = DEFAULT_URL_TTL,
        strict_taxonomy: bool = False,
    ):
        self.ticket_repo = ticket_repo
        self.uow = uow
        self.storage = storage
        self.url_ttl = url_ttl
        self.strict_taxonomy = strict_taxonomy

    def execute(
        self,
        actor: Optional[UserEntity],
        input_dto: UpdateTicketInputDTO,
    ) -> TicketOutputDTO:
        """
        Executa atualização.

        Raises:
            AuthenticationRequiredError: Sem identidade
            EntityNotFoundError: Se ticket não existe
            PermissionDeniedError: Nem dono nem gerente autorizado
            InvalidStateError: Dono (não gerente) com ticket fora de OPEN
            NoValidFieldsError: Nenhum campo aplicável
            ValidationError: Valores inválidos
        """
        actor = _require_actor(actor)
        ticket = _get_or_404(self.ticket_repo, input_dto.ticket_id)

        owner = is_owner(actor, ticket)
        manager = can_manage_ticket(actor, ticket)

        if not owner and not manager:
            raise PermissionDeniedError()

        if owner and not manager and not ticket.is_open:
            raise InvalidStateError("Only open tickets may be edited by their owner")

        accepted: List[str] = []

        # Conteúdo primeiro: o estado editável é o de antes da mudança de status
        if owner and ticket.is_open and input_dto.has_content_fields:
            accepted.extend(self._apply_content(ticket, input_dto))

        old_status: Optional[TicketStatus] = None
        if manager and input_dto.status is not None:
            old_status = ticket.change_status(TicketStatus.from_string(input_dto.status))
            accepted.append("status")

        if not accepted:
            raise NoValidFieldsError()

        ticket.touch()
        status_changed = old_status is not None and old_status != ticket.status

        with self.uow:
            self.ticket_repo.save(ticket)
            if status_changed:
                self.uow.publish_event(
                    TicketStatusChangedEvent(
                        aggregate_id=ticket.id,
                        old_status=old_status.value,
                        new_status=ticket.status.value,
                        comment=input_dto.comment,
                        changed_by=actor.id,
                    )
                )

        logger.info(
            f"Ticket #{ticket.id} atualizado por usuário {actor.id}: "
            f"{', '.join(accepted)}"
        )

        return present_tickets(self.ticket_repo, self.storage, [ticket], self.url_ttl)[0]

    def _apply_content(
        self,
        ticket: TicketEntity,
        input_dto: UpdateTicketInputDTO,
    ) -> List[str]:
        department = (
            Department.from_string(input_dto.department)
            if input_dto.department is not None else None
        )
        priority = (
            TicketPriority.from_string(input_dto.priority)
            if input_dto.priority is not None else None
        )

        category = input_dto.category
        subcategory = input_dto.subcategory
        if department is not None or category is not None or subcategory is not None:
            resolved_category, resolved_subcategory = taxonomy.resolve(
                department or ticket.department,
                category if category is not None else ticket.category,
                subcategory if subcategory is not None else ticket.subcategory,
                strict=self.strict_taxonomy,
            )
            if category is not None:
                category = resolved_category
            if subcategory is not None:
                subcategory = resolved_subcategory

        return ticket.apply_owner_changes(
            subject=input_dto.subject,
            description=input_dto.description,
            department=department,
            priority=priority,
            category=category,
            subcategory=subcategory,
        )


class DeleteTicketService:
    """
    Use Case: Remover ticket.

    Mesma regra de acesso da leitura (dono OU gerente autorizado).
    Remoção física; dispara TicketDeletedEvent para auditoria.
    """

    def __init__(self, ticket_repo: TicketRepository, uow: UnitOfWork):
        self.ticket_repo = ticket_repo
        self.uow = uow

    def execute(self, actor: Optional[UserEntity], ticket_id: int) -> None:
        actor = _require_actor(actor)
        ticket = _get_or_404(self.ticket_repo, ticket_id)

        if not can_access(actor, ticket):
            raise PermissionDeniedError()

        with self.uow:
            self.ticket_repo.delete(ticket.id)
            self.uow.publish_event(
                TicketDeletedEvent(
                    aggregate_id=ticket.id,
                    deleted_by=actor.id,
                    department=ticket.department.value,
                )
            )

        logger.info(f"Ticket #{ticket.id} removido por usuário {actor.id}")


class ListTicketsService:
    """
    Use Case: Listar tickets visíveis ao ator.

    Filtros são combinados com AND ao escopo: um gerente que filtra
    outro departamento recebe lista vazia.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        storage: ObjectStorage,
        url_ttl: int = DEFAULT_URL_TTL,
    ):
        self.ticket_repo = ticket_repo
        self.storage = storage
        self.url_ttl = url_ttl

    def execute(
        self,
        actor: Optional[UserEntity],
        query: TicketQueryDTO,
    ) -> List[TicketOutputDTO]:
        actor = _require_actor(actor)
        filters = TicketFilters.from_query(query)
        scope = build_scope(actor, query.my_tickets)

        tickets = self.ticket_repo.find_many(scope, filters)
        return present_tickets(self.ticket_repo, self.storage, tickets, self.url_ttl)


class TicketStatsService:
    """Use Case: Estatísticas do dashboard sobre o conjunto escopado."""

    def __init__(self, ticket_repo: TicketRepository):
        self.ticket_repo = ticket_repo

    def execute(self, actor: Optional[UserEntity], my_tickets: bool = False) -> TicketStatsDTO:
        actor = _require_actor(actor)
        scope = build_scope(actor, my_tickets)
        return compute_stats(self.ticket_repo.find_many(scope))
