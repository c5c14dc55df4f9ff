"""
Repositórios Django para persistência de Tickets.

Implementam as interfaces (Ports) definidas no Core.
São DRIVEN ADAPTERS - acionados pelo Core em resposta a operações.

Responsabilidades:
- Implementar TicketRepository protocol
- Mapear entities para models e vice-versa
- Traduzir TicketScope/TicketFilters para Q objects
- Carregar donos em lote (sem N+1)

Princípios:
- Repository não contém lógica de negócio
- Usa Mapper para conversões
- Trata apenas persistência
"""

from typing import Dict, Iterable, List, Optional
import logging

from django.db import DatabaseError
from django.db.models import Q

from helpdesk.core.accounts.entities import UserEntity
from helpdesk.core.shared.exceptions import EntityNotFoundError, RepositoryError
from helpdesk.core.tickets.entities import TicketEntity
from helpdesk.core.tickets.queries import TicketFilters, TicketScope

from ..accounts.identity import DjangoIdentityResolver
from .models import TicketModel
from .mappers import TicketMapper

logger = logging.getLogger(__name__)


def scope_to_q(scope: TicketScope) -> Q:
    """Restrição de visibilidade como Q object (vazio = sem restrição)."""
    q = Q()
    if scope.created_by is not None:
        q &= Q(created_by_id=scope.created_by)
    if scope.department is not None:
        q &= Q(department=scope.department.value)
    return q


def filters_to_q(filters: Optional[TicketFilters]) -> Q:
    """
    Filtros como Q object.

    A busca textual usa icontains em assunto OU descrição.
    """
    q = Q()
    if filters is None:
        return q
    if filters.department is not None:
        q &= Q(department=filters.department.value)
    if filters.priority is not None:
        q &= Q(priority=filters.priority.value)
    if filters.status is not None:
        q &= Q(status=filters.status.value)
    if filters.search:
        q &= Q(subject__icontains=filters.search) | Q(description__icontains=filters.search)
    return q


class DjangoTicketRepository:
    """
    Implementação Django do TicketRepository.

    Implementa a interface definida em helpdesk/core/tickets/ports.py,
    usando Django ORM (PostgreSQL em produção, SQLite em testes).

    Example:
        repo = DjangoTicketRepository()

        ticket = repo.add(TicketEntity.create(...))
        found = repo.get_by_id(ticket.id)

        visible = repo.find_many(build_scope(actor), filters)
    """

    def __init__(self, identity_resolver: Optional[DjangoIdentityResolver] = None):
        self._mapper = TicketMapper()
        self._identity = identity_resolver or DjangoIdentityResolver()

    def add(self, ticket: TicketEntity) -> TicketEntity:
        """
        Insere ticket novo e devolve a entidade com id preenchido.

        Raises:
            RepositoryError: Se o insert falhar
        """
        model = self._mapper.to_model(ticket)
        try:
            model.save(force_insert=True)
        except DatabaseError as e:
            logger.error(f"Falha ao inserir ticket: {e}")
            raise RepositoryError(f"Could not insert ticket: {e}")

        ticket.id = model.pk
        logger.info(f"Ticket inserted: {ticket.id}")
        return ticket

    def save(self, ticket: TicketEntity) -> None:
        """
        Grava ticket existente (leitura + escrita única, last write wins).

        Raises:
            EntityNotFoundError: Se o ticket foi removido no meio tempo
            RepositoryError: Se o update falhar
        """
        try:
            model = TicketModel.objects.get(pk=ticket.id)
        except TicketModel.DoesNotExist:
            raise EntityNotFoundError(
                "Ticket not found",
                entity_type="Ticket",
                entity_id=ticket.id,
            )

        self._mapper.update_model(model, ticket)
        try:
            model.save()
        except DatabaseError as e:
            logger.error(f"Falha ao gravar ticket {ticket.id}: {e}")
            raise RepositoryError(f"Could not save ticket {ticket.id}: {e}")

        logger.debug(f"Ticket saved: {ticket.id}")

    def get_by_id(self, ticket_id: int) -> Optional[TicketEntity]:
        try:
            model = TicketModel.objects.get(pk=ticket_id)
        except TicketModel.DoesNotExist:
            logger.debug(f"Ticket not found: {ticket_id}")
            return None
        return self._mapper.to_entity(model)

    def delete(self, ticket_id: int) -> None:
        """
        Remove ticket do banco.

        Note:
            Não lança erro se ticket não existir
        """
        deleted_count, _ = TicketModel.objects.filter(pk=ticket_id).delete()

        if deleted_count > 0:
            logger.info(f"Ticket deleted: {ticket_id}")
        else:
            logger.debug(f"Ticket not found for deletion: {ticket_id}")

    def find_many(
        self,
        scope: TicketScope,
        filters: Optional[TicketFilters] = None,
    ) -> List[TicketEntity]:
        """Tickets do escopo com filtros em AND, mais recentes primeiro."""
        queryset = (
            TicketModel.objects
            .filter(scope_to_q(scope))
            .filter(filters_to_q(filters))
            .order_by('-created_at', '-id')
        )
        return self._mapper.to_entity_list(queryset)

    def get_creators(self, user_ids: Iterable[int]) -> Dict[int, UserEntity]:
        return self._identity.get_users(user_ids)

    def count(self) -> int:
        return TicketModel.objects.count()
