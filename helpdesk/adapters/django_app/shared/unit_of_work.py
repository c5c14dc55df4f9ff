"""
Unit of Work - Implementação Django.

Gerencia a transação de escrita de um use case e a entrega dos
eventos de domínio.

Responsabilidades:
- Abrir/fechar um bloco transaction.atomic
- Commit/Rollback coordenado
- Publicar eventos somente após commit bem-sucedido

Falhas de publicação são registradas em log e nunca desfazem a
operação: notificações são best-effort.
"""

from typing import List, Optional
import logging

from django.db import transaction

from helpdesk.core.shared.events import DomainEvent
from helpdesk.core.shared.interfaces import EventPublisher, UnitOfWork

logger = logging.getLogger(__name__)


def _deliver(event_publisher: Optional[EventPublisher], events: List[DomainEvent]) -> None:
    for event in events:
        logger.info(
            f"Publishing event: {event.event_type} "
            f"for aggregate {event.aggregate_id}"
        )
        if event_publisher is None:
            continue
        try:
            event_publisher.publish(event)
        except Exception as e:
            logger.error(f"Failed to publish event {event.event_type}: {e}")


class DjangoUnitOfWork(UnitOfWork):
    """
    Implementação Django do Unit of Work.

    Usa django.db.transaction.atomic, o que permite aninhar a UoW
    dentro de outras transações (inclusive a dos testes).
    A mesma instância pode ser reutilizada em blocos sequenciais.

    Example:
        with DjangoUnitOfWork(event_publisher=publisher) as uow:
            repo.add(ticket)
            uow.publish_event(TicketCreatedEvent(...))
        # Commit automático + eventos publicados

    Example com rollback:
        with DjangoUnitOfWork() as uow:
            repo.add(ticket)
            uow.publish_event(TicketCreatedEvent(...))
            raise RepositoryError("Erro!")
        # Rollback automático, eventos descartados
    """

    def __init__(self, event_publisher: Optional[EventPublisher] = None, using: Optional[str] = None):
        """
        Args:
            event_publisher: Publicador de eventos (logging, Celery)
            using: Alias do banco (default do Django quando None)
        """
        super().__init__()
        self._event_publisher = event_publisher
        self._using = using
        self._atomic = None
        self._committed = False
        self._rolled_back = False

    def _begin_transaction(self) -> None:
        self._committed = False
        self._rolled_back = False
        self._atomic = transaction.atomic(using=self._using)
        self._atomic.__enter__()
        logger.debug("Transaction started")

    def commit(self) -> None:
        """
        Persiste as mudanças e publica eventos.

        Ordem de execução:
        1. Fecha o bloco atômico (commit no banco)
        2. Publica eventos enfileirados
        3. Limpa estado interno
        """
        if self._committed or self._rolled_back:
            logger.warning("Transaction already finalized")
            return

        if self._atomic is not None:
            atomic, self._atomic = self._atomic, None
            atomic.__exit__(None, None, None)
            logger.debug("Transaction committed")

        self._committed = True
        events = self.collect_events()
        self.clear_events()
        _deliver(self._event_publisher, events)

    def rollback(self) -> None:
        """Desfaz as mudanças e descarta eventos."""
        if self._committed or self._rolled_back:
            return

        try:
            if self._atomic is not None:
                atomic, self._atomic = self._atomic, None
                atomic.__exit__(RuntimeError, RuntimeError("rollback"), None)
                logger.debug("Transaction rolled back")
        finally:
            self._rolled_back = True
            self.clear_events()

    @property
    def is_committed(self) -> bool:
        return self._committed

    @property
    def is_rolled_back(self) -> bool:
        return self._rolled_back


class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of Work em memória para testes.

    Não persiste nada - apenas simula o comportamento para testes
    unitários sem banco de dados. Eventos "publicados" ficam em
    published_events e, se houver publisher, são entregues a ele.

    Example:
        uow = InMemoryUnitOfWork()
        with uow:
            uow.publish_event(event)

        assert uow.committed
        assert len(uow.published_events) == 1
    """

    def __init__(self, event_publisher: Optional[EventPublisher] = None):
        super().__init__()
        self._event_publisher = event_publisher
        self._committed = False
        self._rolled_back = False
        self._published_events: List[DomainEvent] = []

    def _begin_transaction(self) -> None:
        self._committed = False
        self._rolled_back = False

    def commit(self) -> None:
        self._committed = True
        events = self.collect_events()
        self.clear_events()
        self._published_events.extend(events)
        _deliver(self._event_publisher, events)

    def rollback(self) -> None:
        self._rolled_back = True
        self.clear_events()

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def rolled_back(self) -> bool:
        return self._rolled_back

    @property
    def published_events(self) -> List[DomainEvent]:
        """Eventos entregues após commit, em ordem."""
        return self._published_events

    def reset(self) -> None:
        """Reset para próximo teste."""
        self._committed = False
        self._rolled_back = False
        self._published_events.clear()
        self.clear_events()
