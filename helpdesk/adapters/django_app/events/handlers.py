"""
Event Handlers - Processadores de Eventos de Domínio.

Handlers são tasks Celery. Em modo "celery" rodam nos workers via
dispatch_domain_event; em modo "sync" são chamados diretamente pelo
LoggingEventPublisher logo após o commit.

Handlers de notificação:
- TicketCreatedEvent: email para a caixa do departamento (com cópias)
- TicketStatusChangedEvent: email para o dono do ticket
- TicketDeletedEvent: apenas registro de auditoria

Notificações são best effort: falha no envio é logada e nunca
desfaz a operação que gerou o evento.

Padrão:
    @shared_task(bind=True, ...)
    def send_<notificacao>(self, event_data: dict) -> bool:
        # Processar evento
"""

import logging
from typing import Any, Callable, Dict, Optional

from celery import shared_task
from kombu.exceptions import OperationalError

from helpdesk.core.accounts.entities import UserEntity
from helpdesk.core.shared.events import DomainEvent
from helpdesk.core.tickets.entities import TicketEntity, TicketStatus

from .emails import (
    build_ticket_created_email,
    build_ticket_status_email,
    department_mailbox,
)

logger = logging.getLogger(__name__)


def _load_ticket(ticket_id: Any) -> Optional[TicketEntity]:
    # Importação tardia para evitar circular import
    from helpdesk.config.container import get_container

    return get_container().ticket_repository().get_by_id(int(ticket_id))


def _load_user(user_id: Any) -> Optional[UserEntity]:
    from helpdesk.config.container import get_container

    if user_id is None:
        return None
    return get_container().identity_resolver().get_user(int(user_id))


# =============================================================================
# Event Handlers - Tickets
# =============================================================================

@shared_task(bind=True, acks_late=True)
def send_ticket_created_email(self, event_data: Dict[str, Any]) -> bool:
    """
    Handler para TicketCreatedEvent.

    Envia o aviso de novo ticket para a caixa do departamento, com
    CC_EMAILS em cópia. Assunto leva "[URGENT]" se prioridade HIGH.

    Returns:
        True se o email foi enviado
    """
    ticket_id = event_data.get('aggregate_id')
    department = event_data.get('department', '')

    logger.info(
        f"[HANDLER] TicketCreated: {ticket_id} | "
        f"Departamento: {department} | Prioridade: {event_data.get('priority')}"
    )

    to_address = department_mailbox(department)
    if not to_address:
        logger.warning(f"[HANDLER] Sem caixa de email para o departamento {department!r}")
        return False

    ticket = _load_ticket(ticket_id)
    if ticket is None:
        logger.info(f"[HANDLER] Ticket {ticket_id} não existe mais; email ignorado")
        return False

    try:
        creator = _load_user(ticket.created_by)
        message = build_ticket_created_email(ticket, creator, to_address)
        message.send()
    except Exception as e:
        logger.error(
            f"[NOTIFICATION] Falha ao enviar email do ticket {ticket_id}: {e}",
            exc_info=True,
        )
        return False

    logger.info(f"[NOTIFICATION] Email de novo ticket {ticket_id} enviado para {to_address}")
    return True


@shared_task(bind=True, acks_late=True)
def send_ticket_status_email(self, event_data: Dict[str, Any]) -> bool:
    """
    Handler para TicketStatusChangedEvent.

    O email só vai ao dono quando o username dele é um endereço de
    email (contém "@").

    Returns:
        True se o email foi enviado
    """
    ticket_id = event_data.get('aggregate_id')
    old_status = TicketStatus(event_data['old_status'])
    new_status = TicketStatus(event_data['new_status'])

    logger.info(
        f"[HANDLER] TicketStatusChanged: {ticket_id} | "
        f"{old_status.value} -> {new_status.value}"
    )

    ticket = _load_ticket(ticket_id)
    if ticket is None:
        logger.info(f"[HANDLER] Ticket {ticket_id} não existe mais; email ignorado")
        return False

    try:
        owner = _load_user(ticket.created_by)
        if owner is None or '@' not in owner.username:
            logger.info(f"[HANDLER] Dono do ticket {ticket_id} sem email; notificação ignorada")
            return False

        message = build_ticket_status_email(
            ticket,
            owner.username,
            old_status,
            new_status,
            event_data.get('comment'),
        )
        message.send()
    except Exception as e:
        logger.error(
            f"[NOTIFICATION] Falha ao enviar email de status do ticket {ticket_id}: {e}",
            exc_info=True,
        )
        return False

    logger.info(f"[NOTIFICATION] Email de status do ticket {ticket_id} enviado para {owner.username}")
    return True


@shared_task(bind=True, ignore_result=True)
def log_ticket_deleted(self, event_data: Dict[str, Any]) -> None:
    """Handler para TicketDeletedEvent (auditoria)."""
    logger.info(
        f"[AUDIT] TicketDeleted: {event_data.get('aggregate_id')} | "
        f"Departamento: {event_data.get('department')} | "
        f"Removido por: {event_data.get('deleted_by')}"
    )


EVENT_HANDLERS = {
    'TicketCreatedEvent': send_ticket_created_email,
    'TicketStatusChangedEvent': send_ticket_status_email,
    'TicketDeletedEvent': log_ticket_deleted,
}


# =============================================================================
# Event Dispatcher (Router)
# =============================================================================

@shared_task(bind=True, max_retries=5, default_retry_delay=30)
def dispatch_domain_event(self, event_type: str, event_data: Dict[str, Any]) -> None:
    """
    Dispatcher central para Domain Events.

    Ponto de entrada no worker: roteia o evento para o handler do tipo.
    Se o broker recusar o enfileiramento do handler, a task é
    reagendada (até max_retries, a cada default_retry_delay segundos).

    Args:
        event_type: Tipo do evento (ex: 'TicketCreatedEvent')
        event_data: Dados do evento serializado
    """
    handler = EVENT_HANDLERS.get(event_type)

    if handler:
        logger.info(f"[DISPATCHER] Roteando {event_type} para handler")
        try:
            handler.delay(event_data)
        except OperationalError as exc:
            logger.warning(f"[DISPATCHER] Broker indisponível para {event_type}: {exc}")
            raise self.retry(exc=exc)
    else:
        logger.warning(f"[DISPATCHER] Handler não encontrado para {event_type}")


def _run_inline(task) -> Callable[[DomainEvent], None]:
    def handler(event: DomainEvent) -> None:
        task(event.to_dict())
    return handler


def register_local_handlers(publisher) -> None:
    """
    Registra os handlers para execução no próprio processo.

    Usado pelo publisher em modo "sync": a task é chamada diretamente,
    sem passar pelo broker.
    """
    for event_type, task in EVENT_HANDLERS.items():
        publisher.register_handler(event_type, _run_inline(task))
