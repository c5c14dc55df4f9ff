"""
Testes do DjangoUnitOfWork: commit, rollback e entrega de eventos.
"""

import pytest

from helpdesk.adapters.django_app.events.publishers import InMemoryEventPublisher
from helpdesk.adapters.django_app.shared.unit_of_work import DjangoUnitOfWork
from helpdesk.adapters.django_app.tickets.models import TicketModel
from helpdesk.core.tickets.events import TicketDeletedEvent

pytestmark = pytest.mark.django_db


def _event():
    return TicketDeletedEvent(aggregate_id=1, deleted_by=1, department="HR")


def test_commit_publica_eventos(ticket_model_factory, employee_user):
    publisher = InMemoryEventPublisher()
    uow = DjangoUnitOfWork(event_publisher=publisher)

    with uow:
        ticket_model_factory(employee_user)
        uow.publish_event(_event())
        assert publisher.published_events == []

    assert uow.is_committed
    assert TicketModel.objects.count() == 1
    assert len(publisher.published_events) == 1


def test_rollback_desfaz_e_descarta_eventos(ticket_model_factory, employee_user):
    publisher = InMemoryEventPublisher()
    uow = DjangoUnitOfWork(event_publisher=publisher)

    with pytest.raises(RuntimeError):
        with uow:
            ticket_model_factory(employee_user)
            uow.publish_event(_event())
            raise RuntimeError("falha no meio")

    assert uow.is_rolled_back
    assert TicketModel.objects.count() == 0
    assert publisher.published_events == []


def test_reutilizavel_em_blocos_sequenciais(ticket_model_factory, employee_user):
    publisher = InMemoryEventPublisher()
    uow = DjangoUnitOfWork(event_publisher=publisher)

    with uow:
        uow.publish_event(_event())
    with uow:
        uow.publish_event(_event())

    assert len(publisher.published_events) == 2


def test_falha_do_publisher_nao_desfaz_commit(ticket_model_factory, employee_user):
    class BrokenPublisher(InMemoryEventPublisher):
        def publish(self, event):
            raise RuntimeError("publisher down")

    uow = DjangoUnitOfWork(event_publisher=BrokenPublisher())

    with uow:
        ticket_model_factory(employee_user)
        uow.publish_event(_event())

    assert TicketModel.objects.count() == 1


def test_sem_publisher(db):
    with DjangoUnitOfWork() as uow:
        uow.publish_event(_event())
    assert uow.is_committed
