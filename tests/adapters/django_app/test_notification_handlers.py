"""
Testes dos handlers de notificação e do conteúdo dos emails.

As tasks Celery são chamadas diretamente (execução síncrona), como
faz o publisher em modo "sync".
"""

from datetime import datetime, timezone
from unittest.mock import Mock, patch

import pytest
from django.core import mail
from kombu.exceptions import OperationalError

from helpdesk.adapters.django_app.events import emails
from helpdesk.adapters.django_app.events.handlers import (
    EVENT_HANDLERS,
    dispatch_domain_event,
    log_ticket_deleted,
    send_ticket_created_email,
    send_ticket_status_email,
)
from helpdesk.core.accounts.entities import Department, Role, UserEntity
from helpdesk.core.tickets.entities import TicketEntity, TicketPriority, TicketStatus


def _ticket(priority=TicketPriority.MEDIUM, ticket_id=42):
    ticket = TicketEntity.create(
        subject="Need slip",
        description="March payslip missing\nSecond line",
        department=Department.FINANCE,
        priority=priority,
        created_by=1,
        category="Payroll",
        subcategory="Salary Slip",
    )
    ticket.id = ticket_id
    ticket.created_at = datetime(2024, 3, 5, 14, 30, tzinfo=timezone.utc)
    return ticket


CREATOR = UserEntity(id=1, role=Role.EMPLOYEE, username="ana@example.com", name="Ana")


# =============================================================================
# Conteúdo dos emails
# =============================================================================

class TestEmailNovoTicket:

    def test_assunto_normal(self):
        assert emails.ticket_created_subject(_ticket()) == \
            "New Ticket #42: [Payroll - Salary Slip] Need slip"

    def test_assunto_urgente(self):
        subject = emails.ticket_created_subject(_ticket(TicketPriority.HIGH))
        assert subject.startswith("[URGENT] New Ticket #42")

    def test_corpo_texto(self):
        text = emails.ticket_created_text(_ticket(), CREATOR)

        assert "Ticket #42" in text
        assert "Priority: Medium" in text
        assert "Department: Finance" in text
        assert "Created By: Ana (EMPLOYEE)" in text
        assert "Category: Payroll" in text
        assert "Subcategory: Salary Slip" in text
        assert "http://helpdesk.test/login" in text
        assert "HIGH PRIORITY" not in text

    def test_corpo_texto_urgente(self):
        text = emails.ticket_created_text(_ticket(TicketPriority.HIGH), CREATOR)
        assert "HIGH PRIORITY TICKET - Requires immediate attention!" in text

    def test_criador_desconhecido(self):
        assert "Created By: Unknown user" in emails.ticket_created_text(_ticket(), None)

    def test_html_escapa_conteudo(self):
        ticket = _ticket()
        ticket.description = "<script>alert(1)</script>"

        html = emails.ticket_created_html(ticket, CREATOR)

        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_mensagem_com_copias_e_html(self):
        message = emails.build_ticket_created_email(_ticket(), CREATOR, "finance-desk@example.com")

        assert message.to == ["finance-desk@example.com"]
        assert message.cc == ["supervisor@example.com"]
        assert message.from_email == "helpdesk@example.com"
        assert message.alternatives[0][1] == "text/html"

    def test_caixa_do_departamento(self):
        assert emails.department_mailbox("HR") == "hr-desk@example.com"
        assert emails.department_mailbox("LEGAL") is None


class TestEmailMudancaDeStatus:

    def test_assunto(self):
        assert emails.ticket_status_subject(_ticket(), TicketStatus.CLOSED) == \
            "Ticket #42 Status Updated: CLOSED"

    def test_corpo_com_comentario(self):
        text = emails.ticket_status_text(
            _ticket(), TicketStatus.OPEN, TicketStatus.IN_PROGRESS, "Looking into it",
        )

        assert "Status: OPEN → IN_PROGRESS" in text
        assert "Comment: Looking into it" in text
        assert "http://helpdesk.test/my-tickets" in text

    def test_corpo_sem_comentario(self):
        text = emails.ticket_status_text(_ticket(), TicketStatus.OPEN, TicketStatus.CLOSED)
        assert "Comment:" not in text

    def test_mensagem_sem_copias(self):
        message = emails.build_ticket_status_email(
            _ticket(), "ana@example.com", TicketStatus.OPEN, TicketStatus.CLOSED,
        )
        assert message.to == ["ana@example.com"]
        assert message.cc == []


# =============================================================================
# Handlers (tasks)
# =============================================================================

def _created_data(department="FINANCE", ticket_id=42):
    return {
        "aggregate_id": str(ticket_id),
        "department": department,
        "priority": "MEDIUM",
    }


def _status_data(comment=None, ticket_id=42):
    return {
        "aggregate_id": str(ticket_id),
        "old_status": "OPEN",
        "new_status": "CLOSED",
        "comment": comment,
    }


@pytest.fixture
def loaders():
    """Substitui o acesso ao container (ticket e usuários) por stubs."""
    with patch("helpdesk.adapters.django_app.events.handlers._load_ticket") as load_ticket, \
            patch("helpdesk.adapters.django_app.events.handlers._load_user") as load_user:
        load_ticket.return_value = _ticket()
        load_user.return_value = CREATOR
        yield load_ticket, load_user


class TestSendTicketCreatedEmail:

    def test_envia_para_departamento(self, loaders):
        assert send_ticket_created_email(_created_data()) is True

        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == ["finance-desk@example.com"]

    def test_sem_caixa_configurada(self, loaders, settings):
        settings.DEPARTMENT_EMAILS = {"FINANCE": ""}

        assert send_ticket_created_email(_created_data()) is False
        assert mail.outbox == []

    def test_ticket_removido(self, loaders):
        loaders[0].return_value = None

        assert send_ticket_created_email(_created_data()) is False
        assert mail.outbox == []

    def test_falha_no_envio_nao_propaga(self, loaders):
        with patch("django.core.mail.EmailMultiAlternatives.send", side_effect=OSError("smtp down")):
            assert send_ticket_created_email(_created_data()) is False


class TestSendTicketStatusEmail:

    def test_envia_para_dono(self, loaders):
        assert send_ticket_status_email(_status_data("Done")) is True

        message = mail.outbox[0]
        assert message.to == ["ana@example.com"]
        assert "Comment: Done" in message.body

    def test_dono_sem_email(self, loaders):
        loaders[1].return_value = UserEntity(id=1, username="bruno")

        assert send_ticket_status_email(_status_data()) is False
        assert mail.outbox == []

    def test_dono_inexistente(self, loaders):
        loaders[1].return_value = None
        assert send_ticket_status_email(_status_data()) is False

    def test_falha_no_envio_nao_propaga(self, loaders):
        with patch("django.core.mail.EmailMultiAlternatives.send", side_effect=OSError("smtp down")):
            assert send_ticket_status_email(_status_data()) is False


class TestDispatcher:

    def test_handlers_registrados(self):
        assert set(EVENT_HANDLERS) == {
            "TicketCreatedEvent",
            "TicketStatusChangedEvent",
            "TicketDeletedEvent",
        }

    def test_roteia_para_handler(self):
        handler = Mock()
        with patch.dict(EVENT_HANDLERS, {"TicketCreatedEvent": handler}):
            dispatch_domain_event("TicketCreatedEvent", _created_data())

        handler.delay.assert_called_once_with(_created_data())

    def test_broker_indisponivel_pede_retry(self, caplog):
        handler = Mock()
        handler.delay.side_effect = OperationalError("broker down")

        # Chamada direta: retry() relança a exceção original
        with patch.dict(EVENT_HANDLERS, {"TicketCreatedEvent": handler}):
            with pytest.raises(OperationalError):
                dispatch_domain_event("TicketCreatedEvent", _created_data())

        assert "Broker indisponível para TicketCreatedEvent" in caplog.text

    def test_tipo_desconhecido(self, caplog):
        dispatch_domain_event("SomethingElseEvent", {})
        assert "Handler não encontrado" in caplog.text

    def test_auditoria_de_remocao(self, caplog):
        import logging

        with caplog.at_level(logging.INFO, logger="helpdesk.adapters.django_app.events.handlers"):
            log_ticket_deleted({"aggregate_id": "7", "department": "HR", "deleted_by": 3})

        assert "[AUDIT] TicketDeleted: 7" in caplog.text
