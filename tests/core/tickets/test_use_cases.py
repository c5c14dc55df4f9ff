"""
Testes Unitários para Use Cases do Domínio de Tickets.

Estratégia de Teste:
- Usa InMemoryTicketRepository e InMemoryObjectStorage (fakes)
- Usa InMemoryUnitOfWork para verificar commit e eventos publicados
- Testa cenários de sucesso e erro de autorização/validação

Coverage:
- CreateTicketService
- GetTicketService
- UpdateTicketService
- DeleteTicketService
- ListTicketsService
- TicketStatsService
"""

import pytest

from helpdesk.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork
from helpdesk.core.shared.exceptions import (
    AuthenticationRequiredError,
    EntityNotFoundError,
    InvalidStateError,
    MissingFieldsError,
    NoValidFieldsError,
    PermissionDeniedError,
    StorageError,
    ValidationError,
)
from helpdesk.core.tickets.attachments import build_key, upload_all
from helpdesk.core.tickets.dtos import (
    AttachmentUploadDTO,
    CreateTicketInputDTO,
    TicketQueryDTO,
    UpdateTicketInputDTO,
)
from helpdesk.core.tickets.events import (
    TicketCreatedEvent,
    TicketDeletedEvent,
    TicketStatusChangedEvent,
)
from helpdesk.core.tickets.ports import InMemoryObjectStorage, InMemoryTicketRepository
from helpdesk.core.tickets.use_cases import (
    CreateTicketService,
    DeleteTicketService,
    GetTicketService,
    ListTicketsService,
    TicketStatsService,
    UpdateTicketService,
)


@pytest.fixture
def ticket_repo(employee, other_employee, finance_manager, hr_manager, system_admin):
    """Repositório em memória com os usuários conhecidos."""
    return InMemoryTicketRepository(
        users=[employee, other_employee, finance_manager, hr_manager, system_admin]
    )


@pytest.fixture
def uow():
    return InMemoryUnitOfWork()


@pytest.fixture
def storage():
    return InMemoryObjectStorage()


@pytest.fixture
def create_service(ticket_repo, uow, storage):
    return CreateTicketService(ticket_repo, uow, storage)


@pytest.fixture
def update_service(ticket_repo, uow, storage):
    return UpdateTicketService(ticket_repo, uow, storage)


def _create_input(**overrides):
    data = dict(
        subject="Need slip",
        description="March payslip missing",
        department="FINANCE",
        priority="MEDIUM",
        category="Payroll",
        subcategory="Salary Slip",
    )
    data.update(overrides)
    return CreateTicketInputDTO(**data)


@pytest.fixture
def finance_ticket(create_service, employee, uow):
    """Ticket do employee no Financeiro; eventos de criação descartados."""
    output = create_service.execute(employee, _create_input())
    uow.reset()
    return output


class TestCreateTicketService:
    """Testes para CreateTicketService."""

    def test_criar_ticket_sucesso(self, create_service, employee):
        output = create_service.execute(employee, _create_input())

        assert output.id == 1
        assert output.subject == "[Payroll - Salary Slip] Need slip"
        assert output.status == "OPEN"
        assert output.department == "FINANCE"
        assert output.created_by == employee.id
        assert output.user == employee.to_summary()

    def test_criar_ticket_persiste_no_repositorio(self, create_service, ticket_repo, employee):
        output = create_service.execute(employee, _create_input())

        stored = ticket_repo.get_by_id(output.id)
        assert stored is not None
        assert stored.category == "Payroll"
        assert stored.subcategory == "Salary Slip"

    def test_criar_ticket_publica_evento_apos_commit(self, create_service, uow, employee):
        output = create_service.execute(employee, _create_input(priority="HIGH"))

        assert uow.committed is True
        assert len(uow.published_events) == 1
        event = uow.published_events[0]
        assert isinstance(event, TicketCreatedEvent)
        assert event.aggregate_id == str(output.id)
        assert event.priority == "HIGH"
        assert event.department == "FINANCE"

    def test_criar_ticket_sem_identidade(self, create_service):
        with pytest.raises(AuthenticationRequiredError):
            create_service.execute(None, _create_input())

    def test_criar_ticket_campos_ausentes(self, create_service, employee):
        with pytest.raises(MissingFieldsError) as exc_info:
            create_service.execute(employee, _create_input(subject="  ", priority=""))

        assert exc_info.value.fields == ["subject", "priority"]

    def test_criar_ticket_departamento_invalido(self, create_service, employee):
        with pytest.raises(ValidationError) as exc_info:
            create_service.execute(employee, _create_input(department="LEGAL"))
        assert exc_info.value.field == "department"

    def test_criar_ticket_taxonomia_leniente(self, create_service, employee):
        output = create_service.execute(
            employee, _create_input(category="Payroll", subcategory="Bonus")
        )
        assert output.subject == "[Payroll - Bonus] Need slip"

    def test_criar_ticket_taxonomia_estrita(self, ticket_repo, uow, storage, employee):
        service = CreateTicketService(ticket_repo, uow, storage, strict_taxonomy=True)

        with pytest.raises(ValidationError):
            service.execute(employee, _create_input(subcategory="Bonus"))
        assert ticket_repo.count() == 0

    def test_criar_ticket_com_anexos(self, create_service, storage, ticket_repo, employee):
        dto = _create_input(attachments=(
            AttachmentUploadDTO("log.txt", b"hello", "text/plain"),
            AttachmentUploadDTO("shot.png", b"\x89PNG", "image/png"),
        ))

        output = create_service.execute(employee, dto)

        keys = ticket_repo.get_by_id(output.id).attachments
        assert len(keys) == 2
        assert all(key.startswith("tickets/") for key in keys)
        assert keys[0].endswith("-log.txt")
        assert storage.objects[keys[0]] == b"hello"
        assert storage.content_types[keys[1]] == "image/png"
        assert output.attachments == [f"memory://{key}?expires_in=300" for key in keys]

    def test_falha_no_upload_nao_grava_ticket(self, ticket_repo, uow, employee):
        storage = InMemoryObjectStorage(failing_keys=["broken"])
        service = CreateTicketService(ticket_repo, uow, storage)
        dto = _create_input(attachments=(
            AttachmentUploadDTO("ok.txt", b"1", "text/plain"),
            AttachmentUploadDTO("broken.txt", b"2", "text/plain"),
        ))

        with pytest.raises(StorageError):
            service.execute(employee, dto)

        assert ticket_repo.count() == 0
        assert uow.published_events == []

    def test_validacao_antes_do_upload(self, create_service, storage, employee):
        dto = _create_input(
            priority="URGENT",
            attachments=(AttachmentUploadDTO("log.txt", b"x", "text/plain"),),
        )

        with pytest.raises(ValidationError):
            create_service.execute(employee, dto)

        assert storage.objects == {}


class TestGetTicketService:

    @pytest.fixture
    def service(self, ticket_repo, storage):
        return GetTicketService(ticket_repo, storage)

    def test_dono_obtem(self, service, finance_ticket, employee):
        assert service.execute(employee, finance_ticket.id).id == finance_ticket.id

    def test_gerente_do_departamento_obtem(self, service, finance_ticket, finance_manager):
        output = service.execute(finance_manager, finance_ticket.id)
        assert output.user["id"] == finance_ticket.created_by

    def test_gerente_de_outro_departamento_negado(self, service, finance_ticket, hr_manager):
        with pytest.raises(PermissionDeniedError):
            service.execute(hr_manager, finance_ticket.id)

    def test_outro_employee_negado(self, service, finance_ticket, other_employee):
        with pytest.raises(PermissionDeniedError):
            service.execute(other_employee, finance_ticket.id)

    def test_inexistente(self, service, employee):
        with pytest.raises(EntityNotFoundError):
            service.execute(employee, 404)

    def test_presign_falho_omite_anexo(self, ticket_repo, finance_ticket, employee):
        ticket = ticket_repo.get_by_id(finance_ticket.id)
        ticket.attachments = ["tickets/1-missing.txt"]
        ticket_repo.save(ticket)

        output = GetTicketService(ticket_repo, InMemoryObjectStorage()).execute(employee, ticket.id)

        assert output.attachments == []


class TestUpdateTicketService:
    """Testes para UpdateTicketService."""

    def test_dono_altera_conteudo(self, update_service, finance_ticket, employee, uow):
        output = update_service.execute(employee, UpdateTicketInputDTO(
            ticket_id=finance_ticket.id,
            description="Also February",
            priority="HIGH",
        ))

        assert output.description == "Also February"
        assert output.priority == "HIGH"
        assert uow.committed is True
        assert uow.published_events == []

    def test_dono_altera_assunto_refaz_prefixo(self, update_service, finance_ticket, employee):
        output = update_service.execute(employee, UpdateTicketInputDTO(
            ticket_id=finance_ticket.id,
            subject="[Payroll - Salary Slip] Slip for April",
            subcategory="Tax Deduction",
        ))

        assert output.subject == "[Payroll - Tax Deduction] Slip for April"

    def test_dono_nao_altera_status(self, update_service, finance_ticket, employee):
        with pytest.raises(NoValidFieldsError):
            update_service.execute(employee, UpdateTicketInputDTO(
                ticket_id=finance_ticket.id,
                status="CLOSED",
            ))

    def test_gerente_altera_status_publica_evento(
        self, update_service, finance_ticket, finance_manager, uow
    ):
        output = update_service.execute(finance_manager, UpdateTicketInputDTO(
            ticket_id=finance_ticket.id,
            status="IN_PROGRESS",
            comment="Looking into it",
        ))

        assert output.status == "IN_PROGRESS"
        assert len(uow.published_events) == 1
        event = uow.published_events[0]
        assert isinstance(event, TicketStatusChangedEvent)
        assert event.old_status == "OPEN"
        assert event.new_status == "IN_PROGRESS"
        assert event.comment == "Looking into it"
        assert event.changed_by == finance_manager.id

    def test_status_igual_nao_publica_evento(
        self, update_service, finance_ticket, finance_manager, uow
    ):
        update_service.execute(finance_manager, UpdateTicketInputDTO(
            ticket_id=finance_ticket.id,
            status="OPEN",
        ))

        assert uow.committed is True
        assert uow.published_events == []

    def test_gerente_ignora_campos_de_conteudo(
        self, update_service, finance_ticket, finance_manager
    ):
        output = update_service.execute(finance_manager, UpdateTicketInputDTO(
            ticket_id=finance_ticket.id,
            description="Manager rewrite",
            status="ON_HOLD",
        ))

        assert output.description == "March payslip missing"
        assert output.status == "ON_HOLD"

    def test_gerente_so_com_conteudo_sem_campos_validos(
        self, update_service, finance_ticket, finance_manager
    ):
        with pytest.raises(NoValidFieldsError):
            update_service.execute(finance_manager, UpdateTicketInputDTO(
                ticket_id=finance_ticket.id,
                subject="Manager subject",
            ))

    def test_dono_com_ticket_fechado_invalid_state(
        self, update_service, finance_ticket, finance_manager, employee
    ):
        update_service.execute(finance_manager, UpdateTicketInputDTO(
            ticket_id=finance_ticket.id, status="CLOSED",
        ))

        with pytest.raises(InvalidStateError):
            update_service.execute(employee, UpdateTicketInputDTO(
                ticket_id=finance_ticket.id, description="Reopen please",
            ))

    def test_comentario_sozinho_nao_e_alteracao(self, update_service, finance_ticket, employee):
        with pytest.raises(NoValidFieldsError):
            update_service.execute(employee, UpdateTicketInputDTO(
                ticket_id=finance_ticket.id, comment="Any news?",
            ))

    def test_terceiro_negado(self, update_service, finance_ticket, hr_manager):
        with pytest.raises(PermissionDeniedError):
            update_service.execute(hr_manager, UpdateTicketInputDTO(
                ticket_id=finance_ticket.id, status="CLOSED",
            ))

    def test_gerente_dono_altera_tudo(
        self, ticket_repo, uow, storage, create_service, update_service, finance_manager
    ):
        own = create_service.execute(finance_manager, _create_input())
        uow.reset()

        output = update_service.execute(finance_manager, UpdateTicketInputDTO(
            ticket_id=own.id,
            description="Updated by owner",
            status="IN_PROGRESS",
        ))

        assert output.description == "Updated by owner"
        assert output.status == "IN_PROGRESS"

    def test_sistema_admin_reabre_ticket_fechado(
        self, update_service, finance_ticket, system_admin
    ):
        update_service.execute(system_admin, UpdateTicketInputDTO(
            ticket_id=finance_ticket.id, status="CLOSED",
        ))
        output = update_service.execute(system_admin, UpdateTicketInputDTO(
            ticket_id=finance_ticket.id, status="OPEN",
        ))
        assert output.status == "OPEN"

    def test_status_invalido(self, update_service, finance_ticket, finance_manager):
        with pytest.raises(ValidationError):
            update_service.execute(finance_manager, UpdateTicketInputDTO(
                ticket_id=finance_ticket.id, status="RESOLVED",
            ))

    def test_atualiza_updated_at(self, update_service, finance_ticket, employee):
        output = update_service.execute(employee, UpdateTicketInputDTO(
            ticket_id=finance_ticket.id, description="New text",
        ))
        assert output.updated_at >= finance_ticket.updated_at

    def test_from_dict_strings_vazias_ignoradas(self):
        dto = UpdateTicketInputDTO.from_dict(3, {"subject": "", "status": "CLOSED"})

        assert dto.subject is None
        assert dto.status == "CLOSED"
        assert dto.has_content_fields is False

    def test_from_dict_tipo_invalido(self):
        with pytest.raises(ValidationError):
            UpdateTicketInputDTO.from_dict(3, {"priority": 5})


class TestDeleteTicketService:

    def test_dono_remove(self, ticket_repo, uow, finance_ticket, employee):
        DeleteTicketService(ticket_repo, uow).execute(employee, finance_ticket.id)

        assert ticket_repo.get_by_id(finance_ticket.id) is None
        assert isinstance(uow.published_events[0], TicketDeletedEvent)

    def test_gerente_remove(self, ticket_repo, uow, finance_ticket, finance_manager):
        DeleteTicketService(ticket_repo, uow).execute(finance_manager, finance_ticket.id)
        assert ticket_repo.count() == 0

    def test_terceiro_negado(self, ticket_repo, uow, finance_ticket, other_employee):
        with pytest.raises(PermissionDeniedError):
            DeleteTicketService(ticket_repo, uow).execute(other_employee, finance_ticket.id)
        assert ticket_repo.count() == 1

    def test_inexistente(self, ticket_repo, uow, employee):
        with pytest.raises(EntityNotFoundError):
            DeleteTicketService(ticket_repo, uow).execute(employee, 42)


class TestListTicketsService:

    @pytest.fixture
    def populated(self, create_service, employee, other_employee):
        create_service.execute(employee, _create_input(subject="Slip one"))
        create_service.execute(employee, _create_input(
            subject="Broken chair", department="ADMIN", category="Facilities",
            subcategory="Office Maintenance", priority="HIGH",
        ))
        create_service.execute(other_employee, _create_input(
            subject="Leave query", department="HR", category="Leave",
            subcategory="Leave Balance",
        ))

    @pytest.fixture
    def service(self, ticket_repo, storage):
        return ListTicketsService(ticket_repo, storage)

    def test_employee_ve_apenas_os_proprios(self, service, populated, employee):
        tickets = service.execute(employee, TicketQueryDTO())
        assert {t.created_by for t in tickets} == {employee.id}
        assert len(tickets) == 2

    def test_mais_recentes_primeiro(self, service, populated, employee):
        tickets = service.execute(employee, TicketQueryDTO())
        assert tickets[0].subject.endswith("Broken chair")

    def test_gerente_ve_o_departamento(self, service, populated, hr_manager):
        tickets = service.execute(hr_manager, TicketQueryDTO())
        assert [t.department for t in tickets] == ["HR"]

    def test_gerente_filtrando_outro_departamento_vazio(self, service, populated, hr_manager):
        assert service.execute(hr_manager, TicketQueryDTO(department="FINANCE")) == []

    def test_system_admin_ve_todos(self, service, populated, system_admin):
        assert len(service.execute(system_admin, TicketQueryDTO())) == 3

    def test_filtros_combinados(self, service, populated, system_admin):
        tickets = service.execute(system_admin, TicketQueryDTO(priority="HIGH", search="chair"))
        assert len(tickets) == 1
        assert tickets[0].department == "ADMIN"

    def test_my_tickets_para_gerente(self, service, populated, hr_manager):
        assert service.execute(hr_manager, TicketQueryDTO(my_tickets=True)) == []

    def test_sem_identidade(self, service):
        with pytest.raises(AuthenticationRequiredError):
            service.execute(None, TicketQueryDTO())


class TestTicketStatsService:

    def test_estatisticas_do_escopo(self, ticket_repo, create_service, employee, system_admin):
        create_service.execute(employee, _create_input(priority="LOW"))
        create_service.execute(employee, _create_input(priority="HIGH"))
        create_service.execute(system_admin, _create_input(priority="HIGH", department="HR",
                                                           category="", subcategory=""))

        service = TicketStatsService(ticket_repo)

        assert service.execute(employee).total == 2
        stats = service.execute(system_admin)
        assert stats.total == 3
        assert stats.by_priority == {"low": 1, "medium": 0, "high": 2}
        assert stats.by_department["hr"] == 1
        assert service.execute(system_admin, my_tickets=True).total == 1

    def test_estatisticas_ignoram_status(self, ticket_repo, update_service, finance_ticket,
                                         finance_manager):
        update_service.execute(finance_manager, UpdateTicketInputDTO(
            ticket_id=finance_ticket.id, status="CLOSED",
        ))

        stats = TicketStatsService(ticket_repo).execute(finance_manager)

        assert stats.total == 1
        assert stats.closed == 1
        assert stats.open == 0


def test_build_key_substitui_separadores():
    key = build_key("../etc/passwd", millis=1700000000000, token="abc123")
    assert key == "tickets/1700000000000-abc123-.._etc_passwd"


def test_build_key_gera_token_aleatorio():
    first = build_key("scan.pdf", millis=1700000000000)
    second = build_key("scan.pdf", millis=1700000000000)

    assert first != second
    assert first.startswith("tickets/1700000000000-")
    assert first.endswith("-scan.pdf")


def test_upload_all_mesmo_nome_no_mesmo_milissegundo():
    storage = InMemoryObjectStorage()
    uploads = [
        AttachmentUploadDTO("scan.pdf", b"page-1", "application/pdf"),
        AttachmentUploadDTO("scan.pdf", b"page-2", "application/pdf"),
    ]

    keys = upload_all(storage, uploads, clock=lambda: 1700000000000)

    assert len(set(keys)) == 2
    assert [storage.objects[key] for key in keys] == [b"page-1", b"page-2"]
