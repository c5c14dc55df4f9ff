"""
API Views JSON para o domínio de Tickets.

Endpoints:
- GET /api/tickets/ - Listar tickets (department, priority, status, search, myTickets)
- POST /api/tickets/ - Criar ticket (multipart/form-data)
- GET /api/tickets/<id>/ - Obter ticket
- PUT /api/tickets/<id>/ - Atualizar ticket (JSON)
- DELETE /api/tickets/<id>/ - Remover ticket
- GET /api/dashboard/stats/ - Estatísticas (myTickets)
- GET /api/taxonomy/ - Departamento → Categoria → Subcategoria

Formato:
- Entrada: JSON (criação aceita apenas multipart)
- Saída: JSON com estrutura {success, data/error, meta}

Autenticação:
- Session do Django, resolvida em UserEntity pelo IdentityResolver
"""

import json
import logging
from typing import Any, Dict

from django.http import HttpRequest, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from helpdesk.config.container import get_container
from helpdesk.core.shared.exceptions import (
    AuthenticationRequiredError,
    BusinessRuleViolationError,
    DomainException,
    EntityNotFoundError,
    InfrastructureError,
    PermissionDeniedError,
    ValidationError,
)
from helpdesk.core.tickets import taxonomy
from helpdesk.core.tickets.dtos import UpdateTicketInputDTO

from .forms import TicketCreateForm, TicketFilterForm, parse_flag

logger = logging.getLogger(__name__)


# =============================================================================
# Helpers
# =============================================================================

def json_response(success: bool, data: Any = None, error: str = None,
                  status: int = 200, meta: Dict = None) -> JsonResponse:
    """
    Cria resposta JSON padronizada.

    Args:
        success: Se operação foi bem sucedida
        data: Dados da resposta
        error: Mensagem de erro (se aplicável)
        status: HTTP status code
        meta: Metadados adicionais
    """
    response = {'success': success}

    if data is not None:
        response['data'] = data

    if error is not None:
        response['error'] = error

    if meta is not None:
        response['meta'] = meta

    return JsonResponse(response, status=status)


def parse_json_body(request: HttpRequest) -> Dict:
    """
    Parseia body JSON do request.

    Raises:
        ValueError: Se JSON inválido ou não for um objeto
    """
    if not request.body:
        return {}

    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValueError(f"Invalid JSON: {e}")

    if not isinstance(data, dict):
        raise ValueError("JSON body must be an object")
    return data


# =============================================================================
# Base API View
# =============================================================================

@method_decorator(csrf_exempt, name='dispatch')
class BaseAPIView(View):
    """
    View base para APIs JSON.

    Fornece:
    - Resolução do ator autenticado
    - Acesso ao container DI
    - Tratamento de erros padronizado (único ponto de mapeamento para HTTP)
    """

    def get_container(self):
        return get_container()

    def get_actor(self, request: HttpRequest):
        """UserEntity do request, ou None se não autenticado."""
        return self.get_container().identity_resolver().resolve(request)

    def get_service(self, service_name: str):
        """Obtém service do container."""
        return getattr(self.get_container(), service_name)()

    def parse_body(self, request: HttpRequest) -> Dict:
        return parse_json_body(request)

    def handle_exception(self, e: Exception) -> JsonResponse:
        """
        Trata exceções e retorna resposta apropriada.

        A ordem importa: InvalidStateError é PermissionDeniedError e
        MissingFieldsError/NoValidFieldsError são ValidationError.
        """
        if isinstance(e, AuthenticationRequiredError):
            return json_response(success=False, error=e.message, status=401)

        if isinstance(e, PermissionDeniedError):
            return json_response(
                success=False,
                error=e.message,
                status=403,
                meta={'code': e.code},
            )

        if isinstance(e, EntityNotFoundError):
            return json_response(success=False, error=e.message, status=404)

        if isinstance(e, ValidationError):
            meta = e.to_dict()
            meta.pop('message', None)
            return json_response(success=False, error=e.message, status=400, meta=meta)

        if isinstance(e, BusinessRuleViolationError):
            return json_response(
                success=False,
                error=e.message,
                status=422,
                meta={'rule': e.rule},
            )

        if isinstance(e, InfrastructureError):
            logger.error(f"Falha de infraestrutura na API: {e}", exc_info=True)
            return json_response(success=False, error="Internal server error", status=500)

        if isinstance(e, DomainException):
            return json_response(success=False, error=e.message, status=400)

        if isinstance(e, ValueError):
            return json_response(success=False, error=str(e), status=400)

        # Erro inesperado
        logger.exception(f"Erro inesperado na API: {e}")
        return json_response(success=False, error="Internal server error", status=500)


# =============================================================================
# Ticket API Views
# =============================================================================

class TicketAPIListView(BaseAPIView):
    """
    API para listar e criar tickets.

    GET /api/tickets/ - Lista tickets
    POST /api/tickets/ - Cria ticket
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        """
        Lista tickets visíveis ao ator, mais recentes primeiro.

        Query params:
        - department, priority, status: valor exato
        - search: trecho em assunto ou descrição
        - myTickets: "true" restringe aos próprios tickets
        """
        try:
            actor = self.get_actor(request)
            if actor is None:
                raise AuthenticationRequiredError()

            form = TicketFilterForm(request.GET)
            form.validate()

            tickets = self.get_service('list_tickets_service').execute(actor, form.to_dto())

            return json_response(
                success=True,
                data=[t.to_dict() for t in tickets],
                meta={'total': len(tickets)},
            )

        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Cria novo ticket.

        multipart/form-data:
            subject, description, department, priority (obrigatórios)
            category, subcategory (opcionais)
            files[] (arquivos; qualquer campo de arquivo é aceito)
        """
        try:
            actor = self.get_actor(request)
            if actor is None:
                raise AuthenticationRequiredError()

            if not (request.content_type or '').startswith('multipart/form-data'):
                raise ValueError("Ticket creation expects multipart/form-data")

            form = TicketCreateForm(request.POST, request.FILES)
            form.validate()

            output = self.get_service('create_ticket_service').execute(actor, form.to_dto())

            logger.info(f"API: Ticket criado: {output.id}")

            return json_response(success=True, data=output.to_dict(), status=201)

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIDetailView(BaseAPIView):
    """
    API para operações em ticket específico.

    GET /api/tickets/<id>/ - Obter ticket
    PUT /api/tickets/<id>/ - Atualizar ticket
    DELETE /api/tickets/<id>/ - Remover ticket
    """

    def get(self, request: HttpRequest, pk: int) -> JsonResponse:
        try:
            actor = self.get_actor(request)
            ticket = self.get_service('get_ticket_service').execute(actor, pk)
            return json_response(success=True, data=ticket.to_dict())

        except Exception as e:
            return self.handle_exception(e)

    def put(self, request: HttpRequest, pk: int) -> JsonResponse:
        """
        Atualiza ticket.

        Body JSON (todos opcionais, string vazia = não informado):
        {
            "subject", "description", "department", "priority",
            "category", "subcategory": dono, ticket OPEN
            "status", "comment": gerente do departamento
        }
        """
        try:
            actor = self.get_actor(request)
            if actor is None:
                raise AuthenticationRequiredError()

            input_dto = UpdateTicketInputDTO.from_dict(pk, self.parse_body(request))
            output = self.get_service('update_ticket_service').execute(actor, input_dto)

            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)

    def delete(self, request: HttpRequest, pk: int) -> JsonResponse:
        try:
            actor = self.get_actor(request)
            self.get_service('delete_ticket_service').execute(actor, pk)

            logger.info(f"API: Ticket {pk} removido")

            return json_response(success=True, data={'message': 'Ticket deleted'})

        except Exception as e:
            return self.handle_exception(e)


class DashboardStatsAPIView(BaseAPIView):
    """
    API para estatísticas do dashboard.

    GET /api/dashboard/stats/?myTickets=true
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            actor = self.get_actor(request)
            stats = self.get_service('ticket_stats_service').execute(
                actor,
                my_tickets=parse_flag(request.GET.get('myTickets')),
            )
            return json_response(success=True, data=stats.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class TaxonomyAPIView(BaseAPIView):
    """
    API com a tabela de categorias por departamento.

    GET /api/taxonomy/
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            if self.get_actor(request) is None:
                raise AuthenticationRequiredError()
            return json_response(success=True, data=taxonomy.as_dict())

        except Exception as e:
            return self.handle_exception(e)
