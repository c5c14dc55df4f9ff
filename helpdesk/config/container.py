"""
Dependency Injection Container.

Configura e gerencia todas as dependências da aplicação.
Usa dependency-injector para lazy-loading e injeção automática.

Padrões:
- Singleton: Uma instância para toda app (repositories, clients, publisher)
- Factory: Nova instância por chamada (services, UoW)
- Selector: Escolha do object storage por configuração

Os adapters são importados sob demanda (_lazy) para que o Core e o
container possam ser carregados antes de o Django estar configurado.
"""

from importlib import import_module
from typing import Optional

from dependency_injector import containers, providers


def _lazy(path: str):
    """Retorna callable que importa "modulo:Nome" somente ao ser chamado."""
    module_name, attr = path.split(':')

    def factory(*args, **kwargs):
        return getattr(import_module(module_name), attr)(*args, **kwargs)

    factory.__name__ = attr
    return factory


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.

    Organização:
    - Configuration: valores vindos do settings do Django
    - Infrastructure: S3, object storage, event publisher
    - Repositories: persistência e identidade
    - Unit of Work: transações
    - Services: Use Cases

    Example:
        container = get_container()
        service = container.create_ticket_service()
        output = service.execute(actor, input_dto)

        # Em testes
        container.object_storage.override(providers.Object(InMemoryObjectStorage()))
    """

    # =========================================================================
    # Configuration
    # =========================================================================

    config = providers.Configuration()

    # =========================================================================
    # Infrastructure
    # =========================================================================

    s3_client = providers.Singleton(
        _lazy('helpdesk.adapters.storage.s3:create_s3_client'),
        region_name=config.aws_region,
        aws_access_key_id=config.aws_access_key_id,
        aws_secret_access_key=config.aws_secret_access_key,
    )

    object_storage = providers.Selector(
        config.object_storage_backend,
        s3=providers.Singleton(
            _lazy('helpdesk.adapters.storage.s3:S3ObjectStorage'),
            client=s3_client,
            bucket=config.aws_s3_bucket,
        ),
        django=providers.Singleton(
            _lazy('helpdesk.adapters.storage.django_storage:DjangoStorageObjectStorage'),
        ),
    )

    event_publisher = providers.Singleton(
        _lazy('helpdesk.adapters.django_app.events.publishers:get_event_publisher'),
        mode=config.event_publisher_mode,
    )

    # =========================================================================
    # Repositories (Singleton - uma instância por app)
    # =========================================================================

    identity_resolver = providers.Singleton(
        _lazy('helpdesk.adapters.django_app.accounts.identity:DjangoIdentityResolver'),
    )

    ticket_repository = providers.Singleton(
        _lazy('helpdesk.adapters.django_app.tickets.repositories:DjangoTicketRepository'),
        identity_resolver=identity_resolver,
    )

    # =========================================================================
    # Unit of Work (Factory - nova instância por operação)
    # =========================================================================

    unit_of_work = providers.Factory(
        _lazy('helpdesk.adapters.django_app.shared.unit_of_work:DjangoUnitOfWork'),
        event_publisher=event_publisher,
    )

    # =========================================================================
    # Services / Use Cases (Factory - nova instância por chamada)
    # =========================================================================

    create_ticket_service = providers.Factory(
        _lazy('helpdesk.core.tickets.use_cases:CreateTicketService'),
        ticket_repo=ticket_repository,
        uow=unit_of_work,
        storage=object_storage,
        url_ttl=config.attachment_url_ttl,
        strict_taxonomy=config.strict_taxonomy,
    )

    get_ticket_service = providers.Factory(
        _lazy('helpdesk.core.tickets.use_cases:GetTicketService'),
        ticket_repo=ticket_repository,
        storage=object_storage,
        url_ttl=config.attachment_url_ttl,
    )

    update_ticket_service = providers.Factory(
        _lazy('helpdesk.core.tickets.use_cases:UpdateTicketService'),
        ticket_repo=ticket_repository,
        uow=unit_of_work,
        storage=object_storage,
        url_ttl=config.attachment_url_ttl,
        strict_taxonomy=config.strict_taxonomy,
    )

    delete_ticket_service = providers.Factory(
        _lazy('helpdesk.core.tickets.use_cases:DeleteTicketService'),
        ticket_repo=ticket_repository,
        uow=unit_of_work,
    )

    # Leitura: sem UoW
    list_tickets_service = providers.Factory(
        _lazy('helpdesk.core.tickets.use_cases:ListTicketsService'),
        ticket_repo=ticket_repository,
        storage=object_storage,
        url_ttl=config.attachment_url_ttl,
    )

    ticket_stats_service = providers.Factory(
        _lazy('helpdesk.core.tickets.use_cases:TicketStatsService'),
        ticket_repo=ticket_repository,
    )


def config_from_settings(settings) -> dict:
    """Extrai do settings do Django os valores usados pelo container."""
    return {
        'object_storage_backend': getattr(settings, 'OBJECT_STORAGE_BACKEND', 'django'),
        'aws_region': getattr(settings, 'AWS_REGION', None),
        'aws_s3_bucket': getattr(settings, 'AWS_S3_BUCKET', ''),
        'aws_access_key_id': getattr(settings, 'AWS_ACCESS_KEY_ID', None),
        'aws_secret_access_key': getattr(settings, 'AWS_SECRET_ACCESS_KEY', None),
        'event_publisher_mode': getattr(settings, 'EVENT_PUBLISHER_MODE', 'sync'),
        'attachment_url_ttl': int(getattr(settings, 'ATTACHMENT_URL_TTL', 300)),
        'strict_taxonomy': bool(getattr(settings, 'TICKETS_STRICT_TAXONOMY', False)),
    }


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None


def get_container() -> Container:
    """
    Retorna instância global do container.

    Cria se não existir (lazy initialization), lendo a configuração
    do settings do Django.
    """
    global _container

    if _container is None:
        from django.conf import settings

        container = Container()
        container.config.from_dict(config_from_settings(settings))
        _container = container

    return _container


def reset_container() -> None:
    """
    Reset do container (para testes).

    Permite criar novo container limpo.
    """
    global _container
    _container = None
