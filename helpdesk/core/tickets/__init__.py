"""
Domínio de Tickets - Ciclo de vida, taxonomia e consultas.

Este módulo contém toda a lógica de negócio relacionada a tickets
de suporte roteados por departamento, incluindo:
- Entidades (TicketEntity, TicketStatus, TicketPriority)
- Taxonomia Departamento → Categoria → Subcategoria
- Sanitização de assunto
- Use Cases (Create, Get, Update, Delete, List, Stats)
- Domain Events (TicketCreated, TicketStatusChanged, TicketDeleted)
- DTOs (Input/Output Data Transfer Objects)
- Ports (TicketRepository, ObjectStorage)

Características do Domínio:
- Status sem máquina de transições (gerente escolhe livremente)
- Conteúdo editável pelo dono apenas com ticket aberto
- Eventos disparados para notificações assíncronas
"""

from .entities import TicketEntity, TicketStatus, TicketPriority
from .events import (
    TicketCreatedEvent,
    TicketStatusChangedEvent,
    TicketDeletedEvent,
)
from .dtos import (
    AttachmentUploadDTO,
    CreateTicketInputDTO,
    UpdateTicketInputDTO,
    TicketQueryDTO,
    TicketOutputDTO,
    TicketStatsDTO,
)
from .ports import (
    TicketRepository,
    ObjectStorage,
    InMemoryTicketRepository,
    InMemoryObjectStorage,
)
from .queries import TicketScope, TicketFilters, build_scope, compute_stats
from .subjects import sanitize_subject, build_subject, split_subject_prefix
from .use_cases import (
    CreateTicketService,
    GetTicketService,
    UpdateTicketService,
    DeleteTicketService,
    ListTicketsService,
    TicketStatsService,
)

__all__ = [
    # Entities
    "TicketEntity",
    "TicketStatus",
    "TicketPriority",
    # Events
    "TicketCreatedEvent",
    "TicketStatusChangedEvent",
    "TicketDeletedEvent",
    # DTOs
    "AttachmentUploadDTO",
    "CreateTicketInputDTO",
    "UpdateTicketInputDTO",
    "TicketQueryDTO",
    "TicketOutputDTO",
    "TicketStatsDTO",
    # Ports
    "TicketRepository",
    "ObjectStorage",
    "InMemoryTicketRepository",
    "InMemoryObjectStorage",
    # Queries
    "TicketScope",
    "TicketFilters",
    "build_scope",
    "compute_stats",
    # Subjects
    "sanitize_subject",
    "build_subject",
    "split_subject_prefix",
    # Use Cases
    "CreateTicketService",
    "GetTicketService",
    "UpdateTicketService",
    "DeleteTicketService",
    "ListTicketsService",
    "TicketStatsService",
]
