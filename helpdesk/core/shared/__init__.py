"""
Shared Domain Components.

Contém componentes compartilhados entre todos os domínios:
- Exceções de domínio
- Interfaces (Ports)
- Base class para Domain Events
"""

from .exceptions import (
    DomainException,
    AuthenticationRequiredError,
    PermissionDeniedError,
    InvalidStateError,
    ValidationError,
    MissingFieldsError,
    NoValidFieldsError,
    EntityNotFoundError,
    BusinessRuleViolationError,
    InfrastructureError,
    RepositoryError,
    StorageError,
)
from .events import DomainEvent
from .interfaces import UnitOfWork, EventPublisher

__all__ = [
    "DomainException",
    "AuthenticationRequiredError",
    "PermissionDeniedError",
    "InvalidStateError",
    "ValidationError",
    "MissingFieldsError",
    "NoValidFieldsError",
    "EntityNotFoundError",
    "BusinessRuleViolationError",
    "InfrastructureError",
    "RepositoryError",
    "StorageError",
    "DomainEvent",
    "UnitOfWork",
    "EventPublisher",
]
