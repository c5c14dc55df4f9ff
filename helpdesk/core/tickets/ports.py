"""
Ports (Interfaces) do Domínio de Tickets.

Define os contratos que os Adapters de infraestrutura devem implementar
para persistência de tickets e armazenamento de anexos.

Tipos de Ports:
- TicketRepository: persistência e consulta escopada de tickets
- ObjectStorage: upload de anexos e geração de links temporários

Princípio:
    Core define interfaces → Adapters implementam
    Dependências sempre apontam para o Core

Example:
    # No Adapter (Django)
    class DjangoTicketRepository:
        def add(self, ticket: TicketEntity) -> TicketEntity:
            model = TicketMapper.to_model(ticket)
            model.save()
            ticket.id = model.pk
            return ticket
"""

from copy import deepcopy
from typing import Dict, Iterable, List, Optional, Protocol, runtime_checkable

from helpdesk.core.accounts.entities import UserEntity
from helpdesk.core.shared.exceptions import StorageError

from .entities import TicketEntity
from .queries import TicketFilters, TicketScope, matches


@runtime_checkable
class TicketRepository(Protocol):
    """
    Interface para persistência de Tickets.

    Implementações:
    - DjangoTicketRepository (PostgreSQL/SQLite via ORM)
    - InMemoryTicketRepository (para testes)
    """

    def add(self, ticket: TicketEntity) -> TicketEntity:
        """
        Insere ticket novo e atribui o id gerado pelo banco.

        Returns:
            A mesma entidade, com id preenchido
        """
        ...

    def save(self, ticket: TicketEntity) -> None:
        """
        Grava ticket existente (escrita única, last write wins).

        Raises:
            EntityNotFoundError: Se o ticket foi removido nesse meio tempo
        """
        ...

    def get_by_id(self, ticket_id: int) -> Optional[TicketEntity]:
        """Busca ticket por ID; None se não existir."""
        ...

    def delete(self, ticket_id: int) -> None:
        """Remove ticket (hard delete)."""
        ...

    def find_many(
        self,
        scope: TicketScope,
        filters: Optional[TicketFilters] = None,
    ) -> List[TicketEntity]:
        """
        Lista tickets visíveis no escopo, com filtros em AND.

        Returns:
            Tickets ordenados por created_at decrescente
        """
        ...

    def get_creators(self, user_ids: Iterable[int]) -> Dict[int, UserEntity]:
        """
        Carrega os donos dos tickets em lote (evita N+1).

        Returns:
            Mapa id → UserEntity; ids inexistentes ficam de fora
        """
        ...


@runtime_checkable
class ObjectStorage(Protocol):
    """
    Interface para o object storage de anexos.

    Implementações:
    - S3ObjectStorage (boto3)
    - DjangoStorageObjectStorage (django.core.files.storage)
    - InMemoryObjectStorage (para testes)
    """

    def put(self, key: str, data: bytes, content_type: str) -> None:
        """
        Grava objeto.

        Raises:
            StorageError: Se o upload falhar
        """
        ...

    def presign_get(self, key: str, ttl_seconds: int) -> str:
        """
        Gera URL temporária de leitura.

        Raises:
            StorageError: Se a URL não puder ser gerada
        """
        ...


class InMemoryTicketRepository:
    """
    Implementação em memória do TicketRepository.

    Útil para:
    - Testes unitários
    - Prototipagem

    Não usar em produção!

    Example:
        repo = InMemoryTicketRepository()
        repo.add_user(UserEntity(id=1, username="ana@example.com"))
        ticket = repo.add(ticket)
        found = repo.get_by_id(ticket.id)
    """

    def __init__(self, users: Optional[Iterable[UserEntity]] = None):
        self._tickets: Dict[int, TicketEntity] = {}
        self._users: Dict[int, UserEntity] = {}
        self._next_id = 1
        for user in users or []:
            self.add_user(user)

    def add_user(self, user: UserEntity) -> None:
        self._users[user.id] = user

    def add(self, ticket: TicketEntity) -> TicketEntity:
        ticket.id = self._next_id
        self._next_id += 1
        self._tickets[ticket.id] = deepcopy(ticket)
        return ticket

    def save(self, ticket: TicketEntity) -> None:
        self._tickets[ticket.id] = deepcopy(ticket)

    def get_by_id(self, ticket_id: int) -> Optional[TicketEntity]:
        ticket = self._tickets.get(ticket_id)
        return deepcopy(ticket) if ticket else None

    def delete(self, ticket_id: int) -> None:
        self._tickets.pop(ticket_id, None)

    def find_many(
        self,
        scope: TicketScope,
        filters: Optional[TicketFilters] = None,
    ) -> List[TicketEntity]:
        found = [
            deepcopy(ticket)
            for ticket in self._tickets.values()
            if matches(ticket, scope, filters)
        ]
        found.sort(key=lambda t: (t.created_at, t.id), reverse=True)
        return found

    def get_creators(self, user_ids: Iterable[int]) -> Dict[int, UserEntity]:
        return {uid: self._users[uid] for uid in set(user_ids) if uid in self._users}

    def count(self) -> int:
        return len(self._tickets)

    def clear(self) -> None:
        """Limpa todos os dados (útil para testes)."""
        self._tickets.clear()


class InMemoryObjectStorage:
    """
    Object storage em memória (testes e desenvolvimento).

    `failing_keys` simula falhas de upload para chaves que contêm
    algum dos trechos informados.
    """

    def __init__(self, failing_keys: Iterable[str] = ()):
        self.objects: Dict[str, bytes] = {}
        self.content_types: Dict[str, str] = {}
        self.failing_keys = list(failing_keys)

    def put(self, key: str, data: bytes, content_type: str) -> None:
        if any(fragment in key for fragment in self.failing_keys):
            raise StorageError(f"Upload failed for {key}", key=key)
        self.objects[key] = data
        self.content_types[key] = content_type

    def presign_get(self, key: str, ttl_seconds: int) -> str:
        if key not in self.objects:
            raise StorageError(f"Object not found: {key}", key=key)
        return f"memory://{key}?expires_in={ttl_seconds}"
