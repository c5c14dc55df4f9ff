"""
Mappers para conversão entre Entities (Core) e Models (Django).

Responsabilidades:
- Converter TicketEntity → TicketModel (para persistência)
- Converter TicketModel → TicketEntity (para uso no Core)

Princípios:
- Mappers são stateless
- Não contêm lógica de negócio
- Tratam apenas conversão de dados
"""

from typing import Iterable, List

from helpdesk.core.accounts.entities import Department
from helpdesk.core.tickets.entities import (
    TicketEntity,
    TicketStatus,
    TicketPriority,
)

from .models import TicketModel


class TicketMapper:
    """
    Mapper para conversão entre TicketEntity e TicketModel.

    Responsável por:
    - to_model(): Entity → Model
    - to_entity(): Model → Entity
    - update_model(): copia campos mutáveis da Entity para o Model
    """

    @staticmethod
    def to_model(entity: TicketEntity) -> TicketModel:
        """
        Converte TicketEntity para TicketModel.

        Note:
            Não chama .save() - deixa isso para o Repository.
            Com entity.id None o banco atribui o id no insert.
        """
        return TicketModel(
            id=entity.id,
            subject=entity.subject,
            description=entity.description,
            department=entity.department.value,
            category=entity.category,
            subcategory=entity.subcategory,
            priority=entity.priority.value,
            status=entity.status.value,
            created_by_id=entity.created_by,
            attachments=list(entity.attachments),
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    @staticmethod
    def to_entity(model: TicketModel) -> TicketEntity:
        """
        Converte TicketModel para TicketEntity.

        Note:
            Bypassa o factory method .create() pois os dados já
            foram sanitizados na criação original.
        """
        return TicketEntity(
            id=model.id,
            subject=model.subject,
            description=model.description,
            department=Department(model.department),
            category=model.category or "",
            subcategory=model.subcategory or "",
            priority=TicketPriority(model.priority),
            status=TicketStatus(model.status),
            created_by=model.created_by_id,
            attachments=list(model.attachments or []),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def to_entity_list(models: Iterable[TicketModel]) -> List[TicketEntity]:
        return [TicketMapper.to_entity(model) for model in models]

    @staticmethod
    def update_model(model: TicketModel, entity: TicketEntity) -> TicketModel:
        """
        Atualiza Model existente com dados da Entity.

        Dono e data de criação nunca mudam e não são copiados.
        """
        model.subject = entity.subject
        model.description = entity.description
        model.department = entity.department.value
        model.category = entity.category
        model.subcategory = entity.subcategory
        model.priority = entity.priority.value
        model.status = entity.status.value
        model.attachments = list(entity.attachments)
        model.updated_at = entity.updated_at
        return model
