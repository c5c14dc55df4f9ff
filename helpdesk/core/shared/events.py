"""
Domain Events - Comunicação desacoplada entre o Core e os efeitos colaterais.

Eventos representam fatos já ocorridos no domínio (ticket criado,
status alterado) e são entregues aos publishers somente depois que
a Unit of Work confirma a persistência.

Características:
- Auto-geração de ID e timestamp
- Serializáveis para transporte (Celery usa JSON)
- Rastreáveis via aggregate_id
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict
import uuid


def utc_now() -> datetime:
    """Timestamp timezone-aware em UTC."""
    return datetime.now(timezone.utc)


@dataclass
class DomainEvent(ABC):
    """
    Classe base abstrata para Domain Events.
    
    Características:
    - Nomeados no passado (TicketCreated, não CreateTicket)
    - Contêm os dados necessários para os handlers sem novo acesso ao Core
    
    Attributes:
        event_id: Identificador único do evento
        aggregate_id: ID do agregado que gerou o evento
        occurred_at: Momento em que o evento ocorreu
        version: Versão do schema do evento (para evolução)
    """
    
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    aggregate_id: str = ""
    occurred_at: datetime = field(default_factory=utc_now)
    version: int = 1
    
    def __post_init__(self):
        if self.aggregate_id in ("", None):
            raise ValueError("aggregate_id é obrigatório")
        self.aggregate_id = str(self.aggregate_id)
    
    @property
    @abstractmethod
    def aggregate_type(self) -> str:
        """Nome do tipo do agregado (ex: "Ticket")."""
        ...
    
    @property
    def event_type(self) -> str:
        """Nome da classe do evento, usado no roteamento dos handlers."""
        return self.__class__.__name__
    
    def to_dict(self) -> Dict[str, Any]:
        """
        Serializa evento para dicionário.
        
        Os campos específicos do evento ficam achatados no topo
        junto com os metadados, que é o formato consumido pelos
        handlers Celery.
        
        Returns:
            Dicionário JSON-serializável
        """
        data = {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "aggregate_id": self.aggregate_id,
            "aggregate_type": self.aggregate_type,
            "occurred_at": self.occurred_at.isoformat(),
            "version": self.version,
        }
        data.update(self._get_event_data())
        return data
    
    def _get_event_data(self) -> Dict[str, Any]:
        """Campos específicos do evento (todos exceto os da base)."""
        base_fields = {"event_id", "aggregate_id", "occurred_at", "version"}
        return {
            key: value
            for key, value in self.__dict__.items()
            if key not in base_fields and not key.startswith("_")
        }
    
    def __repr__(self) -> str:
        return (
            f"{self.event_type}("
            f"event_id={self.event_id[:8]}..., "
            f"aggregate_id={self.aggregate_id}, "
            f"occurred_at={self.occurred_at.isoformat()}"
            f")"
        )
