"""
Exceções de Domínio do HelpDesk.

Este módulo define exceções específicas do domínio que permitem
comunicar erros de forma clara e tipada entre as camadas.

Hierarquia:
    DomainException (base)
    ├── AuthenticationRequiredError (sem identidade válida)
    ├── PermissionDeniedError (identidade válida, ação não permitida)
    │   └── InvalidStateError (ticket fora do estado editável)
    ├── ValidationError (validação de entrada)
    │   ├── MissingFieldsError (campos obrigatórios ausentes)
    │   └── NoValidFieldsError (nenhum campo aplicável no update)
    ├── EntityNotFoundError (entidade não existe)
    ├── BusinessRuleViolationError (regra de negócio violada)
    └── InfrastructureError (falha de persistência/armazenamento)
        ├── RepositoryError
        └── StorageError
"""

from typing import Iterable


class DomainException(Exception):
    """
    Exceção base para todos os erros de domínio.
    
    Todas as exceções específicas do domínio devem herdar desta classe.
    Isso permite capturar qualquer erro de domínio de forma genérica.
    
    Example:
        try:
            service.execute(actor, ticket_id)
        except DomainException as e:
            logger.error(f"Erro de domínio: {e}")
    """
    
    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)
    
    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"
    
    def to_dict(self) -> dict:
        """Serializa exceção para dicionário (útil para APIs)."""
        return {
            "error": self.code,
            "message": self.message,
        }


class AuthenticationRequiredError(DomainException):
    """Requisição sem identidade autenticada."""
    
    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message, "NOT_AUTHENTICATED")


class PermissionDeniedError(DomainException):
    """
    Identidade válida, mas a ação não é permitida.
    
    Lançada quando o ator não é dono do ticket nem gerente
    do departamento do ticket.
    """
    
    def __init__(self, message: str = "Access denied", code: str = "ACCESS_DENIED"):
        super().__init__(message, code)


class InvalidStateError(PermissionDeniedError):
    """
    Ticket não está em estado que permita a operação.
    
    Example:
        if ticket.status != TicketStatus.OPEN:
            raise InvalidStateError("Only open tickets may be edited by their owner")
    """
    
    def __init__(self, message: str):
        super().__init__(message, "INVALID_STATE")


class ValidationError(DomainException):
    """
    Erro de validação de dados de entrada.
    
    Lançada quando dados fornecidos não atendem aos requisitos
    mínimos para processamento.
    
    Example:
        if department not in Department:
            raise ValidationError("Invalid department", field="department")
    """
    
    def __init__(self, message: str, field: str = None, code: str = None):
        self.field = field
        if code is None:
            code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)
    
    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class MissingFieldsError(ValidationError):
    """Campos obrigatórios ausentes no payload."""
    
    def __init__(self, fields: Iterable[str]):
        self.fields = list(fields)
        super().__init__(
            "Missing required fields: " + ", ".join(self.fields),
            code="MISSING_FIELDS",
        )
    
    def to_dict(self) -> dict:
        result = super().to_dict()
        result["fields"] = self.fields
        return result


class NoValidFieldsError(ValidationError):
    """Update sem nenhum campo que o ator possa alterar."""
    
    def __init__(self, message: str = "No valid fields to update"):
        super().__init__(message, code="NO_VALID_FIELDS")


class EntityNotFoundError(DomainException):
    """
    Entidade não encontrada no repositório.
    
    Lançada quando uma busca por ID não retorna resultado.
    
    Example:
        ticket = repo.get_by_id(ticket_id)
        if not ticket:
            raise EntityNotFoundError(f"Ticket {ticket_id} not found")
    """
    
    def __init__(self, message: str, entity_type: str = None, entity_id=None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message, "ENTITY_NOT_FOUND")
    
    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.entity_type:
            result["entity_type"] = self.entity_type
        if self.entity_id is not None:
            result["entity_id"] = self.entity_id
        return result


class BusinessRuleViolationError(DomainException):
    """
    Violação de regra de negócio.
    
    Lançada quando uma operação viola uma regra de negócio
    estabelecida no domínio.
    """
    
    def __init__(self, message: str, rule: str = None):
        self.rule = rule
        super().__init__(message, "BUSINESS_RULE_VIOLATION")
    
    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.rule:
            result["rule"] = self.rule
        return result


class InfrastructureError(DomainException):
    """Falha em recurso externo (banco, object storage)."""


class RepositoryError(InfrastructureError):
    """Falha na camada de persistência."""
    
    def __init__(self, message: str):
        super().__init__(message, "REPOSITORY_ERROR")


class StorageError(InfrastructureError):
    """
    Falha no object storage.
    
    Durante a criação de ticket, aborta a operação inteira:
    nenhum ticket é gravado referenciando objetos inexistentes.
    """
    
    def __init__(self, message: str, key: str = None):
        self.key = key
        super().__init__(message, "STORAGE_ERROR")
