"""
Ports do Domínio de Contas.

O Core não conhece sessões, cookies ou tokens: recebe a identidade
já resolvida por um adapter que implementa IdentityResolver.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from .entities import UserEntity


@runtime_checkable
class IdentityResolver(Protocol):
    """
    Resolve a identidade autenticada de uma requisição.
    
    Implementações:
    - DjangoIdentityResolver (request.user + UserProfileModel)
    """
    
    def resolve(self, request: Any) -> Optional[UserEntity]:
        """
        Args:
            request: Requisição de entrada (tipo do framework)
            
        Returns:
            UserEntity ou None se não autenticado
        """
        ...
    
    def get_user(self, user_id: int) -> Optional[UserEntity]:
        """Busca identidade pelo ID (usado pelos handlers de notificação)."""
        ...
