"""
Identity Resolver - Implementação Django.

Converte `request.user` (sessão Django) + UserProfileModel na
UserEntity consumida pelo Core.
"""

import logging
from typing import Any, Dict, Iterable, Optional

from django.contrib.auth import get_user_model

from helpdesk.core.accounts.entities import Department, Role, UserEntity

from .models import UserProfileModel

logger = logging.getLogger(__name__)


def user_to_entity(user) -> UserEntity:
    """
    Converte usuário Django em UserEntity.

    Perfil ausente → EMPLOYEE sem departamento. Valores de papel ou
    departamento desconhecidos no banco também caem nesse padrão.
    """
    role = Role.EMPLOYEE
    department = None

    try:
        profile = user.helpdesk_profile
    except UserProfileModel.DoesNotExist:
        profile = None

    if profile is not None:
        try:
            role = Role(profile.role)
        except ValueError:
            logger.warning(f"Papel desconhecido para usuário {user.pk}: {profile.role!r}")
        if profile.department:
            try:
                department = Department(profile.department)
            except ValueError:
                logger.warning(
                    f"Departamento desconhecido para usuário {user.pk}: {profile.department!r}"
                )

    return UserEntity(
        id=user.pk,
        role=role,
        department=department,
        username=user.get_username(),
        name=user.get_full_name() or user.get_username(),
    )


class DjangoIdentityResolver:
    """
    Resolve a identidade a partir da sessão Django.

    Example:
        actor = DjangoIdentityResolver().resolve(request)
        if actor is None:
            raise AuthenticationRequiredError()
    """

    def resolve(self, request: Any) -> Optional[UserEntity]:
        user = getattr(request, 'user', None)
        if user is None or not user.is_authenticated or not user.is_active:
            return None
        return user_to_entity(user)

    def get_user(self, user_id: int) -> Optional[UserEntity]:
        return self.get_users([user_id]).get(user_id)

    def get_users(self, user_ids: Iterable[int]) -> Dict[int, UserEntity]:
        """Carrega vários usuários com seus perfis em uma consulta."""
        ids = {uid for uid in user_ids if uid is not None}
        if not ids:
            return {}
        users = (
            get_user_model().objects
            .filter(pk__in=ids)
            .select_related('helpdesk_profile')
        )
        return {user.pk: user_to_entity(user) for user in users}
