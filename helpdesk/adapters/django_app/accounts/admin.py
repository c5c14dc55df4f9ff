"""
Django Admin para o domínio de Contas.

Perfis são editados inline na página do usuário.
"""

from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin

from .models import UserProfileModel


class UserProfileInline(admin.StackedInline):
    """Papel e departamento na tela do usuário."""
    
    model = UserProfileModel
    can_delete = False
    verbose_name_plural = 'Perfil HelpDesk'


@admin.register(UserProfileModel)
class UserProfileAdmin(admin.ModelAdmin):
    """Admin para UserProfileModel."""
    
    list_display = ['user', 'role', 'department']
    list_filter = ['role', 'department']
    search_fields = ['user__username', 'user__first_name', 'user__last_name']
    raw_id_fields = ['user']


User = get_user_model()

if admin.site.is_registered(User):
    admin.site.unregister(User)


@admin.register(User)
class HelpDeskUserAdmin(UserAdmin):
    """UserAdmin padrão com o perfil inline."""
    
    inlines = [UserProfileInline]
