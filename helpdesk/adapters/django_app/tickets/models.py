"""
Django Models para o domínio de Tickets.

Estes models são ADAPTERS - implementam a persistência para as
entidades de domínio definidas em helpdesk/core/tickets/entities.py.

IMPORTANTE:
- Models NÃO contêm lógica de negócio
- Lógica de negócio fica nas Entities do Core
- Models são mapeados para/de Entities via Mappers
"""

from django.conf import settings
from django.db import models
from django.utils import timezone


class TicketStatusChoices(models.TextChoices):
    """Choices para status de ticket (espelha TicketStatus do Core)."""
    OPEN = 'OPEN', 'Open'
    IN_PROGRESS = 'IN_PROGRESS', 'In Progress'
    ON_HOLD = 'ON_HOLD', 'On Hold'
    CANCELLED = 'CANCELLED', 'Cancelled'
    CLOSED = 'CLOSED', 'Closed'


class TicketPriorityChoices(models.TextChoices):
    """Choices para prioridade de ticket (espelha TicketPriority do Core)."""
    LOW = 'LOW', 'Low'
    MEDIUM = 'MEDIUM', 'Medium'
    HIGH = 'HIGH', 'High'


class TicketDepartmentChoices(models.TextChoices):
    """Choices para departamento (espelha Department do Core)."""
    ADMIN = 'ADMIN', 'Administration'
    FINANCE = 'FINANCE', 'Finance'
    HR = 'HR', 'Human Resources'


class TicketModel(models.Model):
    """
    Model Django para persistência de Tickets.

    Este model é um ADAPTER que persiste dados do TicketEntity.
    NÃO contém lógica de negócio - apenas estrutura de dados.

    Fields:
        id: Inteiro auto-incrementado (atribuído no insert)
        subject: Assunto sanitizado com prefixo de classificação
        description: Descrição detalhada
        department: Departamento que atende (choices)
        category: Categoria da taxonomia (pode ser vazia)
        subcategory: Subcategoria da taxonomia (pode ser vazia)
        priority: Nível de prioridade (choices)
        status: Estado atual (choices)
        created_by: Usuário dono do ticket
        attachments: Chaves dos anexos no object storage (JSON list)
        created_at: Timestamp de criação
        updated_at: Timestamp de última atualização
    """

    id = models.AutoField(primary_key=True)

    subject = models.CharField(
        max_length=500,
        help_text="Assunto com prefixo [Categoria - Subcategoria]"
    )

    description = models.TextField(
        help_text="Descrição detalhada do problema"
    )

    department = models.CharField(
        max_length=10,
        choices=TicketDepartmentChoices.choices,
        db_index=True,
        help_text="Departamento responsável"
    )

    category = models.CharField(
        max_length=100,
        blank=True,
        default='',
        help_text="Categoria da taxonomia"
    )

    subcategory = models.CharField(
        max_length=100,
        blank=True,
        default='',
        help_text="Subcategoria da taxonomia"
    )

    priority = models.CharField(
        max_length=10,
        choices=TicketPriorityChoices.choices,
        default=TicketPriorityChoices.MEDIUM,
        db_index=True,
        help_text="Nível de prioridade"
    )

    status = models.CharField(
        max_length=20,
        choices=TicketStatusChoices.choices,
        default=TicketStatusChoices.OPEN,
        db_index=True,
        help_text="Estado atual do ticket"
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='tickets',
        help_text="Dono do ticket"
    )

    attachments = models.JSONField(
        default=list,
        blank=True,
        help_text="Chaves dos anexos no object storage"
    )

    created_at = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="Data/hora de criação"
    )

    updated_at = models.DateTimeField(
        default=timezone.now,
        help_text="Data/hora da última atualização"
    )

    class Meta:
        db_table = 'tickets'
        verbose_name = 'Ticket'
        verbose_name_plural = 'Tickets'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['department', 'created_at'], name='tickets_departm_6c1f2a_idx'),
            models.Index(fields=['created_by', 'created_at'], name='tickets_created_9b4e7d_idx'),
            models.Index(fields=['status', 'created_at'], name='tickets_status_3a8c5e_idx'),
        ]

    def __str__(self):
        return f"#{self.id} {self.subject}"

    def __repr__(self):
        return f"<TicketModel id={self.id} status={self.status}>"
