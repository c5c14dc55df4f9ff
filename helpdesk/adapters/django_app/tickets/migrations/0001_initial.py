"""
Migration inicial para o domínio de Tickets.

Cria a tabela:
- tickets: Tabela principal de tickets
"""

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='TicketModel',
            fields=[
                ('id', models.AutoField(primary_key=True, serialize=False)),
                ('subject', models.CharField(
                    max_length=500,
                    help_text='Assunto com prefixo [Categoria - Subcategoria]'
                )),
                ('description', models.TextField(
                    help_text='Descrição detalhada do problema'
                )),
                ('department', models.CharField(
                    max_length=10,
                    choices=[
                        ('ADMIN', 'Administration'),
                        ('FINANCE', 'Finance'),
                        ('HR', 'Human Resources'),
                    ],
                    db_index=True,
                    help_text='Departamento responsável'
                )),
                ('category', models.CharField(
                    max_length=100,
                    blank=True,
                    default='',
                    help_text='Categoria da taxonomia'
                )),
                ('subcategory', models.CharField(
                    max_length=100,
                    blank=True,
                    default='',
                    help_text='Subcategoria da taxonomia'
                )),
                ('priority', models.CharField(
                    max_length=10,
                    choices=[
                        ('LOW', 'Low'),
                        ('MEDIUM', 'Medium'),
                        ('HIGH', 'High'),
                    ],
                    default='MEDIUM',
                    db_index=True,
                    help_text='Nível de prioridade'
                )),
                ('status', models.CharField(
                    max_length=20,
                    choices=[
                        ('OPEN', 'Open'),
                        ('IN_PROGRESS', 'In Progress'),
                        ('ON_HOLD', 'On Hold'),
                        ('CANCELLED', 'Cancelled'),
                        ('CLOSED', 'Closed'),
                    ],
                    default='OPEN',
                    db_index=True,
                    help_text='Estado atual do ticket'
                )),
                ('attachments', models.JSONField(
                    default=list,
                    blank=True,
                    help_text='Chaves dos anexos no object storage'
                )),
                ('created_at', models.DateTimeField(
                    default=django.utils.timezone.now,
                    db_index=True,
                    help_text='Data/hora de criação'
                )),
                ('updated_at', models.DateTimeField(
                    default=django.utils.timezone.now,
                    help_text='Data/hora da última atualização'
                )),
                ('created_by', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='tickets',
                    to=settings.AUTH_USER_MODEL,
                    help_text='Dono do ticket'
                )),
            ],
            options={
                'verbose_name': 'Ticket',
                'verbose_name_plural': 'Tickets',
                'db_table': 'tickets',
                'ordering': ['-created_at'],
            },
        ),
        migrations.AddIndex(
            model_name='ticketmodel',
            index=models.Index(fields=['department', 'created_at'], name='tickets_departm_6c1f2a_idx'),
        ),
        migrations.AddIndex(
            model_name='ticketmodel',
            index=models.Index(fields=['created_by', 'created_at'], name='tickets_created_9b4e7d_idx'),
        ),
        migrations.AddIndex(
            model_name='ticketmodel',
            index=models.Index(fields=['status', 'created_at'], name='tickets_status_3a8c5e_idx'),
        ),
    ]
