"""
Configuração do Celery para processamento assíncrono.

O Celery é usado para:
- Processar Domain Events fora do request/response
- Enviar as notificações por email

Arquitetura:
- Broker: RabbitMQ (mensagens entre Django e Workers)
- Backend: Redis (resultados de tarefas)
- Workers: Processos que executam as tarefas

Uso:
    # Iniciar worker
    celery -A helpdesk.config.celery worker -Q default,events -l INFO
"""

import os

from celery import Celery
from kombu import Exchange, Queue

# Definir módulo de settings do Django
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'helpdesk.config.settings')

# Criar aplicação Celery
app = Celery('helpdesk')

# Carregar configurações do Django (prefixo CELERY_)
app.config_from_object('django.conf:settings', namespace='CELERY')

app.conf.update(
    # Serialização
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',

    # Configurações de execução
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,

    # Resultados
    result_expires=3600,
)

# Definir filas
app.conf.task_queues = (
    Queue('default', Exchange('default'), routing_key='default'),
    Queue('events', Exchange('events'), routing_key='events.#'),
)
app.conf.task_default_queue = 'default'

# Roteamento de tarefas para filas
app.conf.task_routes = {
    'helpdesk.adapters.django_app.events.handlers.*': {'queue': 'events'},
}

# Auto-descoberta: as tasks ficam em events/handlers.py
app.autodiscover_tasks(['helpdesk.adapters.django_app.events'], related_name='handlers')
