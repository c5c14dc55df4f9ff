"""
URL patterns para o domínio de Tickets (API JSON).

- GET/POST /api/tickets/ - Listar / criar tickets
- GET/PUT/DELETE /api/tickets/<id>/ - Obter / atualizar / remover
- GET /api/dashboard/stats/ - Estatísticas
- GET /api/taxonomy/ - Tabela de categorias
"""

from django.urls import path

from . import api_views

app_name = 'tickets'

urlpatterns = [
    path('tickets/', api_views.TicketAPIListView.as_view(), name='api_list'),
    path('tickets/<int:pk>/', api_views.TicketAPIDetailView.as_view(), name='api_detail'),
    path('dashboard/stats/', api_views.DashboardStatsAPIView.as_view(), name='api_stats'),
    path('taxonomy/', api_views.TaxonomyAPIView.as_view(), name='api_taxonomy'),
]
