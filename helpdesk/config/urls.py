"""
URL Configuration para o HelpDesk.

Estrutura:
- /admin/ - Django Admin
- /api/ - API JSON de Tickets
- /health/ - Liveness
"""

from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path


def health(request):
    return JsonResponse({'status': 'ok'})


urlpatterns = [
    # Django Admin
    path('admin/', admin.site.urls),

    # API de Tickets
    path('api/', include('helpdesk.adapters.django_app.tickets.urls')),

    # Health check
    path('health/', health, name='health'),
]
