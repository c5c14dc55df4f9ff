"""
WSGI config do HelpDesk.

Expõe o callable `application` usado pelo servidor WSGI.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'helpdesk.config.settings')

application = get_wsgi_application()
