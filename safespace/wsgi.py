"""
WSGI config for the safespace project.

Exposes the WSGI callable as a module-level variable named ``application``;
gunicorn loads it as ``safespace.wsgi:application``.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'safespace.settings')

application = get_wsgi_application()
