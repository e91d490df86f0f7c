"""
WSGI config for the resumebuilder project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'resumebuilder.settings')

application = get_wsgi_application()
