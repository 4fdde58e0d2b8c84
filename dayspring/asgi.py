"""
ASGI config for the Dayspring project.

Exports are served as plain HTTP responses, so only the Django ASGI
application is mounted here.
"""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "dayspring.settings")

application = get_asgi_application()
