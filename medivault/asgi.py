"""
ASGI config for the MediVault project.

The API is plain request/response HTTP, so the Django ASGI handler is
served directly.
"""
import os

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "medivault.settings")

from django.core.asgi import get_asgi_application  # noqa: E402

application = get_asgi_application()
