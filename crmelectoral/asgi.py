# crmelectoral/asgi.py

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'crmelectoral.settings')

# Django debe inicializarse antes de importar consumers (usan modelos)
django_asgi_app = get_asgi_application()

from channels.routing import ProtocolTypeRouter, URLRouter  # noqa: E402
from channels.sessions import SessionMiddlewareStack  # noqa: E402
from electoral.routing import websocket_urlpatterns  # noqa: E402

application = ProtocolTypeRouter({
    'http': django_asgi_app,
    # La sesión electoral vive en la sesión de Django, no en auth.User
    'websocket': SessionMiddlewareStack(
        URLRouter(websocket_urlpatterns)
    ),
})
