# ===================================================================
# electoral/routing.py (RUTAS WEBSOCKET)
# ===================================================================

from django.urls import re_path
from . import consumers

websocket_urlpatterns = [
    # Badge de mensajes sin leer (líder o administrador según la sesión)
    re_path(r'ws/chat/notificaciones/$', consumers.ChatNotificationConsumer.as_asgi()),
]
