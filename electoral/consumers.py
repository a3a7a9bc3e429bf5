# ===================================================================
# electoral/consumers.py (BADGE DE CHAT EN TIEMPO REAL)
# ===================================================================

import json
from channels.generic.websocket import AsyncWebsocketConsumer
from channels.db import database_sync_to_async

from .constants import GRUPO_ADMIN
from .services.chat import conteo_no_leidos
from .sesion import cargar_sesion
from .signals import grupo_lider


class ChatNotificationConsumer(AsyncWebsocketConsumer):
    """
    Canal personal del líder (grupo lider_<cedula>) o del administrador
    (grupo admin). Solo empuja avisos; los mensajes se leen por HTTP.
    """
    async def connect(self):
        self.sesion = await self.obtener_sesion()

        if self.sesion is None:
            await self.close()
            return

        self.group_name = GRUPO_ADMIN if self.sesion.es_admin else grupo_lider(self.sesion.cedula)

        await self.channel_layer.group_add(
            self.group_name,
            self.channel_name
        )

        await self.accept()

        # Estado inicial del badge
        await self.send(text_data=json.dumps({
            'type': 'unread_count',
            'count': await self.obtener_no_leidos(),
        }))

    async def disconnect(self, close_code):
        if hasattr(self, 'group_name'):
            await self.channel_layer.group_discard(
                self.group_name,
                self.channel_name
            )

    async def chat_message(self, event):
        await self.send(text_data=json.dumps({
            'type': 'chat_message',
            'lider': event['lider'],
            'de_admin': event['de_admin'],
            'contenido': event['contenido'],
            'created_at': event.get('created_at', ''),
            'count': await self.obtener_no_leidos(),
        }))

    @database_sync_to_async
    def obtener_sesion(self):
        session = self.scope.get('session')
        if session is None:
            return None
        return cargar_sesion(session)

    @database_sync_to_async
    def obtener_no_leidos(self):
        return conteo_no_leidos(self.sesion)
