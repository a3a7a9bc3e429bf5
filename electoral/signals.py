# ===================================================================
# electoral/signals.py (NOTIFICACIONES EN TIEMPO REAL)
# ===================================================================

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db.models.signals import post_save
from django.dispatch import receiver

from .constants import GRUPO_ADMIN
from .models import ChatMessage

logger = logging.getLogger(__name__)


def grupo_lider(cedula):
    return f"lider_{cedula}"


# Cada mensaje nuevo refresca el badge del destinatario.
@receiver(post_save, sender=ChatMessage)
def notificar_mensaje_chat(sender, instance, created, **kwargs):
    if not created:
        return

    channel_layer = get_channel_layer()
    if channel_layer is None:
        logger.debug("Sin CHANNEL_LAYERS configurado; no se envía notificación de chat")
        return

    destino = grupo_lider(instance.lider_id) if instance.de_admin else GRUPO_ADMIN
    async_to_sync(channel_layer.group_send)(
        destino,
        {
            'type': 'chat_message',
            'id': instance.pk,
            'lider': instance.lider_id,
            'de_admin': instance.de_admin,
            'contenido': instance.contenido,
            'created_at': instance.created_at.isoformat(),
        }
    )
