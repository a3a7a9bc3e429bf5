# electoral/services/chat.py

import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, Max, Q

from electoral.constants import MENSAJE_AUTORESPUESTA, RolPersona
from electoral.models import ChatMessage, Persona

logger = logging.getLogger(__name__)


def _lider(cedula):
    lider = Persona.objects.filter(pk=cedula, rol=RolPersona.LIDER).first()
    if lider is None:
        raise ValidationError("La conversación solo puede ser con un líder.")
    return lider


def enviar_mensaje(sesion, contenido, cedula_lider=None):
    """
    Envía un mensaje en la conversación líder <-> administrador.

    Un líder siempre escribe en su propia conversación. El primer mensaje que
    envía un líder recibe la respuesta automática del administrador.

    :param cedula_lider: Conversación destino cuando escribe el administrador.
    :return: Lista de mensajes creados (el enviado y, si aplica, la autorrespuesta).
    """
    contenido = (contenido or '').strip()
    if not contenido:
        raise ValidationError("El mensaje no puede estar vacío.")

    if sesion.es_admin:
        if not cedula_lider:
            raise ValidationError("Seleccione la conversación del líder.")
        lider = _lider(cedula_lider)
        mensaje = ChatMessage.objects.create(lider=lider, de_admin=True, contenido=contenido)
        return [mensaje]

    lider = _lider(sesion.cedula)
    with transaction.atomic():
        es_primero = not ChatMessage.objects.filter(lider=lider).exists()
        creados = [ChatMessage.objects.create(lider=lider, de_admin=False, contenido=contenido)]
        if es_primero:
            creados.append(ChatMessage.objects.create(
                lider=lider, de_admin=True, contenido=MENSAJE_AUTORESPUESTA,
            ))
            logger.info("Primer mensaje del líder %s: alerta enviada al administrador", lider.cedula)
    return creados


def conversacion(cedula_lider):
    return ChatMessage.objects.filter(lider_id=cedula_lider)


def marcar_leidos(sesion, cedula_lider=None):
    """Marca como leídos los mensajes que la otra parte envió a quien abre la conversación."""
    if sesion.es_admin:
        qs = ChatMessage.objects.filter(lider_id=cedula_lider, de_admin=False, leido=False)
    else:
        qs = ChatMessage.objects.filter(lider_id=sesion.cedula, de_admin=True, leido=False)
    return qs.update(leido=True)


def conteo_no_leidos(sesion):
    if sesion is None:
        return 0
    if sesion.es_admin:
        return ChatMessage.objects.filter(de_admin=False, leido=False).count()
    return ChatMessage.objects.filter(lider_id=sesion.cedula, de_admin=True, leido=False).count()


def conversaciones_activas():
    """Líderes con al menos un mensaje, del más reciente al más antiguo, con su conteo de no leídos."""
    return (
        Persona.objects.filter(rol=RolPersona.LIDER, mensajes_chat__isnull=False)
        .annotate(
            ultimo_mensaje=Max('mensajes_chat__created_at'),
            no_leidos=Count(
                'mensajes_chat',
                filter=Q(mensajes_chat__de_admin=False, mensajes_chat__leido=False),
            ),
        )
        .order_by('-ultimo_mensaje')
    )
