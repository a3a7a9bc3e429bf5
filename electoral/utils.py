# ===================================================================
# electoral/utils.py
# ===================================================================

"""
Módulo de utilidades para la aplicación 'electoral'.

Funciones de ayuda reutilizables que no son vistas: limpieza y validación
de teléfonos, construcción de enlaces de WhatsApp y enlaces de invitación.
"""

import re
from datetime import datetime
from typing import Optional
from urllib.parse import quote, urlencode

from django.conf import settings
from django.core.exceptions import ValidationError
from django.utils import timezone

from .constants import RolPersona

_NO_DIGITOS = re.compile(r'\D+')


def limpiar_telefono(telefono: Optional[str]) -> str:
    """
    Deja solo los dígitos de un teléfono.

    :param telefono: Texto libre (ej: '+57 300-123-4567').
    :return: Solo dígitos (ej: '573001234567'), o cadena vacía.
    """
    if not telefono:
        return ''
    return _NO_DIGITOS.sub('', str(telefono))


def validar_telefono(telefono: Optional[str]) -> str:
    """
    Valida que el teléfono tenga exactamente 10 dígitos.

    :return: El teléfono limpio.
    :raises ValidationError: Si no tiene 10 dígitos.
    """
    limpio = limpiar_telefono(telefono)
    if len(limpio) != 10:
        raise ValidationError("El teléfono debe tener exactamente 10 dígitos.")
    return limpio


def formatear_telefono_whatsapp(telefono: Optional[str]) -> str:
    """
    Prepara un teléfono para wa.me: quita espacios, '+' y '-', y antepone el
    indicativo del país cuando el número tiene 10 dígitos.
    """
    limpio = re.sub(r'[\s+\-]', '', telefono or '')
    if len(limpio) == 10:
        prefijo = getattr(settings, 'PREFIJO_PAIS_WHATSAPP', '57')
        return f"{prefijo}{limpio}"
    return limpio


def telefono_whatsapp_valido(telefono: Optional[str]) -> bool:
    """True para un número ya formateado con indicativo: 57 + 10 dígitos."""
    prefijo = getattr(settings, 'PREFIJO_PAIS_WHATSAPP', '57')
    return (
        bool(telefono) and telefono.isdigit()
        and len(telefono) == len(prefijo) + 10 and telefono.startswith(prefijo)
    )


def enlace_whatsapp(telefono: Optional[str], mensaje: str) -> str:
    """
    Construye un enlace profundo https://wa.me/<telefono>?text=<mensaje>.
    Sin teléfono se genera el enlace de compartir (https://wa.me/?text=...).
    """
    numero = formatear_telefono_whatsapp(telefono)
    return f"https://wa.me/{numero}?text={quote(mensaje, safe='')}"


def personalizar_mensaje(plantilla: str, nombre: str, cedula: str,
                         incluir_fecha: bool = False, momento: Optional[datetime] = None) -> str:
    """
    Reemplaza {nombre} y {cedula} en la plantilla y, si se pide, agrega la
    marca "Enviado el <fecha> a las <hora>".
    """
    mensaje = plantilla.replace('{nombre}', nombre or '').replace('{cedula}', cedula or '')
    if incluir_fecha:
        momento = timezone.localtime(momento or timezone.now())
        mensaje += f"\n\nEnviado el {momento:%d/%m/%Y} a las {momento:%H:%M}"
    return mensaje


def enlace_invitacion(base_url: str, cedula_lider: str, rol: str = RolPersona.ASOCIADO) -> str:
    """
    Enlace público de registro que deja al nuevo miembro bajo el líder.

    :param base_url: URL absoluta de la página de registro (ej: 'https://crm.co/registro').
    :param cedula_lider: Cédula del líder que invita.
    :param rol: 'asociado' (por defecto) o 'impulsor'.
    """
    parametros = {'lider': cedula_lider}
    if rol == RolPersona.IMPULSOR:
        parametros['rol'] = RolPersona.IMPULSOR.value
    return f"{base_url}?{urlencode(parametros)}"
