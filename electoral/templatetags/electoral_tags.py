from django import template
from django.utils.html import format_html

from electoral.constants import Estado, RolPersona
from electoral.utils import enlace_whatsapp

register = template.Library()

# =======================================================
# 1. AYUDAS VISUALES (UX/UI)
# =======================================================

CLASES_ESTADO = {
    Estado.APROBADO: 'bg-success',
    Estado.PENDIENTE: 'bg-warning text-dark',
    Estado.RECHAZADO: 'bg-danger',
}


@register.filter
def estado_badge(estado):
    """
    Badge de Bootstrap con el color del estado.
    Uso: {{ persona.estado|estado_badge }}
    """
    try:
        etiqueta = Estado(estado).label
    except ValueError:
        return ''
    return format_html('<span class="badge {}">{}</span>', CLASES_ESTADO[estado], etiqueta)


@register.filter
def rol_legible(rol):
    """Nombre del rol para encabezados: {{ rol|rol_legible }} -> 'Asociado'."""
    try:
        return RolPersona(rol).label
    except ValueError:
        return rol


# =======================================================
# 2. ENLACES
# =======================================================

@register.filter
def whatsapp_link(telefono, mensaje=''):
    """
    Enlace wa.me para un teléfono local.
    Uso: <a href="{{ persona.telefono|whatsapp_link }}">
    """
    if not telefono:
        return ''
    return enlace_whatsapp(telefono, mensaje or '')
