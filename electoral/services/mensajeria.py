# electoral/services/mensajeria.py

"""
Mensajería masiva por WhatsApp.

El servidor solo arma los enlaces wa.me personalizados; el envío, el ritmo
y la pausa los controla el navegador.
"""

from electoral.constants import RolPersona
from electoral.models import Persona
from electoral.utils import (
    enlace_invitacion,
    enlace_whatsapp,
    formatear_telefono_whatsapp,
    limpiar_telefono,
    personalizar_mensaje,
    telefono_whatsapp_valido,
)

DESTINATARIOS_CHOICES = (
    ('lideres', 'Líderes'),
    ('asociados', 'Asociados'),
    ('impulsores', 'Impulsores'),
    ('todos', 'Todos'),
)


def destinatarios(grupo, estado=None):
    qs = Persona.objects.all()
    if grupo == 'lideres':
        qs = qs.lideres()
    elif grupo == 'asociados':
        qs = qs.asociados()
    elif grupo == 'impulsores':
        qs = qs.impulsores()
    if estado:
        qs = qs.filter(estado=estado)
    return qs.exclude(telefono__isnull=True).exclude(telefono='')


def preparar_envios(personas, plantilla, incluir_fecha=False, momento=None):
    """
    Arma la cola de envíos.

    :return: (envios, omitidos). Cada envío es un dict con cedula, nombre,
             telefono, mensaje y enlace. Se aceptan números de 10 dígitos o con
             el indicativo del país ya puesto (como los deja la importación);
             el resto va a omitidos.
    """
    envios, omitidos = [], []
    for persona in personas:
        telefono = formatear_telefono_whatsapp(limpiar_telefono(persona.telefono))
        if not telefono_whatsapp_valido(telefono):
            omitidos.append(persona)
            continue
        mensaje = personalizar_mensaje(
            plantilla, persona.nombre_completo, persona.cedula,
            incluir_fecha=incluir_fecha, momento=momento,
        )
        envios.append({
            'cedula': persona.cedula,
            'nombre': persona.nombre_completo,
            'telefono': telefono,
            'mensaje': mensaje,
            'enlace': enlace_whatsapp(telefono, mensaje),
        })
    return envios, omitidos


def invitaciones_lider(base_url, lider):
    """Enlaces de registro del líder para asociados e impulsores, con su versión para compartir."""
    resultado = {}
    for rol in (RolPersona.ASOCIADO, RolPersona.IMPULSOR):
        enlace = enlace_invitacion(base_url, lider.cedula, rol)
        texto = (
            f"Hola, {lider.nombre_completo} te invita a unirte como "
            f"{rol.label.lower()}. Regístrate aquí: {enlace}"
        )
        resultado[rol.value] = {
            'enlace': enlace,
            'whatsapp': enlace_whatsapp('', texto),
        }
    return resultado
