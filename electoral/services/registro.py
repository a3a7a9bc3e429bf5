# electoral/services/registro.py

import logging

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from electoral.constants import Estado, RolPersona, REGISTRADO_POR_ADMIN
from electoral.models import Persona
from electoral.reglas import derivar_estado, max_miembros_por_lider, puede_agregar_miembro
from electoral.utils import validar_telefono

logger = logging.getLogger(__name__)

CAMPOS_REGISTRO = (
    'nombre_completo', 'telefono', 'email', 'lugar_votacion',
    'municipio_votacion', 'municipio_puesto', 'puesto_votacion',
    'mesa_votacion', 'votos_prometidos', 'notas',
)


class CapacidadExcedidaError(ValidationError):
    """El líder ya completó su cupo de miembros para ese rol."""


def bloquear_lider(cedula_lider):
    """
    Obtiene el líder con bloqueo de fila (SELECT ... FOR UPDATE).
    Debe llamarse dentro de transaction.atomic().

    :raises ValidationError: Si la cédula no corresponde a un líder.
    """
    lider = Persona.objects.select_for_update().filter(pk=cedula_lider, rol=RolPersona.LIDER).first()
    if lider is None:
        raise ValidationError(f"El líder con cédula {cedula_lider} no existe.")
    return lider


def verificar_capacidad(lider, rol, nuevos=1, excluir=()):
    """
    Comprueba que el líder (ya bloqueado) pueda recibir `nuevos` miembros del rol.

    :raises CapacidadExcedidaError: Si se supera el cupo.
    """
    conteo = Persona.objects.equipo_de(lider.cedula, rol).exclude(pk__in=excluir).count()
    for i in range(nuevos):
        if not puede_agregar_miembro(conteo + i):
            etiqueta = 'asociados' if rol == RolPersona.ASOCIADO else 'impulsores'
            raise CapacidadExcedidaError(
                f"El líder {lider.nombre_completo} ya tiene el máximo de "
                f"{max_miembros_por_lider()} {etiqueta}."
            )


def registrar_persona(datos, rol, sesion=None, cedula_lider=None, estado=None):
    """
    Registra una persona nueva aplicando las reglas comunes.

    1. Valida teléfono y cédula duplicada.
    2. Si hay líder, lo bloquea y verifica el cupo dentro de la misma transacción.
    3. Deriva el estado con derivar_estado() salvo que se indique uno explícito.
       Los formularios exigen ambos municipios; quien llame sin ellos (scripts,
       integraciones) obtiene PENDIENTE, igual que en la importación y el recálculo.

    :param datos: cleaned_data de un formulario (o dict equivalente).
    :param rol: RolPersona del nuevo registro.
    :param sesion: SesionElectoral de quien registra (None para el registro público).
    :param cedula_lider: Líder al que queda asignado (ignorado para líderes).
    :return: La Persona creada.
    :raises ValidationError: Errores de validación o de cupo.
    """
    if rol not in RolPersona.values:
        raise ValidationError(f"Rol inválido: {rol}")

    cedula = str(datos.get('cedula') or '').strip()
    nombre = (datos.get('nombre_completo') or '').strip()
    if not cedula or not nombre:
        raise ValidationError("La cédula y el nombre completo son obligatorios.")

    telefono = datos.get('telefono')
    if telefono:
        telefono = validar_telefono(telefono)

    if rol == RolPersona.LIDER:
        cedula_lider = None
    if cedula_lider == cedula:
        raise ValidationError("Una persona no puede ser su propio líder.")

    campos = {campo: datos.get(campo) for campo in CAMPOS_REGISTRO if campo in datos}
    campos['nombre_completo'] = nombre
    campos['telefono'] = telefono or None
    campos['votos_prometidos'] = datos.get('votos_prometidos') or 0

    if estado is None:
        estado = derivar_estado(campos.get('municipio_votacion'), campos.get('municipio_puesto'))

    registrado_por = sesion.registrado_por if sesion is not None else cedula
    try:
        with transaction.atomic():
            if Persona.objects.filter(pk=cedula).exists():
                raise ValidationError(f"Ya existe una persona registrada con la cédula {cedula}.")

            lider = None
            if cedula_lider:
                lider = bloquear_lider(cedula_lider)
                verificar_capacidad(lider, rol)

            persona = Persona.objects.create(
                cedula=cedula,
                rol=rol,
                cedula_lider=lider,
                estado=estado,
                registrado_por=registrado_por,
                fecha_registro=timezone.now(),
                **campos,
            )
    except IntegrityError:
        logger.exception("Error de integridad registrando la cédula %s", cedula)
        raise ValidationError(f"Ya existe una persona registrada con la cédula {cedula}.")

    logger.info(
        "Registro de %s %s (estado=%s, lider=%s, por=%s)",
        rol, cedula, estado, cedula_lider or '-', registrado_por,
    )
    return persona


def registrar_lider(datos, sesion=None):
    return registrar_persona(datos, RolPersona.LIDER, sesion=sesion)


def registrar_miembro(datos, rol, sesion, cedula_lider=None):
    """
    Registro de asociados e impulsores desde el panel.
    Un líder siempre registra bajo sí mismo; el administrador elige (o no) el líder.
    """
    if sesion.es_lider:
        cedula_lider = sesion.lider_para_registro()
    elif cedula_lider == REGISTRADO_POR_ADMIN:
        cedula_lider = None
    return registrar_persona(datos, rol, sesion=sesion, cedula_lider=cedula_lider)


def cambiar_estado(persona, estado):
    """Override manual del estado por parte del administrador."""
    if estado not in Estado.values:
        raise ValidationError(f"Estado inválido: {estado}")
    persona.estado = estado
    persona.save(update_fields=['estado', 'updated_at'])
    logger.info("Estado de %s cambiado a %s", persona.cedula, estado)
    return persona
