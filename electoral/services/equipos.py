# electoral/services/equipos.py

import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from electoral.constants import Estado, MUNICIPIO_DESCONOCIDO, RolPersona
from electoral.models import Persona
from electoral.reglas import derivar_estado
from electoral.services.registro import bloquear_lider, verificar_capacidad
from electoral.utils import validar_telefono

logger = logging.getLogger(__name__)

CAMPOS_EDITABLES = (
    'nombre_completo', 'telefono', 'email', 'lugar_votacion',
    'municipio_votacion', 'municipio_puesto', 'puesto_votacion',
    'mesa_votacion', 'votos_prometidos', 'notas',
)


def _asignar_equipo(lider, cedulas_asignadas):
    """
    Deja como asociados del líder exactamente las cédulas indicadas:
    apunta las nuevas al líder y libera las que ya no están en la lista.
    """
    asignadas = {str(c).strip() for c in cedulas_asignadas if c} - {lider.cedula}

    candidatos = Persona.objects.select_for_update().filter(pk__in=asignadas)
    encontrados = {p.cedula: p for p in candidatos}
    faltantes = asignadas - set(encontrados)
    if faltantes:
        raise ValidationError(f"No existen personas con cédula: {', '.join(sorted(faltantes))}.")
    no_asociados = [c for c, p in encontrados.items() if p.rol != RolPersona.ASOCIADO]
    if no_asociados:
        raise ValidationError(f"Solo se pueden asignar asociados. Revisar: {', '.join(sorted(no_asociados))}.")

    # Los que ya estaban y siguen asignados no consumen cupo nuevo
    actuales = set(
        Persona.objects.equipo_de(lider.cedula, RolPersona.ASOCIADO).values_list('cedula', flat=True)
    )
    nuevos = asignadas - actuales
    verificar_capacidad(lider, RolPersona.ASOCIADO, nuevos=len(nuevos), excluir=actuales - asignadas)

    ahora = timezone.now()
    liberados = (
        Persona.objects.equipo_de(lider.cedula, RolPersona.ASOCIADO)
        .exclude(pk__in=asignadas)
        .update(cedula_lider=None, updated_at=ahora)
    )
    Persona.objects.filter(pk__in=nuevos).update(cedula_lider=lider, updated_at=ahora)
    logger.info(
        "Equipo de %s: %d asignados, %d nuevos, %d liberados",
        lider.cedula, len(asignadas), len(nuevos), liberados,
    )


def promover_a_lider(persona, cedulas_asignadas):
    """
    Convierte a la persona en líder y le asigna su equipo en una sola transacción.

    - El promovido queda con cedula_lider = NULL (convención única para líderes).
    - Cada cédula de la lista queda apuntando al nuevo líder.
    - Los asociados que apuntaban a esta persona y no están en la lista se liberan.
    """
    with transaction.atomic():
        persona = Persona.objects.select_for_update().get(pk=persona.pk)
        persona.rol = RolPersona.LIDER
        persona.cedula_lider = None
        persona.save(update_fields=['rol', 'cedula_lider', 'updated_at'])
        _asignar_equipo(persona, cedulas_asignadas)
    logger.info("Persona %s promovida a líder", persona.cedula)
    return persona


def degradar_lider(persona, nuevo_rol, cedula_lider=None):
    """
    Quita el rol de líder: todo su equipo queda sin líder asignado y la
    persona pasa a depender de `cedula_lider` (o de nadie).
    """
    if nuevo_rol == RolPersona.LIDER:
        raise ValidationError("El nuevo rol debe ser distinto de líder.")
    with transaction.atomic():
        persona = Persona.objects.select_for_update().get(pk=persona.pk)
        huerfanos = Persona.objects.equipo_de(persona.cedula).update(
            cedula_lider=None, updated_at=timezone.now()
        )
        persona.rol = nuevo_rol
        persona.cedula_lider = None
        if cedula_lider:
            if cedula_lider == persona.cedula:
                raise ValidationError("Una persona no puede ser su propio líder.")
            lider = bloquear_lider(cedula_lider)
            verificar_capacidad(lider, nuevo_rol)
            persona.cedula_lider = lider
        persona.save(update_fields=['rol', 'cedula_lider', 'updated_at'])
    logger.info("Líder %s degradado a %s; %d miembros sin líder", persona.cedula, nuevo_rol, huerfanos)
    return persona


def actualizar_persona(persona, datos, cedulas_asignadas=None):
    """
    Edición completa desde el panel del administrador.

    :param datos: cleaned_data del formulario de edición. Puede traer 'rol',
                  'estado' (override manual) y 'cedula_lider'.
    :param cedulas_asignadas: Asociados del equipo cuando la persona es o pasa a ser líder.
    """
    nuevo_rol = datos.get('rol') or persona.rol
    if nuevo_rol not in RolPersona.values:
        raise ValidationError(f"Rol inválido: {nuevo_rol}")

    nuevo_lider = datos.get('cedula_lider')
    if isinstance(nuevo_lider, Persona):
        nuevo_lider = nuevo_lider.cedula

    with transaction.atomic():
        persona = Persona.objects.select_for_update().get(pk=persona.pk)
        rol_anterior = persona.rol
        if 'cedula_lider' not in datos:
            nuevo_lider = persona.cedula_lider_id

        estado_anterior = persona.estado
        municipios_anteriores = (persona.municipio_votacion, persona.municipio_puesto)
        for campo in CAMPOS_EDITABLES:
            if campo in datos:
                setattr(persona, campo, datos[campo])
        if persona.telefono:
            persona.telefono = validar_telefono(persona.telefono)
        if persona.municipio_puesto == MUNICIPIO_DESCONOCIDO:
            persona.puesto_votacion = None
            persona.mesa_votacion = None

        estado = datos.get('estado')
        if estado and estado != estado_anterior:
            if estado not in Estado.values:
                raise ValidationError(f"Estado inválido: {estado}")
            persona.estado = estado
        elif (persona.municipio_votacion, persona.municipio_puesto) != municipios_anteriores:
            persona.estado = derivar_estado(persona.municipio_votacion, persona.municipio_puesto)

        if nuevo_rol == RolPersona.LIDER:
            persona.cedula_lider = None
            persona.save()
            if rol_anterior != RolPersona.LIDER:
                promover_a_lider(persona, cedulas_asignadas or [])
            elif cedulas_asignadas is not None:
                _asignar_equipo(persona, cedulas_asignadas)
        elif rol_anterior == RolPersona.LIDER:
            persona.save()
            degradar_lider(persona, nuevo_rol, nuevo_lider)
        else:
            cambia_lider = nuevo_lider != persona.cedula_lider_id
            if nuevo_lider and (cambia_lider or nuevo_rol != rol_anterior):
                if nuevo_lider == persona.cedula:
                    raise ValidationError("Una persona no puede ser su propio líder.")
                lider = bloquear_lider(nuevo_lider)
                verificar_capacidad(lider, nuevo_rol, excluir=[persona.cedula])
                persona.cedula_lider = lider
            elif not nuevo_lider:
                persona.cedula_lider = None
            persona.rol = nuevo_rol
            persona.save()

    persona.refresh_from_db()
    logger.info("Persona %s actualizada (rol %s -> %s)", persona.cedula, rol_anterior, persona.rol)
    return persona
