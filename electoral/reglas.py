# ===================================================================
# electoral/reglas.py
# ===================================================================

"""
Reglas de negocio compartidas por todos los puntos de entrada.

Registro público, registro por el administrador, registro de impulsores,
importación masiva y el recálculo por lotes usan exactamente estas
funciones. Ninguna toca la base de datos.
"""

import unicodedata
from typing import Iterable, Optional

from django.conf import settings

from .constants import (
    Estado,
    MUNICIPIO_DESCONOCIDO,
    SIN_MUNICIPIO,
    UBICACION_DESCONOCIDA,
)


def max_miembros_por_lider() -> int:
    return getattr(settings, 'MAX_MIEMBROS_POR_LIDER', 60)


def municipio_distinguido() -> str:
    return getattr(settings, 'MUNICIPIO_DISTINGUIDO', 'Bello')


def normalizar_ubicacion(nombre: Optional[str]) -> str:
    """
    Forma canónica de un nombre de lugar: sin tildes, sin espacios en los
    extremos y en MAYÚSCULAS.

    :param nombre: Texto libre (ej: ' yarumál').
    :return: Nombre normalizado (ej: 'YARUMAL') o 'UNKNOWN' si viene vacío.
    """
    if not nombre:
        return UBICACION_DESCONOCIDA
    descompuesto = unicodedata.normalize('NFD', str(nombre))
    sin_tildes = ''.join(c for c in descompuesto if not unicodedata.combining(c))
    limpio = sin_tildes.strip().upper()
    return limpio or UBICACION_DESCONOCIDA


def derivar_estado(municipio_residencia: Optional[str], municipio_puesto: Optional[str]) -> str:
    """
    Estado de una persona según dónde vive y dónde vota. Registro,
    importación, edición y recálculo por lotes usan solo esta función.

    1. Si falta alguno de los dos (registros antiguos o importados) -> PENDIENTE.
    2. Si alguno de los dos es "No Se" -> PENDIENTE.
    3. Si son iguales (comparación literal) -> APROBADO.
    4. En cualquier otro caso -> RECHAZADO.
    """
    if not municipio_residencia or not municipio_puesto:
        return Estado.PENDIENTE
    if municipio_residencia == MUNICIPIO_DESCONOCIDO or municipio_puesto == MUNICIPIO_DESCONOCIDO:
        return Estado.PENDIENTE
    if municipio_residencia == municipio_puesto:
        return Estado.APROBADO
    return Estado.RECHAZADO


def calcular_vota_en_bello(municipio_puesto: Optional[str]) -> bool:
    return municipio_puesto == municipio_distinguido()


def puede_agregar_miembro(conteo_actual: int) -> bool:
    """True mientras el líder tenga menos miembros que el cupo (60 por defecto)."""
    return conteo_actual < max_miembros_por_lider()


def _valor(persona, campo):
    if isinstance(persona, dict):
        return persona.get(campo)
    return getattr(persona, campo, None)


def agregar_por_municipio(personas: Iterable, campo: str = 'municipio_puesto') -> list:
    """
    Agrupa personas por municipio de puesto para el dashboard.

    Acepta diccionarios o instancias del modelo. Los vacíos caen en
    'No definido'. Orden: conteo descendente; los empates conservan el
    orden de primera aparición.

    :return: Lista de {'name', 'count', 'percentage'} con porcentaje a 2 decimales.
    """
    conteos = {}
    total = 0
    for persona in personas:
        nombre = _valor(persona, campo) or SIN_MUNICIPIO
        conteos[nombre] = conteos.get(nombre, 0) + 1
        total += 1

    if total == 0:
        return []

    resultado = [
        {
            'name': nombre,
            'count': conteo,
            'percentage': round(conteo * 100 / total, 2),
        }
        for nombre, conteo in conteos.items()
    ]
    # sorted() es estable: los empates quedan en orden de inserción
    return sorted(resultado, key=lambda item: item['count'], reverse=True)
