# electoral/services/importacion.py

"""
Importación de hojas de cálculo (.csv y .xlsx).

El mapa de encabezados se resuelve UNA vez al inicio: si falta alguna
columna obligatoria el archivo se rechaza antes de escribir nada. Los
errores por fila se acumulan como "Fila N: ..." y se reportan al final.
"""

import csv
import io
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone
from openpyxl import load_workbook

from electoral.constants import (
    ALIAS_COLUMNAS_PERSONAS,
    ALIAS_COLUMNAS_PUESTOS,
    COLUMNAS_OBLIGATORIAS_PERSONAS,
    COLUMNAS_OBLIGATORIAS_PUESTOS,
    Estado,
    RolPersona,
)
from electoral.models import Persona, PuestoVotacion
from electoral.reglas import derivar_estado, municipio_distinguido, normalizar_ubicacion
from electoral.utils import limpiar_telefono

logger = logging.getLogger(__name__)

EXTENSIONES_PERMITIDAS = ('.csv', '.xlsx')
VALORES_SI = {'SI', 'S', 'TRUE', '1', 'X'}
CAMPOS_TEXTO = (
    'email', 'lugar_votacion', 'municipio_votacion', 'municipio_puesto',
    'puesto_votacion', 'mesa_votacion', 'notas',
)
CAMPOS_MUNICIPIO = ('municipio_votacion', 'municipio_puesto')


class ArchivoNoMapeableError(ValidationError):
    """El archivo no trae las columnas mínimas para importar."""


@dataclass
class ResultadoImportacion:
    creados: int = 0
    actualizados: int = 0
    vinculados: int = 0
    errores: List[str] = field(default_factory=list)

    @property
    def procesados(self):
        return self.creados + self.actualizados


# ===================================================================
# LECTURA DEL ARCHIVO
# ===================================================================

def leer_filas(archivo, nombre_archivo: str) -> Tuple[List[str], List[dict]]:
    """
    Lee un .csv (UTF-8, con o sin BOM) o un .xlsx (primera hoja).

    :return: (encabezados, filas) donde cada fila es un dict encabezado -> valor.
    :raises ValidationError: Extensión no soportada o archivo ilegible.
    """
    nombre = (nombre_archivo or '').lower()
    if nombre.endswith('.csv'):
        contenido = archivo.read()
        if isinstance(contenido, bytes):
            contenido = contenido.decode('utf-8-sig')
        reader = csv.DictReader(io.StringIO(contenido))
        encabezados = [h for h in (reader.fieldnames or []) if h is not None]
        return encabezados, list(reader)

    if nombre.endswith('.xlsx'):
        libro = load_workbook(archivo, read_only=True, data_only=True)
        try:
            hoja = libro.worksheets[0]
            filas = hoja.iter_rows(values_only=True)
            primera = next(filas, None)
            if primera is None:
                return [], []
            encabezados = [str(h).strip() if h is not None else '' for h in primera]
            datos = []
            for valores in filas:
                if valores is None or all(v in (None, '') for v in valores):
                    continue
                datos.append(dict(zip(encabezados, valores)))
            return encabezados, datos
        finally:
            libro.close()

    raise ValidationError(
        f"Formato no soportado: {nombre_archivo}. Use {' o '.join(EXTENSIONES_PERMITIDAS)}."
    )


def resolver_columnas(encabezados: Iterable[str], alias: Dict[str, tuple],
                      obligatorias: Iterable[str]) -> Dict[str, str]:
    """
    Traduce los encabezados del archivo a campos del modelo.

    La comparación usa normalizar_ubicacion() (sin tildes, mayúsculas), así
    'Cédula', 'CEDULA' y 'cedula' resuelven igual.

    :return: Mapa campo -> encabezado real del archivo.
    :raises ArchivoNoMapeableError: Si falta alguna columna obligatoria.
    """
    por_clave = {}
    for encabezado in encabezados:
        if encabezado:
            por_clave.setdefault(normalizar_ubicacion(encabezado), encabezado)

    mapa = {}
    for campo, opciones in alias.items():
        for opcion in opciones:
            real = por_clave.get(normalizar_ubicacion(opcion))
            if real is not None:
                mapa[campo] = real
                break

    faltantes = [c for c in obligatorias if c not in mapa]
    if faltantes:
        esperadas = "; ".join(f"{c}: {', '.join(alias[c])}" for c in faltantes)
        raise ArchivoNoMapeableError(f"El archivo no tiene las columnas obligatorias ({esperadas}).")
    return mapa


# ===================================================================
# CONVERSIÓN DE VALORES
# ===================================================================

def _texto(valor) -> Optional[str]:
    if valor is None:
        return None
    if isinstance(valor, float) and valor.is_integer():
        valor = int(valor)
    texto = str(valor).strip()
    return texto or None


def _booleano(valor) -> bool:
    if isinstance(valor, bool):
        return valor
    return normalizar_ubicacion(_texto(valor)) in VALORES_SI


def _entero(valor) -> int:
    texto = _texto(valor)
    if not texto:
        return 0
    try:
        return max(int(float(texto)), 0)
    except ValueError:
        raise ValueError(f"valor numérico inválido '{texto}'")


def _fecha(valor) -> Optional[datetime]:
    if valor in (None, ''):
        return None
    if isinstance(valor, datetime):
        fecha = valor
    elif isinstance(valor, date):
        fecha = datetime(valor.year, valor.month, valor.day)
    else:
        texto = _texto(valor)
        try:
            fecha = datetime.strptime(texto, '%d/%m/%Y')
        except ValueError:
            raise ValueError(f"fecha inválida '{texto}' (se espera DD/MM/AAAA)")
    if timezone.is_naive(fecha):
        fecha = timezone.make_aware(fecha)
    return fecha


def _rol(valor) -> Optional[str]:
    texto = _texto(valor)
    if not texto:
        return None
    rol = normalizar_ubicacion(texto).lower()
    if rol not in RolPersona.values:
        raise ValueError(f"rol inválido '{texto}'")
    return rol


def _estado(valor) -> Optional[str]:
    texto = _texto(valor)
    if texto:
        estado = normalizar_ubicacion(texto)
        if estado in Estado.values:
            return estado
    return None


def _persona_desde_fila(fila: dict, mapa: Dict[str, str]) -> Tuple[str, dict, Optional[str]]:
    """
    Convierte una fila a (cedula, campos, cedula_lider).

    `campos` solo trae los campos cuya columna existe en el archivo: una
    reimportación con menos columnas no borra lo que ya estaba guardado.
    Una celda de Rol vacía tampoco cambia el rol de una persona existente.
    """
    def valor(campo):
        encabezado = mapa.get(campo)
        return fila.get(encabezado) if encabezado else None

    cedula = _texto(valor('cedula'))
    nombre = _texto(valor('nombre_completo'))
    if not cedula or not nombre:
        raise ValueError("faltan la cédula o el nombre completo")

    campos = {'nombre_completo': nombre}
    for campo in CAMPOS_TEXTO:
        if campo in mapa:
            campos[campo] = _texto(valor(campo))
    if 'telefono' in mapa:
        campos['telefono'] = limpiar_telefono(valor('telefono')) or None
    if 'votos_prometidos' in mapa:
        campos['votos_prometidos'] = _entero(valor('votos_prometidos'))
    if not campos.get('municipio_puesto') and _booleano(valor('vota_en_bello')):
        campos['municipio_puesto'] = municipio_distinguido()

    rol = _rol(valor('rol'))
    if rol:
        campos['rol'] = rol
    estado = _estado(valor('estado'))
    if estado:
        campos['estado'] = estado
    fecha = _fecha(valor('fecha_registro'))
    if fecha is not None:
        campos['fecha_registro'] = fecha

    cedula_lider = None if rol == RolPersona.LIDER else _texto(valor('cedula_lider'))
    if cedula_lider == cedula:
        cedula_lider = None
    return cedula, campos, cedula_lider


def _crear(cedula, campos, registrado_por):
    campos.setdefault('rol', RolPersona.ASOCIADO)
    if 'estado' not in campos:
        campos['estado'] = derivar_estado(campos.get('municipio_votacion'), campos.get('municipio_puesto'))
    Persona.objects.create(cedula=cedula, registrado_por=registrado_por, **campos)


def _actualizar(persona, campos):
    """Aplica sobre una persona ya registrada solo los campos presentes en el archivo."""
    if persona.es_lider and campos.get('rol', RolPersona.LIDER) != RolPersona.LIDER:
        Persona.objects.equipo_de(persona.cedula).update(cedula_lider=None, updated_at=timezone.now())

    cambia_municipio = any(
        campo in campos and campos[campo] != getattr(persona, campo)
        for campo in CAMPOS_MUNICIPIO
    )
    for campo, valor in campos.items():
        setattr(persona, campo, valor)
    if 'estado' not in campos and cambia_municipio:
        persona.estado = derivar_estado(persona.municipio_votacion, persona.municipio_puesto)
    if persona.rol == RolPersona.LIDER:
        persona.cedula_lider = None
    persona.save()


# ===================================================================
# IMPORTACIONES
# ===================================================================

def importar_personas(archivo, nombre_archivo: str, registrado_por: str = 'admin') -> ResultadoImportacion:
    """
    Importa personas en dos pasadas:

    1. Alta o actualización de cada fila SIN tocar el líder (así el orden de
       las filas no importa). Las personas existentes solo cambian en las
       columnas que trae el archivo.
    2. Asignación de cedula_lider una vez que todos los líderes existen.

    :raises ValidationError: Si el archivo no se puede leer o mapear.
    """
    encabezados, filas = leer_filas(archivo, nombre_archivo)
    mapa = resolver_columnas(encabezados, ALIAS_COLUMNAS_PERSONAS, COLUMNAS_OBLIGATORIAS_PERSONAS)
    logger.info("Importando %d filas de %s (columnas: %s)", len(filas), nombre_archivo, mapa)

    resultado = ResultadoImportacion()
    vinculos = []

    # Pasada 1: personas sin líder
    for i, fila in enumerate(filas, start=2):
        try:
            cedula, campos, cedula_lider = _persona_desde_fila(fila, mapa)
            with transaction.atomic():
                existente = Persona.objects.select_for_update().filter(pk=cedula).first()
                if existente is None:
                    _crear(cedula, campos, registrado_por)
                    resultado.creados += 1
                else:
                    _actualizar(existente, campos)
                    resultado.actualizados += 1
            vinculos.append((i, cedula, cedula_lider))
        except (ValidationError, ValueError, IntegrityError) as e:
            resultado.errores.append(f"Fila {i}: {e}")

    # Pasada 2: vínculos con el líder
    lideres = set(Persona.objects.lideres().values_list('cedula', flat=True))
    for i, cedula, cedula_lider in vinculos:
        if not cedula_lider:
            continue
        if cedula_lider not in lideres:
            resultado.errores.append(f"Fila {i}: el líder {cedula_lider} no existe o no es líder")
            continue
        actualizadas = Persona.objects.filter(pk=cedula).exclude(rol=RolPersona.LIDER).update(
            cedula_lider_id=cedula_lider, updated_at=timezone.now()
        )
        resultado.vinculados += actualizadas

    if resultado.errores:
        logger.warning("Importación con %d filas con error", len(resultado.errores))
    logger.info(
        "Importación finalizada: %d creados, %d actualizados, %d vinculados",
        resultado.creados, resultado.actualizados, resultado.vinculados,
    )
    return resultado


def importar_puestos(archivo, nombre_archivo: str) -> ResultadoImportacion:
    """
    Importa la tabla de referencia de puestos de votación
    (DEPARTAMENTO, MUNICIPIO, PUESTO, DIRECCIÓN). Municipio y departamento
    se guardan normalizados.
    """
    encabezados, filas = leer_filas(archivo, nombre_archivo)
    mapa = resolver_columnas(encabezados, ALIAS_COLUMNAS_PUESTOS, COLUMNAS_OBLIGATORIAS_PUESTOS)

    resultado = ResultadoImportacion()
    for i, fila in enumerate(filas, start=2):
        try:
            departamento = _texto(fila.get(mapa['departamento']))
            municipio = _texto(fila.get(mapa['municipio']))
            puesto = _texto(fila.get(mapa['puesto']))
            if not all([departamento, municipio, puesto]):
                raise ValueError("faltan departamento, municipio o puesto")
            direccion = _texto(fila.get(mapa['direccion'])) if 'direccion' in mapa else None

            with transaction.atomic():
                _, creado = PuestoVotacion.objects.update_or_create(
                    departamento=normalizar_ubicacion(departamento),
                    municipio=normalizar_ubicacion(municipio),
                    puesto=puesto.upper(),
                    defaults={'direccion': direccion},
                )
            if creado:
                resultado.creados += 1
            else:
                resultado.actualizados += 1
        except (ValidationError, ValueError, IntegrityError) as e:
            resultado.errores.append(f"Fila {i}: {e}")

    logger.info(
        "Puestos importados: %d creados, %d actualizados, %d errores",
        resultado.creados, resultado.actualizados, len(resultado.errores),
    )
    return resultado
