# electoral/services/territorio.py

import json
import logging
from pathlib import Path

import requests
from django.conf import settings

from electoral.constants import COLOR_SIN_DATOS, ESCALA_COLORES_MAPA, SIN_MUNICIPIO
from electoral.reglas import agregar_por_municipio, normalizar_ubicacion

logger = logging.getLogger(__name__)


def color_por_conteo(conteo):
    for umbral, color in ESCALA_COLORES_MAPA:
        if conteo > umbral:
            return color
    return COLOR_SIN_DATOS


def nombre_feature(feature):
    propiedades = (feature or {}).get('properties') or {}
    return propiedades.get('name') or propiedades.get('NAME') or ''


def conteos_normalizados(personas, campo='municipio_votacion'):
    """Conteo por municipio con la llave normalizada (para cruzar con el GeoJSON)."""
    conteos = {}
    for fila in agregar_por_municipio(personas, campo=campo):
        if fila['name'] == SIN_MUNICIPIO:
            continue
        llave = normalizar_ubicacion(fila['name'])
        conteos[llave] = conteos.get(llave, 0) + fila['count']
    return conteos


def cargar_geojson(ruta=None):
    """
    Lee el GeoJSON de municipios.

    :return: El FeatureCollection, o None si el archivo no existe o es inválido.
    """
    ruta = Path(ruta or getattr(settings, 'MAPA_GEOJSON_PATH', ''))
    if not ruta.is_file():
        logger.warning("No se encontró el mapa GeoJSON en %s", ruta)
        return None
    try:
        with ruta.open(encoding='utf-8') as fh:
            datos = json.load(fh)
    except (OSError, ValueError):
        logger.exception("GeoJSON inválido en %s", ruta)
        return None
    if not isinstance(datos, dict) or not isinstance(datos.get('features'), list):
        logger.error("El archivo %s no es un FeatureCollection", ruta)
        return None
    return datos


def colorear_mapa(geojson, conteos):
    """Agrega 'conteo' y 'color' a las propiedades de cada municipio."""
    features = []
    for feature in geojson.get('features', []):
        propiedades = dict(feature.get('properties') or {})
        conteo = conteos.get(normalizar_ubicacion(nombre_feature(feature)), 0)
        propiedades['conteo'] = conteo
        propiedades['color'] = color_por_conteo(conteo)
        features.append({**feature, 'properties': propiedades})
    return {'type': 'FeatureCollection', 'features': features}


def resumen_territorio(personas):
    municipios = agregar_por_municipio(personas, campo='municipio_votacion')
    return {
        'total_personas': sum(m['count'] for m in municipios),
        'municipios_cubiertos': len([m for m in municipios if m['name'] != SIN_MUNICIPIO]),
        'municipios': [{**m, 'color': color_por_conteo(m['count'])} for m in municipios],
    }


# ===================================================================
# DESCARGA DEL MAPA BASE
# ===================================================================

class DescargaMapaError(Exception):
    pass


class MapaMunicipiosClient:
    """
    Descarga el GeoJSON de municipios de Colombia y deja solo Antioquia.
    """

    TIMEOUT_SECONDS = 60
    CLAVES_DEPARTAMENTO = ('dpt', 'DPTO_CNMBR', 'NOMBRE_DPT', 'DEPARTAMEN')

    def __init__(self, url=None):
        self.url = url or getattr(settings, 'URL_MAPA_MUNICIPIOS', '')

    def descargar(self):
        try:
            response = requests.get(self.url, timeout=self.TIMEOUT_SECONDS)
        except requests.exceptions.Timeout:
            raise DescargaMapaError("Timeout: el servidor del mapa tardó demasiado en responder.")
        except requests.exceptions.ConnectionError:
            raise DescargaMapaError("Error de conexión descargando el mapa.")

        if response.status_code != 200:
            raise DescargaMapaError(f"Descarga fallida: HTTP {response.status_code}")
        try:
            datos = response.json()
        except ValueError:
            raise DescargaMapaError("La respuesta no es JSON válido.")

        if datos.get('type') != 'FeatureCollection':
            raise DescargaMapaError(f"Formato no soportado: {datos.get('type')}")
        return self.filtrar_antioquia(datos.get('features', []))

    def filtrar_antioquia(self, features):
        def departamento(feature):
            propiedades = feature.get('properties') or {}
            for clave in self.CLAVES_DEPARTAMENTO:
                if propiedades.get(clave):
                    return str(propiedades[clave])
            return ''

        antioquia = [f for f in features if 'ANTIOQUIA' in normalizar_ubicacion(departamento(f))]
        return {'type': 'FeatureCollection', 'features': antioquia}
