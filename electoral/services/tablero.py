# electoral/services/tablero.py
from django.db.models import Count, Q, Sum

from electoral.constants import (
    Estado, RolPersona, LUGAR_VOTACION_ANTIOQUIA, SIN_MUNICIPIO,
)
from electoral.models import Persona
from electoral.reglas import agregar_por_municipio, max_miembros_por_lider


class TableroElectoralService:
    """
    FUENTE ÚNICA de las métricas del dashboard.
    El administrador ve todo; un líder ve únicamente su equipo (y a sí mismo).
    """

    TOP_MUNICIPIOS = 8

    @staticmethod
    def personas_visibles(sesion):
        qs = Persona.objects.all()
        if sesion is not None and sesion.es_lider:
            qs = qs.filter(Q(cedula_lider_id=sesion.cedula) | Q(pk=sesion.cedula))
        return qs

    @staticmethod
    def get_resumen(sesion, municipio=None):
        """Retorna el diccionario completo que consumen la plantilla y el endpoint JSON."""
        qs = TableroElectoralService.personas_visibles(sesion)
        registros = list(qs.values('rol', 'estado', 'municipio_votacion', 'municipio_puesto', 'puesto_votacion'))

        resumen = {
            'por_rol': TableroElectoralService._conteo_por_rol(qs),
            'totales': TableroElectoralService._totales(qs),
            'distribucion_residencia': agregar_por_municipio(registros, campo='municipio_votacion'),
            'distribucion_votacion': TableroElectoralService._distribucion_votacion(registros),
        }
        if municipio:
            resumen['detalle_municipio'] = TableroElectoralService.detalle_municipio(registros, municipio)
        return resumen

    @staticmethod
    def _conteo_por_rol(qs):
        filas = qs.values('rol').annotate(
            total=Count('cedula'),
            aprobados=Count('cedula', filter=Q(estado=Estado.APROBADO)),
            pendientes=Count('cedula', filter=Q(estado=Estado.PENDIENTE)),
            rechazados=Count('cedula', filter=Q(estado=Estado.RECHAZADO)),
        )
        base = {rol: {'total': 0, 'aprobados': 0, 'pendientes': 0, 'rechazados': 0} for rol in RolPersona.values}
        for fila in filas:
            base[fila['rol']] = {
                'total': fila['total'],
                'aprobados': fila['aprobados'],
                'pendientes': fila['pendientes'],
                'rechazados': fila['rechazados'],
            }
        return base

    @staticmethod
    def _totales(qs):
        datos = qs.aggregate(
            total_personas=Count('cedula'),
            votos_prometidos=Sum('votos_prometidos'),
            vota_en_bello=Count('cedula', filter=Q(vota_en_bello=True)),
            vota_en_antioquia=Count('cedula', filter=Q(lugar_votacion=LUGAR_VOTACION_ANTIOQUIA)),
        )
        datos['votos_prometidos'] = datos['votos_prometidos'] or 0
        return datos

    @staticmethod
    def _distribucion_votacion(registros):
        """
        Distribución por municipio de votación. Los PENDIENTES aún no tienen
        puesto confirmado y cuentan como 'No definido'. Solo el top 8.
        """
        ajustados = [
            {'municipio_puesto': None if r['estado'] == Estado.PENDIENTE else r['municipio_puesto']}
            for r in registros
        ]
        return agregar_por_municipio(ajustados)[:TableroElectoralService.TOP_MUNICIPIOS]

    @staticmethod
    def detalle_municipio(registros, municipio):
        """Drill-down: puestos de votación dentro de un municipio de votación."""
        if municipio == SIN_MUNICIPIO:
            del_municipio = [r for r in registros if not r['municipio_puesto']]
        else:
            del_municipio = [r for r in registros if r['municipio_puesto'] == municipio]
        return {
            'municipio': municipio,
            'total': len(del_municipio),
            'puestos': agregar_por_municipio(del_municipio, campo='puesto_votacion'),
        }

    @staticmethod
    def resumen_lideres(sesion=None, texto=None):
        """Líderes con el tamaño de su equipo y los cupos disponibles."""
        maximo = max_miembros_por_lider()
        lideres = Persona.objects.lideres().buscar(texto).annotate(
            num_asociados=Count('miembros', filter=Q(miembros__rol=RolPersona.ASOCIADO)),
            num_impulsores=Count('miembros', filter=Q(miembros__rol=RolPersona.IMPULSOR)),
        )
        if sesion is not None and sesion.es_lider:
            lideres = lideres.filter(pk=sesion.cedula)
        resultado = list(lideres)
        for lider in resultado:
            lider.cupos_asociados = max(maximo - lider.num_asociados, 0)
            lider.cupos_impulsores = max(maximo - lider.num_impulsores, 0)
        return resultado
