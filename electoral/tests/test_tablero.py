from django.test import TestCase, override_settings

from electoral.constants import Estado, RolPersona, SIN_MUNICIPIO
from electoral.services.tablero import TableroElectoralService

from .helpers import crear_persona, sesion_admin, sesion_lider


class TableroTests(TestCase):

    def setUp(self):
        self.lider = crear_persona('1', rol=RolPersona.LIDER, lugar_votacion='Antioquia')
        self.otro_lider = crear_persona('2', rol=RolPersona.LIDER)
        crear_persona('10', lider=self.lider, municipio_puesto='Medellín', estado=Estado.RECHAZADO)
        crear_persona('11', rol=RolPersona.IMPULSOR, lider=self.lider, votos_prometidos=7)
        crear_persona('12', lider=self.otro_lider, municipio_puesto='Envigado', estado=Estado.PENDIENTE)

    def test_admin_ve_todo(self):
        resumen = TableroElectoralService.get_resumen(sesion_admin())
        self.assertEqual(resumen['totales']['total_personas'], 5)
        self.assertEqual(resumen['por_rol'][RolPersona.LIDER]['total'], 2)
        self.assertEqual(resumen['por_rol'][RolPersona.ASOCIADO]['rechazados'], 1)
        self.assertEqual(resumen['totales']['votos_prometidos'], 7)

    def test_lider_ve_su_equipo_y_a_si_mismo(self):
        resumen = TableroElectoralService.get_resumen(sesion_lider(self.lider))
        self.assertEqual(resumen['totales']['total_personas'], 3)
        self.assertEqual(resumen['totales']['vota_en_antioquia'], 1)
        self.assertEqual(resumen['totales']['vota_en_bello'], 2)

    def test_pendientes_cuentan_como_no_definido(self):
        resumen = TableroElectoralService.get_resumen(sesion_admin())
        nombres = {m['name'] for m in resumen['distribucion_votacion']}
        self.assertIn(SIN_MUNICIPIO, nombres)
        self.assertNotIn('Envigado', nombres)
        self.assertEqual(sum(m['count'] for m in resumen['distribucion_votacion']), 5)

    def test_top_ocho_municipios(self):
        for i in range(10):
            crear_persona(f'9{i}', municipio_puesto=f'Municipio {i}')
        resumen = TableroElectoralService.get_resumen(sesion_admin())
        self.assertEqual(len(resumen['distribucion_votacion']), 8)

    def test_detalle_por_municipio(self):
        crear_persona('20', municipio_puesto='Bello', puesto_votacion='Colegio A')
        crear_persona('21', municipio_puesto='Bello', puesto_votacion='Colegio A')
        resumen = TableroElectoralService.get_resumen(sesion_admin(), municipio='Bello')
        detalle = resumen['detalle_municipio']
        self.assertEqual(detalle['municipio'], 'Bello')
        self.assertEqual(detalle['total'], 5)
        self.assertIn({'name': 'Colegio A', 'count': 2, 'percentage': 40.0}, detalle['puestos'])

    @override_settings(MAX_MIEMBROS_POR_LIDER=5)
    def test_resumen_lideres(self):
        lideres = {l.cedula: l for l in TableroElectoralService.resumen_lideres(sesion_admin())}
        self.assertEqual(lideres['1'].num_asociados, 1)
        self.assertEqual(lideres['1'].num_impulsores, 1)
        self.assertEqual(lideres['1'].cupos_asociados, 4)
        self.assertEqual(lideres['2'].num_impulsores, 0)

        propios = TableroElectoralService.resumen_lideres(sesion_lider(self.lider))
        self.assertEqual([l.cedula for l in propios], ['1'])
