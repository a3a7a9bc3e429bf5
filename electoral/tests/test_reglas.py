from types import SimpleNamespace

from django.test import SimpleTestCase, override_settings

from electoral.constants import Estado, SIN_MUNICIPIO
from electoral.reglas import (
    agregar_por_municipio,
    calcular_vota_en_bello,
    derivar_estado,
    normalizar_ubicacion,
    puede_agregar_miembro,
)


class NormalizarUbicacionTests(SimpleTestCase):

    def test_quita_tildes_espacios_y_pasa_a_mayusculas(self):
        self.assertEqual(normalizar_ubicacion('  yarumál '), 'YARUMAL')
        self.assertEqual(normalizar_ubicacion('Itagüí'), 'ITAGUI')
        self.assertEqual(normalizar_ubicacion('Medellín'), 'MEDELLIN')

    def test_vacio_es_unknown(self):
        self.assertEqual(normalizar_ubicacion(None), 'UNKNOWN')
        self.assertEqual(normalizar_ubicacion(''), 'UNKNOWN')
        self.assertEqual(normalizar_ubicacion('   '), 'UNKNOWN')

    def test_es_idempotente(self):
        for nombre in ('Medellín', ' el  Peñol', 'UNKNOWN', 'San José de la Montaña'):
            una_vez = normalizar_ubicacion(nombre)
            self.assertEqual(normalizar_ubicacion(una_vez), una_vez)


class DerivarEstadoTests(SimpleTestCase):

    def test_no_se_deja_pendiente(self):
        self.assertEqual(derivar_estado('No Se', 'Bello'), Estado.PENDIENTE)
        self.assertEqual(derivar_estado('Bello', 'No Se'), Estado.PENDIENTE)
        self.assertEqual(derivar_estado('No Se', 'No Se'), Estado.PENDIENTE)

    def test_mismo_municipio_aprueba(self):
        self.assertEqual(derivar_estado('Bello', 'Bello'), Estado.APROBADO)

    def test_distinto_municipio_rechaza(self):
        self.assertEqual(derivar_estado('Bello', 'Medellín'), Estado.RECHAZADO)

    def test_comparacion_literal(self):
        self.assertEqual(derivar_estado('bello', 'Bello'), Estado.RECHAZADO)

    def test_sin_municipio_queda_pendiente(self):
        self.assertEqual(derivar_estado(None, 'Bello'), Estado.PENDIENTE)
        self.assertEqual(derivar_estado('Bello', ''), Estado.PENDIENTE)
        self.assertEqual(derivar_estado(None, None), Estado.PENDIENTE)


class VotaEnBelloTests(SimpleTestCase):

    def test_solo_el_municipio_distinguido(self):
        self.assertTrue(calcular_vota_en_bello('Bello'))
        self.assertFalse(calcular_vota_en_bello('Medellín'))
        self.assertFalse(calcular_vota_en_bello(None))

    @override_settings(MUNICIPIO_DISTINGUIDO='Envigado')
    def test_municipio_configurable(self):
        self.assertTrue(calcular_vota_en_bello('Envigado'))
        self.assertFalse(calcular_vota_en_bello('Bello'))


class CupoTests(SimpleTestCase):

    def test_cupo_por_defecto(self):
        self.assertTrue(puede_agregar_miembro(0))
        self.assertTrue(puede_agregar_miembro(59))
        self.assertFalse(puede_agregar_miembro(60))
        self.assertFalse(puede_agregar_miembro(61))


class AgregarPorMunicipioTests(SimpleTestCase):

    def test_lista_vacia(self):
        self.assertEqual(agregar_por_municipio([]), [])

    def test_conteos_y_porcentajes(self):
        personas = [
            {'municipio_puesto': 'Bello'},
            {'municipio_puesto': 'Medellín'},
            {'municipio_puesto': 'Bello'},
        ]
        resultado = agregar_por_municipio(personas)
        self.assertEqual(resultado, [
            {'name': 'Bello', 'count': 2, 'percentage': 66.67},
            {'name': 'Medellín', 'count': 1, 'percentage': 33.33},
        ])

    def test_conteos_suman_el_total(self):
        personas = [{'municipio_puesto': m} for m in ('A', 'B', 'C', 'A', None, '', 'C', 'A')]
        resultado = agregar_por_municipio(personas)
        self.assertEqual(sum(r['count'] for r in resultado), len(personas))
        self.assertAlmostEqual(sum(r['percentage'] for r in resultado), 100, delta=0.05)

    def test_vacios_van_a_no_definido(self):
        resultado = agregar_por_municipio([{'municipio_puesto': None}, {'municipio_puesto': ''}])
        self.assertEqual(resultado, [{'name': SIN_MUNICIPIO, 'count': 2, 'percentage': 100.0}])

    def test_empates_conservan_orden_de_aparicion(self):
        personas = [{'municipio_puesto': m} for m in ('Caldas', 'Bello', 'Envigado')]
        nombres = [r['name'] for r in agregar_por_municipio(personas)]
        self.assertEqual(nombres, ['Caldas', 'Bello', 'Envigado'])

    def test_acepta_objetos_y_otro_campo(self):
        personas = [SimpleNamespace(municipio_votacion='Bello'), SimpleNamespace(municipio_votacion='Bello')]
        resultado = agregar_por_municipio(personas, campo='municipio_votacion')
        self.assertEqual(resultado[0]['name'], 'Bello')
        self.assertEqual(resultado[0]['count'], 2)
