from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase

from electoral.constants import RolPersona
from electoral.services.importacion import importar_personas
from electoral.services.mensajeria import destinatarios, preparar_envios

from .helpers import crear_persona


class PrepararEnviosTests(TestCase):

    def setUp(self):
        self.lider = crear_persona('1', rol=RolPersona.LIDER, telefono='3001234567')
        crear_persona('2', lider=self.lider, telefono='573009876543')
        crear_persona('3', lider=self.lider, telefono='12345')
        crear_persona('4', lider=self.lider, telefono=None)

    def test_acepta_diez_digitos_y_con_indicativo(self):
        envios, omitidos = preparar_envios(destinatarios('todos'), 'Hola {nombre}')

        self.assertEqual({e['cedula'] for e in envios}, {'1', '2'})
        self.assertEqual([p.cedula for p in omitidos], ['3'])
        por_cedula = {e['cedula']: e for e in envios}
        self.assertEqual(por_cedula['1']['telefono'], '573001234567')
        self.assertTrue(por_cedula['2']['enlace'].startswith('https://wa.me/573009876543?text=Hola%20Persona%202'))

    def test_por_grupo(self):
        envios, _ = preparar_envios(destinatarios('lideres'), 'Hola')
        self.assertEqual([e['cedula'] for e in envios], ['1'])

    def test_contactos_importados(self):
        contenido = 'Cédula,Nombre Completo,Teléfono\n400,Marta,+57 300 123 4567\n'
        archivo = SimpleUploadedFile('personas.csv', contenido.encode('utf-8'))
        importar_personas(archivo, archivo.name)

        envios, omitidos = preparar_envios(destinatarios('todos').filter(pk='400'), 'Hola {nombre}')

        self.assertEqual(omitidos, [])
        self.assertEqual(envios[0]['enlace'], 'https://wa.me/573001234567?text=Hola%20Marta')
