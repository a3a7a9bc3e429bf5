from io import BytesIO

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, TestCase
from openpyxl import Workbook

from electoral.constants import ALIAS_COLUMNAS_PERSONAS, COLUMNAS_OBLIGATORIAS_PERSONAS, Estado, RolPersona
from electoral.models import Persona, PuestoVotacion
from electoral.services.importacion import (
    ArchivoNoMapeableError,
    importar_personas,
    importar_puestos,
    resolver_columnas,
)

from .helpers import crear_persona


def archivo_csv(nombre, filas):
    contenido = '\n'.join(filas) + '\n'
    return SimpleUploadedFile(nombre, contenido.encode('utf-8-sig'), content_type='text/csv')


class ResolverColumnasTests(SimpleTestCase):

    def test_encabezados_con_o_sin_tildes(self):
        mapa = resolver_columnas(
            ['CEDULA', 'nombre completo', 'Teléfono'],
            ALIAS_COLUMNAS_PERSONAS, COLUMNAS_OBLIGATORIAS_PERSONAS,
        )
        self.assertEqual(mapa['cedula'], 'CEDULA')
        self.assertEqual(mapa['nombre_completo'], 'nombre completo')
        self.assertEqual(mapa['telefono'], 'Teléfono')

    def test_faltan_obligatorias(self):
        with self.assertRaises(ArchivoNoMapeableError):
            resolver_columnas(['Nombre', 'Teléfono'], ALIAS_COLUMNAS_PERSONAS, COLUMNAS_OBLIGATORIAS_PERSONAS)


class ImportarPersonasTests(TestCase):

    def test_archivo_sin_columnas_minimas_no_escribe(self):
        archivo = archivo_csv('personas.csv', ['Foo,Bar', '1,2'])
        with self.assertRaises(ArchivoNoMapeableError):
            importar_personas(archivo, archivo.name)
        self.assertFalse(Persona.objects.exists())

    def test_dos_pasadas_el_orden_no_importa(self):
        archivo = archivo_csv('personas.csv', [
            'Cédula,Nombre Completo,Rol,Cédula Líder,Municipio donde vive,Municipio de Votación',
            '200,Ana Asociada,Asociado,100,Bello,Bello',
            '100,Luis Líder,Líder,100,Bello,Medellín',
        ])

        resultado = importar_personas(archivo, archivo.name)

        self.assertEqual(resultado.creados, 2)
        self.assertEqual(resultado.vinculados, 1)
        self.assertEqual(resultado.errores, [])
        lider = Persona.objects.get(pk='100')
        self.assertEqual(lider.rol, RolPersona.LIDER)
        self.assertIsNone(lider.cedula_lider_id)
        self.assertEqual(lider.estado, Estado.RECHAZADO)
        asociada = Persona.objects.get(pk='200')
        self.assertEqual(asociada.cedula_lider_id, '100')
        self.assertEqual(asociada.estado, Estado.APROBADO)
        self.assertEqual(asociada.registrado_por, 'admin')

    def test_errores_por_fila(self):
        archivo = archivo_csv('personas.csv', [
            'Cedula,Nombre Completo,Rol,Cedula Lider',
            '300,Sin Problema,asociado,',
            '301,Rol Raro,jefe,',
            '302,Huerfano,asociado,999',
        ])

        resultado = importar_personas(archivo, archivo.name)

        self.assertEqual(resultado.creados, 2)
        self.assertEqual(len(resultado.errores), 2)
        self.assertTrue(resultado.errores[0].startswith('Fila 3:'))
        self.assertTrue(resultado.errores[1].startswith('Fila 4:'))
        self.assertIsNone(Persona.objects.get(pk='302').cedula_lider_id)

    def test_vota_en_bello_sin_municipio(self):
        archivo = archivo_csv('personas.csv', [
            'Cédula,Nombre Completo,Vota en Bello,Teléfono',
            '400,Marta,SÍ,+57 300 123 4567',
        ])

        importar_personas(archivo, archivo.name)

        persona = Persona.objects.get(pk='400')
        self.assertEqual(persona.municipio_puesto, 'Bello')
        self.assertTrue(persona.vota_en_bello)
        self.assertEqual(persona.telefono, '573001234567')

    def test_actualiza_existentes(self):
        crear_persona('500', nombre_completo='Nombre Viejo')
        archivo = archivo_csv('personas.csv', ['Cédula,Nombre Completo,Estado', '500,Nombre Nuevo,pendiente'])

        resultado = importar_personas(archivo, archivo.name)

        self.assertEqual(resultado.actualizados, 1)
        persona = Persona.objects.get(pk='500')
        self.assertEqual(persona.nombre_completo, 'Nombre Nuevo')
        self.assertEqual(persona.estado, Estado.PENDIENTE)

    def test_reimportacion_parcial_conserva_lo_demas(self):
        lider = crear_persona('30', rol=RolPersona.LIDER, telefono='3001234567', municipio_puesto='Medellín',
                              estado=Estado.RECHAZADO)
        crear_persona('31', lider=lider)
        archivo = archivo_csv('personas.csv', ['Cédula,Nombre Completo', '30,Nombre Corregido'])

        resultado = importar_personas(archivo, archivo.name)

        self.assertEqual(resultado.actualizados, 1)
        lider.refresh_from_db()
        self.assertEqual(lider.nombre_completo, 'Nombre Corregido')
        self.assertEqual(lider.rol, RolPersona.LIDER)
        self.assertEqual(lider.telefono, '3001234567')
        self.assertEqual(lider.municipio_puesto, 'Medellín')
        self.assertEqual(lider.estado, Estado.RECHAZADO)
        self.assertEqual(Persona.objects.get(pk='31').cedula_lider_id, '30')

    def test_rol_vacio_no_degrada_al_lider(self):
        lider = crear_persona('32', rol=RolPersona.LIDER)
        crear_persona('33', lider=lider)
        archivo = archivo_csv('personas.csv', ['Cédula,Nombre Completo,Rol', '32,Lider Sin Rol,'])

        importar_personas(archivo, archivo.name)

        self.assertEqual(Persona.objects.get(pk='32').rol, RolPersona.LIDER)
        self.assertEqual(Persona.objects.get(pk='33').cedula_lider_id, '32')

    def test_cambio_de_municipio_recalcula_estado(self):
        crear_persona('34', municipio_votacion='Bello', municipio_puesto='Bello', estado=Estado.APROBADO)
        archivo = archivo_csv('personas.csv', ['Cédula,Nombre Completo,Municipio de Votación', '34,Ana,Medellín'])

        importar_personas(archivo, archivo.name)

        persona = Persona.objects.get(pk='34')
        self.assertEqual(persona.municipio_votacion, 'Bello')
        self.assertEqual(persona.estado, Estado.RECHAZADO)
        self.assertFalse(persona.vota_en_bello)

    def test_degradar_por_importacion_libera_el_equipo(self):
        lider = crear_persona('35', rol=RolPersona.LIDER)
        crear_persona('36', lider=lider)
        archivo = archivo_csv('personas.csv', ['Cédula,Nombre Completo,Rol', '35,Ex Lider,asociado'])

        importar_personas(archivo, archivo.name)

        self.assertEqual(Persona.objects.get(pk='35').rol, RolPersona.ASOCIADO)
        self.assertIsNone(Persona.objects.get(pk='36').cedula_lider_id)

    def test_xlsx(self):
        libro = Workbook()
        hoja = libro.active
        hoja.append(['Cédula', 'Nombre Completo', 'Rol', 'Votos Prometidos'])
        hoja.append([600, 'Impulsor Excel', 'Impulsor', 12])
        salida = BytesIO()
        libro.save(salida)
        archivo = SimpleUploadedFile('personas.xlsx', salida.getvalue())

        resultado = importar_personas(archivo, archivo.name)

        self.assertEqual(resultado.creados, 1)
        persona = Persona.objects.get(pk='600')
        self.assertEqual(persona.rol, RolPersona.IMPULSOR)
        self.assertEqual(persona.votos_prometidos, 12)


class ImportarPuestosTests(TestCase):

    def test_upsert_normalizado(self):
        filas = ['DEPARTAMENTO,MUNICIPIO,PUESTO,DIRECCIÓN', 'Antioquia,Medellín,Colegio San José,Calle 1']
        importar_puestos(archivo_csv('puestos.csv', filas), 'puestos.csv')

        filas[1] = 'ANTIOQUIA,medellin,colegio san josé,Calle 2'
        resultado = importar_puestos(archivo_csv('puestos.csv', filas), 'puestos.csv')

        self.assertEqual(resultado.actualizados, 1)
        puesto = PuestoVotacion.objects.get()
        self.assertEqual(puesto.municipio, 'MEDELLIN')
        self.assertEqual(puesto.departamento, 'ANTIOQUIA')
        self.assertEqual(puesto.direccion, 'Calle 2')
