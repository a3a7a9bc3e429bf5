from datetime import timedelta

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone

from electoral.constants import Estado, RolPersona
from electoral.models import AdminCode, ChatMessage, Persona, Sesion
from electoral.sesion import CLAVE_SESION

from .helpers import crear_persona


class BaseVistasTest(TestCase):

    def setUp(self):
        self.lider = crear_persona('1', rol=RolPersona.LIDER, nombre_completo='Luis Líder')
        AdminCode.objects.create(codigo='CLAVE-1')

    def login_lider(self, cedula='1'):
        return self.client.post(reverse('login'), {'tipo': 'lider', 'lider-cedula': cedula})

    def login_admin(self, codigo='CLAVE-1'):
        return self.client.post(reverse('login'), {'tipo': 'admin', 'admin-codigo': codigo})


class AccesoTests(BaseVistasTest):

    def test_login_de_lider(self):
        response = self.login_lider()
        self.assertRedirects(response, reverse('dashboard'))
        self.assertEqual(self.client.session[CLAVE_SESION]['cedula'], '1')
        self.assertEqual(self.client.get(reverse('dashboard')).status_code, 200)

    def test_solo_lideres_entran_con_cedula(self):
        crear_persona('2')
        response = self.login_lider('2')
        self.assertEqual(response.status_code, 200)
        self.assertNotIn(CLAVE_SESION, self.client.session)

        response = self.login_lider('999')
        self.assertNotIn(CLAVE_SESION, self.client.session)

    def test_login_de_admin(self):
        self.assertRedirects(self.login_admin(), reverse('dashboard'))
        self.assertEqual(self.client.get(reverse('lista_lideres')).status_code, 200)

    def test_codigo_inactivo(self):
        AdminCode.objects.create(codigo='VIEJO', activo=False)
        self.login_admin('VIEJO')
        self.assertNotIn(CLAVE_SESION, self.client.session)

    def test_sin_sesion_redirige_al_login(self):
        self.assertRedirects(self.client.get(reverse('dashboard')), reverse('login'))

    def test_lider_no_entra_a_vistas_de_admin(self):
        self.login_lider()
        self.assertRedirects(self.client.get(reverse('lista_lideres')), reverse('dashboard'))
        self.assertRedirects(self.client.get(reverse('mensajeria')), reverse('dashboard'))

    def test_sesion_expirada(self):
        self.login_lider()
        Sesion.objects.update(expires_at=timezone.now() - timedelta(hours=1))
        self.assertRedirects(self.client.get(reverse('dashboard')), reverse('login'))
        self.assertNotIn(CLAVE_SESION, self.client.session)

    def test_logout_cierra_la_sesion(self):
        self.login_lider()
        self.client.get(reverse('logout'))
        self.assertTrue(Sesion.objects.get().cerrada)
        self.assertRedirects(self.client.get(reverse('dashboard')), reverse('login'))


class RegistroPublicoVistaTests(BaseVistasTest):

    def datos(self, cedula, **extra):
        datos = {
            'cedula': cedula,
            'nombre_completo': 'Nuevo Registro',
            'telefono': '3001234567',
            'email': '',
            'lugar_votacion': 'Antioquia',
            'municipio_votacion': 'Bello',
            'municipio_puesto': 'Bello',
            'puesto_votacion': '',
            'mesa_votacion': '',
            'notas': '',
        }
        datos.update(extra)
        return datos

    def test_autoregistro_de_lider(self):
        response = self.client.post(reverse('registro_publico'), self.datos('300'))
        self.assertEqual(response.status_code, 302)
        persona = Persona.objects.get(pk='300')
        self.assertEqual(persona.rol, RolPersona.LIDER)
        self.assertEqual(persona.estado, Estado.APROBADO)

    def test_invitacion_de_asociado(self):
        url = reverse('registro_publico') + '?lider=1'
        self.assertEqual(self.client.get(url).status_code, 200)
        self.client.post(url, self.datos('301'))
        persona = Persona.objects.get(pk='301')
        self.assertEqual(persona.rol, RolPersona.ASOCIADO)
        self.assertEqual(persona.cedula_lider_id, '1')

    def test_invitacion_de_impulsor(self):
        url = reverse('registro_publico') + '?lider=1&rol=impulsor'
        self.client.post(url, self.datos('302', votos_prometidos='3', municipio_puesto='Medellín'))
        persona = Persona.objects.get(pk='302')
        self.assertEqual(persona.rol, RolPersona.IMPULSOR)
        self.assertEqual(persona.votos_prometidos, 3)
        self.assertEqual(persona.estado, Estado.RECHAZADO)

    def test_lider_inexistente_en_la_invitacion(self):
        response = self.client.get(reverse('registro_publico') + '?lider=999')
        self.assertRedirects(response, reverse('login'))

    def test_telefono_invalido_no_registra(self):
        response = self.client.post(reverse('registro_publico'), self.datos('303', telefono='123'))
        self.assertEqual(response.status_code, 200)
        self.assertFalse(Persona.objects.filter(pk='303').exists())


class PanelTests(BaseVistasTest):

    def test_lider_solo_ve_su_equipo(self):
        otro = crear_persona('2', rol=RolPersona.LIDER)
        crear_persona('10', lider=self.lider)
        crear_persona('11', lider=otro)
        self.login_lider()
        response = self.client.get(reverse('lista_asociados'))
        self.assertEqual([p.cedula for p in response.context['personas']], ['10'])

    def test_cambiar_estado(self):
        persona = crear_persona('10', estado=Estado.RECHAZADO)
        self.login_admin()
        response = self.client.post(
            reverse('cambiar_estado', args=['10']),
            {'estado': Estado.APROBADO, 'next': 'https://otro-sitio.com/'},
        )
        self.assertRedirects(response, reverse('lista_asociados'))
        persona.refresh_from_db()
        self.assertEqual(persona.estado, Estado.APROBADO)

    def test_api_dashboard(self):
        self.login_admin()
        datos = self.client.get(reverse('api_dashboard')).json()
        self.assertEqual(datos['totales']['total_personas'], 1)
        self.assertIn('distribucion_votacion', datos)

    @override_settings(MAPA_GEOJSON_PATH='/no/existe/mapa.geojson')
    def test_api_territorio_sin_mapa(self):
        self.login_lider()
        self.assertEqual(self.client.get(reverse('api_territorio')).status_code, 503)

    def test_exportar_csv(self):
        self.login_admin()
        response = self.client.get(reverse('exportar_personas'))
        contenido = response.content.decode('utf-8')
        self.assertTrue(contenido.startswith('\ufeffNombre Completo,Cédula'))
        self.assertIn('Luis Líder', contenido)

    def test_exportar_xlsx(self):
        self.login_admin()
        response = self.client.get(reverse('exportar_personas') + '?formato=xlsx')
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.content.startswith(b'PK'))

    def test_invitaciones_del_lider(self):
        self.login_lider()
        response = self.client.get(reverse('invitaciones'))
        self.assertContains(response, 'http://testserver/registro?lider=1')

    def test_chat_del_lider(self):
        self.login_lider()
        response = self.client.post(reverse('chat'), {'contenido': 'Hola admin'})
        self.assertRedirects(response, reverse('chat'))
        self.assertEqual(ChatMessage.objects.filter(lider=self.lider).count(), 2)

    def test_importar_desde_el_panel(self):
        self.login_admin()
        archivo = SimpleUploadedFile('personas.csv', 'Cédula,Nombre Completo\n700,Desde Panel\n'.encode('utf-8'))
        response = self.client.post(reverse('importar_personas'), {'archivo': archivo})
        self.assertRedirects(response, reverse('importar_personas'))
        self.assertTrue(Persona.objects.filter(pk='700').exists())

    def test_importar_rechaza_otras_extensiones(self):
        self.login_admin()
        archivo = SimpleUploadedFile('personas.txt', b'hola')
        response = self.client.post(reverse('importar_personas'), {'archivo': archivo})
        self.assertEqual(response.status_code, 200)


class AdminCodeTests(TestCase):

    def test_descriptor_facial(self):
        self.assertFalse(AdminCode(codigo='A').tiene_descriptor_facial)
        self.assertFalse(AdminCode(codigo='B', descripcion='texto libre').tiene_descriptor_facial)
        self.assertTrue(AdminCode(codigo='C', descripcion='[0.12, -0.4]').tiene_descriptor_facial)
