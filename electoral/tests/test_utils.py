from datetime import datetime

from django.core.exceptions import ValidationError
from django.test import SimpleTestCase
from django.utils import timezone

from electoral.constants import Estado, RolPersona
from electoral.templatetags.electoral_tags import estado_badge, rol_legible, whatsapp_link
from electoral.utils import (
    enlace_invitacion,
    enlace_whatsapp,
    formatear_telefono_whatsapp,
    limpiar_telefono,
    personalizar_mensaje,
    telefono_whatsapp_valido,
    validar_telefono,
)


class TelefonoTests(SimpleTestCase):

    def test_limpiar_deja_solo_digitos(self):
        self.assertEqual(limpiar_telefono('+57 300-123 4567'), '573001234567')
        self.assertEqual(limpiar_telefono(None), '')

    def test_validar_exige_diez_digitos(self):
        self.assertEqual(validar_telefono('300 123 4567'), '3001234567')
        with self.assertRaises(ValidationError):
            validar_telefono('300123456')
        with self.assertRaises(ValidationError):
            validar_telefono('573001234567')

    def test_formato_whatsapp_agrega_indicativo(self):
        self.assertEqual(formatear_telefono_whatsapp('300 123-4567'), '573001234567')
        self.assertEqual(formatear_telefono_whatsapp('+57 300 123 4567'), '573001234567')

    def test_telefono_whatsapp_valido(self):
        self.assertTrue(telefono_whatsapp_valido('573001234567'))
        self.assertFalse(telefono_whatsapp_valido('3001234567'))
        self.assertFalse(telefono_whatsapp_valido('583001234567'))
        self.assertFalse(telefono_whatsapp_valido(''))


class EnlacesTests(SimpleTestCase):

    def test_enlace_whatsapp_codifica_el_mensaje(self):
        self.assertEqual(
            enlace_whatsapp('3001234567', 'Hola Ana & equipo'),
            'https://wa.me/573001234567?text=Hola%20Ana%20%26%20equipo',
        )

    def test_personalizar_reemplaza_marcadores(self):
        mensaje = personalizar_mensaje('Hola {nombre}, tu cédula es {cedula}', 'Ana', '123')
        self.assertEqual(mensaje, 'Hola Ana, tu cédula es 123')

    def test_personalizar_con_fecha(self):
        momento = timezone.make_aware(datetime(2024, 5, 1, 14, 30))
        mensaje = personalizar_mensaje('Hola {nombre}', 'Ana', '123', incluir_fecha=True, momento=momento)
        self.assertEqual(mensaje, 'Hola Ana\n\nEnviado el 01/05/2024 a las 14:30')

    def test_enlace_invitacion(self):
        base = 'https://crm.example.co/registro'
        self.assertEqual(enlace_invitacion(base, '123'), f'{base}?lider=123')
        self.assertEqual(enlace_invitacion(base, '123', RolPersona.IMPULSOR), f'{base}?lider=123&rol=impulsor')


class FiltrosPlantillaTests(SimpleTestCase):

    def test_estado_badge(self):
        self.assertIn('bg-success', estado_badge(Estado.APROBADO))
        self.assertIn('Pendiente', estado_badge('PENDIENTE'))
        self.assertEqual(estado_badge('OTRO'), '')

    def test_rol_legible(self):
        self.assertEqual(rol_legible('impulsor'), 'Impulsor')
        self.assertEqual(rol_legible('desconocido'), 'desconocido')

    def test_whatsapp_link(self):
        self.assertEqual(whatsapp_link('3001234567'), 'https://wa.me/573001234567?text=')
        self.assertEqual(whatsapp_link(None), '')
