from electoral.constants import Estado, RolPersona, RolSesion
from electoral.models import Persona
from electoral.sesion import SesionElectoral


def crear_persona(cedula, rol=RolPersona.ASOCIADO, lider=None, **extra):
    datos = {
        'nombre_completo': f'Persona {cedula}',
        'municipio_votacion': 'Bello',
        'municipio_puesto': 'Bello',
        'estado': Estado.APROBADO,
    }
    datos.update(extra)
    return Persona.objects.create(cedula=cedula, rol=rol, cedula_lider=lider, **datos)


def sesion_lider(lider):
    return SesionElectoral(token='token-lider', rol=RolSesion.LIDER, cedula=lider.cedula, nombre=lider.nombre_completo)


def sesion_admin():
    return SesionElectoral(token='token-admin', rol=RolSesion.ADMIN, nombre='Administrador')
