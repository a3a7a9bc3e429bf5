# ===================================================================
# electoral/sesion.py
# ===================================================================

"""
Contexto de sesión explícito.

El usuario activo (líder o administrador) se representa con un objeto
SesionElectoral que el middleware adjunta a request.sesion y que las vistas
pasan a los servicios. Su ciclo de vida es explícito: iniciar_sesion_*()
lo crea y cerrar_sesion() lo destruye.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Optional

from django.core.exceptions import ValidationError
from django.utils import timezone

from .constants import RolPersona, RolSesion
from .models import AdminCode, Persona, Sesion

logger = logging.getLogger(__name__)

CLAVE_SESION = 'sesion_electoral'


@dataclass(frozen=True)
class SesionElectoral:
    token: str
    rol: str
    cedula: Optional[str] = None
    nombre: str = ''

    @property
    def es_admin(self) -> bool:
        return self.rol == RolSesion.ADMIN

    @property
    def es_lider(self) -> bool:
        return self.rol == RolSesion.LIDER

    @property
    def registrado_por(self) -> str:
        """Valor que se guarda en personas.registrado_por."""
        return 'admin' if self.es_admin else self.cedula

    def lider_para_registro(self) -> Optional[str]:
        """Cédula del líder al que se asignan los registros hechos en esta sesión."""
        return self.cedula if self.es_lider else None


def _guardar(request, sesion: SesionElectoral) -> SesionElectoral:
    # Nueva llave de sesión al cambiar de identidad
    request.session.cycle_key()
    request.session[CLAVE_SESION] = asdict(sesion)
    request.sesion = sesion
    return sesion


def iniciar_sesion_lider(request, cedula: str) -> SesionElectoral:
    """
    Inicia sesión como líder usando solo la cédula.

    :raises ValidationError: Si la cédula no existe o no es de un líder.
    """
    cedula = (cedula or '').strip()
    persona = Persona.objects.filter(pk=cedula).first()
    if persona is None:
        raise ValidationError("No existe ninguna persona registrada con esa cédula.")
    if persona.rol != RolPersona.LIDER:
        raise ValidationError("Solo los líderes pueden ingresar con su cédula.")

    registro = Sesion.objects.create(cedula=persona.cedula, es_admin=False)
    logger.info("Inicio de sesión de líder %s", persona.cedula)
    return _guardar(request, SesionElectoral(
        token=registro.token,
        rol=RolSesion.LIDER,
        cedula=persona.cedula,
        nombre=persona.nombre_completo,
    ))


def iniciar_sesion_admin(request, codigo: str) -> SesionElectoral:
    """
    Inicia sesión como administrador con un código de acceso activo.

    :raises ValidationError: Si el código no existe o está inactivo.
    """
    codigo = (codigo or '').strip()
    if not AdminCode.objects.filter(codigo=codigo, activo=True).exists():
        logger.warning("Intento de acceso con código de administrador inválido")
        raise ValidationError("Código de administrador inválido o inactivo.")

    registro = Sesion.objects.create(cedula=None, es_admin=True)
    logger.info("Inicio de sesión de administrador")
    return _guardar(request, SesionElectoral(
        token=registro.token,
        rol=RolSesion.ADMIN,
        nombre='Administrador',
    ))


def cargar_sesion(session_store) -> Optional[SesionElectoral]:
    """
    Reconstruye la sesión desde un almacén de sesión de Django (request.session
    o scope['session'] en websockets). Devuelve None si no hay sesión vigente.
    """
    datos = session_store.get(CLAVE_SESION)
    if not datos:
        return None
    registro = Sesion.objects.filter(token=datos.get('token')).first()
    if registro is None or not registro.vigente:
        return None
    return SesionElectoral(**datos)


def cerrar_sesion(request) -> None:
    sesion = getattr(request, 'sesion', None)
    if sesion is not None:
        Sesion.objects.filter(token=sesion.token).update(cerrada=True, expires_at=timezone.now())
        logger.info("Cierre de sesión (%s)", sesion.registrado_por)
    request.session.flush()
    request.sesion = None
