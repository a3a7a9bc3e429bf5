# ===================================================================
# electoral/middleware.py
# ===================================================================

"""
Middleware de la aplicación 'electoral'.

Reconstruye en cada petición el contexto de sesión (líder o administrador)
y lo deja disponible como request.sesion para vistas y servicios.
"""

from .sesion import cargar_sesion, CLAVE_SESION


class SesionElectoralMiddleware:
    """
    Adjunta request.sesion (SesionElectoral o None).

    Si la sesión guardada expiró o fue cerrada, se limpia de la sesión de
    Django para que el usuario vuelva al login.
    """
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.sesion = None
        if CLAVE_SESION in request.session:
            request.sesion = cargar_sesion(request.session)
            if request.sesion is None:
                del request.session[CLAVE_SESION]

        response = self.get_response(request)
        return response
