# electoral/context_processors.py
from .services.chat import conteo_no_leidos


def datos_globales_sesion(request):
    """
    Inyecta la sesión electoral y el conteo de mensajes sin leer en todas
    las plantillas, para el menú y el badge del chat.
    """
    sesion = getattr(request, 'sesion', None)
    if sesion is None:
        return {'sesion': None, 'chat_no_leidos_count': 0}

    return {
        'sesion': sesion,
        'chat_no_leidos_count': conteo_no_leidos(sesion),
    }
