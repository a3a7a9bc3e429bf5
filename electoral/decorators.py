# electoral/decorators.py

from functools import wraps
from django.shortcuts import redirect
from django.contrib import messages


def sesion_requerida(rol_o_roles=None):
    """
    Decorador para restringir el acceso a vistas según el rol de la sesión electoral.
    Acepta un string con un rol, una lista de roles o None (cualquier sesión activa).
    """
    if rol_o_roles is not None and not isinstance(rol_o_roles, (list, tuple)):
        rol_o_roles = [rol_o_roles]

    def decorator(view_func):
        @wraps(view_func)
        def wrapper_func(request, *args, **kwargs):
            sesion = getattr(request, 'sesion', None)

            # 1. Sin sesión: al login
            if sesion is None:
                messages.error(request, 'Debes iniciar sesión para continuar.')
                return redirect('login')

            # 2. Verificar el rol de la sesión
            if rol_o_roles is None or sesion.rol in rol_o_roles:
                return view_func(request, *args, **kwargs)

            # 3. Si no tiene permisos, mostrar error
            roles_legibles = ", ".join(str(rol).title() for rol in rol_o_roles)
            messages.error(request, f'No tienes los permisos necesarios ({roles_legibles}) para acceder a esta página.')
            return redirect('dashboard')
        return wrapper_func
    return decorator
