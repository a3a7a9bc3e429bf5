# electoral/urls.py

from django.urls import path
from . import views

urlpatterns = [
    # ===============================================================
    # ACCESO Y REGISTRO PÚBLICO
    # ===============================================================
    path('', views.inicio, name='inicio'),
    path('login/', views.login_view, name='login'),
    path('logout/', views.logout_view, name='logout'),
    path('registro', views.registro_publico, name='registro_publico'),

    # ===============================================================
    # DASHBOARD Y TERRITORIO
    # ===============================================================
    path('dashboard/', views.dashboard, name='dashboard'),
    path('territorio/', views.territorio, name='territorio'),

    # ===============================================================
    # PERSONAS
    # ===============================================================
    path('lideres/', views.lista_lideres, name='lista_lideres'),
    path('lideres/registrar/', views.registrar_lider_view, name='registrar_lider'),
    path('asociados/', views.lista_asociados, name='lista_asociados'),
    path('asociados/registrar/', views.registrar_asociado_view, name='registrar_asociado'),
    path('impulsores/', views.lista_impulsores, name='lista_impulsores'),
    path('impulsores/registrar/', views.registrar_impulsor_view, name='registrar_impulsor'),
    path('personas/<str:cedula>/editar/', views.editar_persona, name='editar_persona'),
    path('personas/<str:cedula>/estado/', views.cambiar_estado_view, name='cambiar_estado'),
    path('personas/exportar/', views.exportar_personas, name='exportar_personas'),

    # ===============================================================
    # CHAT, MENSAJERÍA E INVITACIONES
    # ===============================================================
    path('chat/', views.chat, name='chat'),
    path('mensajeria/', views.mensajeria, name='mensajeria'),
    path('invitaciones/', views.invitaciones, name='invitaciones'),

    # ===============================================================
    # IMPORTACIÓN (ADMINISTRADOR)
    # ===============================================================
    path('importar/personas/', views.importar_personas_view, name='importar_personas'),
    path('importar/puestos/', views.importar_puestos_view, name='importar_puestos'),

    # ===============================================================
    # API JSON
    # ===============================================================
    path('api/dashboard/', views.api_dashboard, name='api_dashboard'),
    path('api/territorio/', views.api_territorio, name='api_territorio'),
    path('api/puestos/', views.api_puestos_municipio, name='api_puestos_municipio'),
    path('api/chat/no-leidos/', views.api_chat_no_leidos, name='api_chat_no_leidos'),
]
