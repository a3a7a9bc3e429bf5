# ===================================================================
# electoral/admin.py
# ===================================================================

"""
Configuración del panel de administración de Django para la app 'electoral'.

El panel propio del CRM usa códigos de administrador; este admin de Django
queda para soporte técnico (crear códigos, revisar sesiones y mensajes).
"""

from django.contrib import admin

from .models import AdminCode, ChatMessage, Persona, PuestoVotacion, Sesion


@admin.register(Persona)
class PersonaAdmin(admin.ModelAdmin):
    list_display = ('cedula', 'nombre_completo', 'rol', 'estado', 'cedula_lider', 'municipio_puesto')
    list_filter = ('rol', 'estado', 'vota_en_bello')
    search_fields = ('cedula', 'nombre_completo', 'telefono')
    raw_id_fields = ('cedula_lider',)


@admin.register(AdminCode)
class AdminCodeAdmin(admin.ModelAdmin):
    list_display = ('codigo', 'activo', 'tiene_descriptor_facial', 'created_at')
    list_filter = ('activo',)

    @admin.display(boolean=True, description='Descriptor facial')
    def tiene_descriptor_facial(self, obj):
        return obj.tiene_descriptor_facial


admin.site.register(Sesion)
admin.site.register(PuestoVotacion)
admin.site.register(ChatMessage)
