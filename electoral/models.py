import json
import secrets
from datetime import timedelta

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from .constants import Estado, RolPersona, ROLES_MIEMBRO
from .reglas import calcular_vota_en_bello, max_miembros_por_lider


# ===================================================================
# PERSONAS (LÍDERES, ASOCIADOS E IMPULSORES)
# ===================================================================

class PersonaQuerySet(models.QuerySet):

    def lideres(self):
        return self.filter(rol=RolPersona.LIDER)

    def asociados(self):
        return self.filter(rol=RolPersona.ASOCIADO)

    def impulsores(self):
        return self.filter(rol=RolPersona.IMPULSOR)

    def equipo_de(self, cedula_lider, rol=None):
        qs = self.filter(cedula_lider_id=cedula_lider)
        if rol:
            qs = qs.filter(rol=rol)
        return qs

    def buscar(self, texto):
        if not texto:
            return self
        return self.filter(
            models.Q(nombre_completo__icontains=texto) | models.Q(cedula__icontains=texto)
        )


class Persona(models.Model):
    cedula = models.CharField(max_length=20, primary_key=True, verbose_name="Cédula")
    nombre_completo = models.CharField(max_length=200, verbose_name="Nombre Completo")
    telefono = models.CharField(max_length=20, blank=True, null=True, verbose_name="Teléfono")
    email = models.EmailField(blank=True, null=True)
    rol = models.CharField(max_length=10, choices=RolPersona.choices, default=RolPersona.ASOCIADO)

    # Los líderes tienen cedula_lider NULL; los miembros apuntan a su líder o a NULL (sin asignar)
    cedula_lider = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        db_column='cedula_lider',
        related_name='miembros',
        limit_choices_to={'rol': RolPersona.LIDER},
        verbose_name="Líder",
    )

    lugar_votacion = models.CharField(max_length=100, blank=True, null=True, verbose_name="Lugar de Votación")
    municipio_votacion = models.CharField(max_length=100, blank=True, null=True, verbose_name="Municipio donde vive")
    municipio_puesto = models.CharField(max_length=100, blank=True, null=True, verbose_name="Municipio de Votación")
    puesto_votacion = models.CharField(max_length=200, blank=True, null=True, verbose_name="Puesto de Votación")
    mesa_votacion = models.CharField(max_length=20, blank=True, null=True, verbose_name="Mesa")
    vota_en_bello = models.BooleanField(default=False)
    votos_prometidos = models.PositiveIntegerField(default=0)

    estado = models.CharField(max_length=10, choices=Estado.choices, default=Estado.PENDIENTE)
    notas = models.TextField(blank=True, null=True)
    registrado_por = models.CharField(max_length=20, blank=True, null=True)

    fecha_registro = models.DateTimeField(default=timezone.now, verbose_name="Fecha de Registro")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PersonaQuerySet.as_manager()

    class Meta:
        db_table = 'personas'
        ordering = ['nombre_completo']
        verbose_name = "Persona"
        verbose_name_plural = "Personas"
        indexes = [
            models.Index(fields=['rol', 'estado'], name='personas_rol_estado_idx'),
            models.Index(fields=['municipio_puesto'], name='personas_mpio_puesto_idx'),
        ]

    def __str__(self):
        return f"{self.nombre_completo} ({self.cedula}) - {self.get_rol_display()}"

    @property
    def es_lider(self):
        return self.rol == RolPersona.LIDER

    @property
    def nombre_lider(self):
        return self.cedula_lider.nombre_completo if self.cedula_lider_id else ''

    def conteo_miembros(self, rol):
        return Persona.objects.equipo_de(self.cedula, rol).count()

    def cupos_disponibles(self, rol=RolPersona.ASOCIADO):
        """Cupos que le quedan al líder para el rol indicado."""
        return max(max_miembros_por_lider() - self.conteo_miembros(rol), 0)

    def clean(self):
        super().clean()
        if self.es_lider and self.cedula_lider_id:
            raise ValidationError({'cedula_lider': "Un líder no puede tener líder asignado."})
        if self.rol in ROLES_MIEMBRO and self.cedula_lider_id:
            if self.cedula_lider_id == self.cedula:
                raise ValidationError({'cedula_lider': "Una persona no puede ser su propio líder."})
            lider = Persona.objects.filter(pk=self.cedula_lider_id).only('rol').first()
            if lider is None or not lider.es_lider:
                raise ValidationError({'cedula_lider': "La cédula asignada no corresponde a un líder."})

    def save(self, *args, **kwargs):
        # vota_en_bello siempre se deriva del municipio del puesto
        self.vota_en_bello = calcular_vota_en_bello(self.municipio_puesto)
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'municipio_puesto' in update_fields:
            kwargs['update_fields'] = set(update_fields) | {'vota_en_bello'}
        super().save(*args, **kwargs)


# ===================================================================
# ACCESO: CÓDIGOS DE ADMINISTRADOR Y SESIONES
# ===================================================================

class AdminCode(models.Model):
    codigo = models.CharField(max_length=50, unique=True)
    activo = models.BooleanField(default=True)
    # Puede contener un descriptor facial serializado en JSON; se guarda tal cual
    descripcion = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'admin_codes'
        verbose_name = "Código de Administrador"
        verbose_name_plural = "Códigos de Administrador"
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.codigo} ({'activo' if self.activo else 'inactivo'})"

    @property
    def tiene_descriptor_facial(self):
        if not self.descripcion:
            return False
        try:
            datos = json.loads(self.descripcion)
        except ValueError:
            return False
        return isinstance(datos, list) and len(datos) > 0


def _token_sesion():
    return secrets.token_urlsafe(32)


def _expiracion_sesion():
    horas = getattr(settings, 'SESION_DURACION_HORAS', 12)
    return timezone.now() + timedelta(hours=horas)


class Sesion(models.Model):
    token = models.CharField(max_length=64, unique=True, default=_token_sesion)
    cedula = models.CharField(max_length=20, blank=True, null=True)
    es_admin = models.BooleanField(default=False)
    expires_at = models.DateTimeField(default=_expiracion_sesion)
    cerrada = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'sesiones'
        verbose_name = "Sesión"
        verbose_name_plural = "Sesiones"
        ordering = ['-created_at']

    def __str__(self):
        quien = 'admin' if self.es_admin else self.cedula
        return f"Sesión de {quien} hasta {self.expires_at:%Y-%m-%d %H:%M}"

    @property
    def vigente(self):
        return not self.cerrada and self.expires_at > timezone.now()


# ===================================================================
# REFERENCIA: PUESTOS DE VOTACIÓN
# ===================================================================

class PuestoVotacion(models.Model):
    departamento = models.CharField(max_length=100)
    municipio = models.CharField(max_length=100, db_index=True)
    puesto = models.CharField(max_length=200)
    direccion = models.CharField(max_length=255, blank=True, null=True, verbose_name="Dirección")

    class Meta:
        db_table = 'puestos_votacion'
        verbose_name = "Puesto de Votación"
        verbose_name_plural = "Puestos de Votación"
        ordering = ['municipio', 'puesto']
        unique_together = ('departamento', 'municipio', 'puesto')

    def __str__(self):
        return f"{self.puesto} - {self.municipio}"


# ===================================================================
# CHAT LÍDER <-> ADMINISTRADOR
# ===================================================================

class ChatMessage(models.Model):
    # Cada conversación es entre un líder y el administrador
    lider = models.ForeignKey(
        Persona,
        on_delete=models.CASCADE,
        related_name='mensajes_chat',
        limit_choices_to={'rol': RolPersona.LIDER},
    )
    de_admin = models.BooleanField(default=False, verbose_name="Enviado por el administrador")
    contenido = models.TextField()
    leido = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'chat_messages'
        ordering = ['created_at', 'id']
        verbose_name = "Mensaje de Chat"
        verbose_name_plural = "Mensajes de Chat"

    def __str__(self):
        origen = 'Admin' if self.de_admin else self.lider.nombre_completo
        return f"{origen}: {self.contenido[:40]}"
