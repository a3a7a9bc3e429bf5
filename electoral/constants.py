# electoral/constants.py
# ==============================================================================
# VOCABULARIO OFICIAL DEL CRM ELECTORAL
# ==============================================================================
# Roles, estados, listas de referencia y alias de columnas para importación.
# ==============================================================================

from django.db import models


# ------------------------------------------------------------------------------
# 1. ROLES
# ------------------------------------------------------------------------------
class RolPersona(models.TextChoices):
    """Roles que se guardan en la tabla personas."""
    LIDER = 'lider', 'Líder'
    ASOCIADO = 'asociado', 'Asociado'
    IMPULSOR = 'impulsor', 'Impulsor'


class RolSesion(models.TextChoices):
    """
    Roles de sesión. 'admin' solo existe mientras dura la sesión:
    nunca se guarda en personas.rol ni en cedula_lider.
    """
    LIDER = 'lider', 'Líder'
    ADMIN = 'admin', 'Administrador'


# Roles que cuelgan de un líder (cupo independiente por rol)
ROLES_MIEMBRO = (RolPersona.ASOCIADO, RolPersona.IMPULSOR)

# ------------------------------------------------------------------------------
# 2. ESTADOS
# ------------------------------------------------------------------------------
class Estado(models.TextChoices):
    PENDIENTE = 'PENDIENTE', 'Pendiente'
    APROBADO = 'APROBADO', 'Aprobado'
    RECHAZADO = 'RECHAZADO', 'Rechazado'


# Valor centinela del desplegable "No sé"
MUNICIPIO_DESCONOCIDO = 'No Se'

# Token que devuelve el normalizador para entradas vacías
UBICACION_DESCONOCIDA = 'UNKNOWN'

# Cubeta del dashboard para personas sin municipio de puesto
SIN_MUNICIPIO = 'No definido'

# Identidad del administrador en registrado_por
REGISTRADO_POR_ADMIN = 'admin'

# ------------------------------------------------------------------------------
# 3. CHAT
# ------------------------------------------------------------------------------
MENSAJE_AUTORESPUESTA = (
    "Ya enviamos una alerta al administrador para que se ponga en contacto contigo."
)
GRUPO_ADMIN = 'admin'

# ------------------------------------------------------------------------------
# 4. LISTAS DE REFERENCIA
# ------------------------------------------------------------------------------
MUNICIPIOS_ANTIOQUIA = [
    'Abejorral', 'Abriaquí', 'Alejandría', 'Amagá', 'Amalfi', 'Andes',
    'Angelópolis', 'Angostura', 'Anorí', 'Anzá', 'Apartadó', 'Arboletes',
    'Argelia', 'Armenia', 'Barbosa', 'Bello', 'Belmira', 'Betania', 'Betulia',
    'Briceño', 'Buriticá', 'Cáceres', 'Caicedo', 'Caldas', 'Campamento',
    'Cañasgordas', 'Caracolí', 'Caramanta', 'Carepa', 'Carolina del Príncipe',
    'Caucasia', 'Chigorodó', 'Cisneros', 'Ciudad Bolívar', 'Cocorná',
    'Concepción', 'Concordia', 'Copacabana', 'Dabeiba', 'Donmatías', 'Ebéjico',
    'El Bagre', 'El Carmen de Viboral', 'El Peñol', 'El Retiro', 'El Santuario',
    'Entrerríos', 'Envigado', 'Fredonia', 'Frontino', 'Giraldo', 'Girardota',
    'Gómez Plata', 'Granada', 'Guadalupe', 'Guarne', 'Guatapé', 'Heliconia',
    'Hispania', 'Itagüí', 'Ituango', 'Jardín', 'Jericó', 'La Ceja',
    'La Estrella', 'La Pintada', 'La Unión', 'Liborina', 'Maceo', 'Marinilla',
    'Medellín', 'Montebello', 'Murindó', 'Mutatá', 'Nariño', 'Nechí', 'Necoclí',
    'Olaya', 'Peque', 'Pueblorrico', 'Puerto Berrío', 'Puerto Nare',
    'Puerto Triunfo', 'Remedios', 'Rionegro', 'Sabanalarga', 'Sabaneta',
    'Salgar', 'San Andrés de Cuerquia', 'San Carlos', 'San Francisco',
    'San Jerónimo', 'San José de la Montaña', 'San Juan de Urabá', 'San Luis',
    'San Pedro de los Milagros', 'San Pedro de Urabá', 'San Rafael', 'San Roque',
    'San Vicente Ferrer', 'Santa Bárbara', 'Santa Fe de Antioquia',
    'Santa Rosa de Osos', 'Santo Domingo', 'Segovia', 'Sonsón', 'Sopetrán',
    'Támesis', 'Tarazá', 'Tarso', 'Titiribí', 'Toledo', 'Turbo', 'Uramita',
    'Urrao', 'Valdivia', 'Valparaíso', 'Vegachí', 'Venecia', 'Vigía del Fuerte',
    'Yalí', 'Yarumal', 'Yolombó', 'Yondó', 'Zaragoza',
]

# Opciones del desplegable: municipios + centinela "No Se"
MUNICIPIOS_CHOICES = [(m, m) for m in MUNICIPIOS_ANTIOQUIA] + [(MUNICIPIO_DESCONOCIDO, 'No sé')]

LUGARES_VOTACION = ['Antioquia', 'Otro departamento']
LUGAR_VOTACION_ANTIOQUIA = 'Antioquia'

# ------------------------------------------------------------------------------
# 5. IMPORTACIÓN DE HOJAS DE CÁLCULO
# ------------------------------------------------------------------------------
# campo del modelo -> encabezados aceptados (se comparan tras normalizar)
ALIAS_COLUMNAS_PERSONAS = {
    'cedula': ('Cédula', 'CEDULA', 'cedula'),
    'nombre_completo': ('Nombre Completo', 'NOMBRE COMPLETO', 'Nombre', 'nombre_completo'),
    'telefono': ('Teléfono', 'TELEFONO', 'telefono'),
    'email': ('Email', 'Correo', 'email'),
    'rol': ('Rol', 'ROL', 'rol'),
    'cedula_lider': ('Cédula Líder', 'CEDULA LIDER', 'cedula_lider'),
    'lugar_votacion': ('Lugar Votación', 'Lugar de Votación', 'LUGAR VOTACION', 'lugar_votacion'),
    'municipio_votacion': ('Municipio', 'MUNICIPIO', 'municipio_votacion', 'Municipio donde vive'),
    'municipio_puesto': ('Municipio de Votación', 'municipio_puesto'),
    'puesto_votacion': ('Puesto de Votación', 'Puesto', 'puesto_votacion'),
    'mesa_votacion': ('Mesa', 'mesa_votacion'),
    'vota_en_bello': ('Vota en Bello', 'VOTA EN BELLO', 'vota_en_bello'),
    'votos_prometidos': ('Votos Prometidos', 'votos_prometidos'),
    'estado': ('Estado', 'ESTADO', 'estado'),
    'fecha_registro': ('Fecha Registro', 'FECHA REGISTRO', 'fecha_registro'),
    'notas': ('Notas', 'NOTAS', 'notas'),
}
COLUMNAS_OBLIGATORIAS_PERSONAS = ('cedula', 'nombre_completo')

ALIAS_COLUMNAS_PUESTOS = {
    'departamento': ('DEPARTAMENTO', 'Departamento'),
    'municipio': ('MUNICIPIO', 'Municipio'),
    'puesto': ('PUESTO', 'Puesto'),
    'direccion': ('DIRECCIÓN', 'DIRECCION', 'Dirección'),
}
COLUMNAS_OBLIGATORIAS_PUESTOS = ('departamento', 'municipio', 'puesto')

# Encabezados de la exportación (mismo orden que el Excel de campaña)
COLUMNAS_EXPORTACION = (
    'Nombre Completo', 'Cédula', 'Rol', 'Cédula Líder', 'Nombre Líder',
    'Teléfono', 'Email', 'Municipio donde vive', 'Municipio de Votación',
    'Puesto de Votación', 'Mesa', 'Vota en Bello', 'Votos Prometidos',
    'Estado', 'Fecha Registro', 'Notas',
)

# ------------------------------------------------------------------------------
# 6. MAPA
# ------------------------------------------------------------------------------
# (umbral exclusivo, color) de mayor a menor
ESCALA_COLORES_MAPA = (
    (50, '#064e3b'),
    (20, '#059669'),
    (10, '#10b981'),
    (5, '#34d399'),
    (0, '#a7f3d0'),
)
COLOR_SIN_DATOS = '#f1f5f9'
