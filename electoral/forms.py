# ===================================================================
# electoral/forms.py
# ===================================================================

from django import forms
from django.core.exceptions import ValidationError

from .constants import (
    Estado, RolPersona, LUGARES_VOTACION, MUNICIPIOS_CHOICES,
)
from .models import Persona
from .services.mensajeria import DESTINATARIOS_CHOICES
from .services.importacion import EXTENSIONES_PERMITIDAS
from .utils import validar_telefono


def _control(**extra):
    return {'class': 'form-control', **extra}


# ===================================================================
# ACCESO
# ===================================================================

class LoginLiderForm(forms.Form):
    cedula = forms.CharField(
        label="Cédula",
        max_length=20,
        widget=forms.TextInput(attrs=_control(placeholder='Número de cédula', autocomplete='off')),
    )


class LoginAdminForm(forms.Form):
    codigo = forms.CharField(
        label="Código de administrador",
        max_length=50,
        widget=forms.PasswordInput(attrs=_control()),
    )


# ===================================================================
# REGISTRO DE PERSONAS
# ===================================================================

class PersonaBaseForm(forms.ModelForm):
    """
    Campos comunes a líderes, asociados e impulsores.
    La persistencia la hace services.registro; aquí solo se valida.
    """
    municipio_votacion = forms.ChoiceField(
        label="Municipio donde vive",
        choices=[('', 'Seleccione...')] + MUNICIPIOS_CHOICES,
        widget=forms.Select(attrs=_control()),
    )
    municipio_puesto = forms.ChoiceField(
        label="Municipio de votación",
        choices=[('', 'Seleccione...')] + MUNICIPIOS_CHOICES,
        widget=forms.Select(attrs=_control()),
    )
    lugar_votacion = forms.ChoiceField(
        label="Lugar de votación",
        choices=[('', 'Seleccione...')] + [(l, l) for l in LUGARES_VOTACION],
        required=False,
        widget=forms.Select(attrs=_control()),
    )

    class Meta:
        model = Persona
        fields = [
            'cedula', 'nombre_completo', 'telefono', 'email', 'lugar_votacion',
            'municipio_votacion', 'municipio_puesto', 'puesto_votacion',
            'mesa_votacion', 'notas',
        ]
        widgets = {
            'cedula': forms.TextInput(attrs=_control()),
            'nombre_completo': forms.TextInput(attrs=_control()),
            'telefono': forms.TextInput(attrs=_control(placeholder='3001234567')),
            'email': forms.EmailInput(attrs=_control()),
            'puesto_votacion': forms.TextInput(attrs=_control()),
            'mesa_votacion': forms.TextInput(attrs=_control()),
            'notas': forms.Textarea(attrs=_control(rows=3)),
        }

    def clean_cedula(self):
        cedula = (self.cleaned_data.get('cedula') or '').strip()
        if not cedula.isdigit():
            raise ValidationError("La cédula solo debe contener números.")
        if Persona.objects.filter(pk=cedula).exists():
            raise ValidationError(f"Ya existe una persona registrada con la cédula {cedula}.")
        return cedula

    def clean_nombre_completo(self):
        return (self.cleaned_data.get('nombre_completo') or '').strip()

    def clean_telefono(self):
        telefono = self.cleaned_data.get('telefono')
        if not telefono:
            return None
        return validar_telefono(telefono)

    def validate_unique(self):
        # La unicidad de la cédula ya se valida con un mensaje propio
        pass


class RegistroLiderForm(PersonaBaseForm):
    """Registro de líderes (autoservicio o panel del administrador)."""


class RegistroAsociadoForm(PersonaBaseForm):
    """
    Registro de asociados. El administrador puede escoger el líder (o dejarlo
    sin asignar); a un líder no se le muestra el campo: registra bajo sí mismo.
    """
    cedula_lider = forms.ModelChoiceField(
        label="Líder",
        queryset=Persona.objects.none(),
        required=False,
        empty_label="Sin asignar (Administrador)",
        widget=forms.Select(attrs=_control()),
    )

    def __init__(self, sesion=None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if sesion is not None and sesion.es_admin:
            self.fields['cedula_lider'].queryset = Persona.objects.lideres()
        else:
            del self.fields['cedula_lider']


class RegistroImpulsorForm(RegistroAsociadoForm):
    votos_prometidos = forms.IntegerField(
        label="Votos prometidos",
        min_value=0,
        initial=0,
        widget=forms.NumberInput(attrs=_control()),
    )

    class Meta(PersonaBaseForm.Meta):
        fields = PersonaBaseForm.Meta.fields + ['votos_prometidos']


class EditarPersonaForm(forms.ModelForm):
    """
    Edición completa por el administrador: perfil, estado, rol y líder.
    Si la persona es (o pasa a ser) líder, 'asociados_asignados' define su equipo.
    """
    municipio_votacion = forms.ChoiceField(
        label="Municipio donde vive",
        choices=[('', 'Seleccione...')] + MUNICIPIOS_CHOICES,
        required=False,
        widget=forms.Select(attrs=_control()),
    )
    municipio_puesto = forms.ChoiceField(
        label="Municipio de votación",
        choices=[('', 'Seleccione...')] + MUNICIPIOS_CHOICES,
        required=False,
        widget=forms.Select(attrs=_control()),
    )
    asociados_asignados = forms.ModelMultipleChoiceField(
        label="Asociados del equipo",
        queryset=Persona.objects.none(),
        required=False,
        widget=forms.SelectMultiple(attrs=_control(size=10)),
    )

    class Meta:
        model = Persona
        fields = [
            'nombre_completo', 'telefono', 'email', 'rol', 'cedula_lider',
            'lugar_votacion', 'municipio_votacion', 'municipio_puesto',
            'puesto_votacion', 'mesa_votacion', 'votos_prometidos', 'estado', 'notas',
        ]
        widgets = {
            'nombre_completo': forms.TextInput(attrs=_control()),
            'telefono': forms.TextInput(attrs=_control()),
            'email': forms.EmailInput(attrs=_control()),
            'rol': forms.Select(attrs=_control()),
            'cedula_lider': forms.Select(attrs=_control()),
            'lugar_votacion': forms.TextInput(attrs=_control()),
            'puesto_votacion': forms.TextInput(attrs=_control()),
            'mesa_votacion': forms.TextInput(attrs=_control()),
            'votos_prometidos': forms.NumberInput(attrs=_control()),
            'estado': forms.Select(attrs=_control()),
            'notas': forms.Textarea(attrs=_control(rows=3)),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        cedula = self.instance.pk
        self.fields['cedula_lider'].queryset = Persona.objects.lideres().exclude(pk=cedula)
        self.fields['cedula_lider'].required = False
        self.fields['asociados_asignados'].queryset = Persona.objects.asociados().filter(
            cedula_lider__isnull=True
        ) | Persona.objects.asociados().filter(cedula_lider_id=cedula)
        if cedula and not self.is_bound:
            self.initial['asociados_asignados'] = list(
                Persona.objects.equipo_de(cedula, RolPersona.ASOCIADO).values_list('cedula', flat=True)
            )

    def clean_telefono(self):
        telefono = self.cleaned_data.get('telefono')
        if not telefono:
            return None
        return validar_telefono(telefono)

    def clean(self):
        cleaned = super().clean()
        if cleaned.get('rol') == RolPersona.LIDER:
            cleaned['cedula_lider'] = None
        return cleaned

    def _post_clean(self):
        # La validación de modelo (incluido el cambio de rol) ocurre en services.equipos
        pass


class CambiarEstadoForm(forms.Form):
    estado = forms.ChoiceField(choices=Estado.choices)


# ===================================================================
# CHAT Y MENSAJERÍA
# ===================================================================

class MensajeChatForm(forms.Form):
    contenido = forms.CharField(
        label="Mensaje",
        max_length=2000,
        widget=forms.Textarea(attrs=_control(rows=2, placeholder='Escribe un mensaje...')),
    )


class MensajeriaForm(forms.Form):
    destinatarios = forms.ChoiceField(
        label="Destinatarios",
        choices=DESTINATARIOS_CHOICES,
        widget=forms.Select(attrs=_control()),
    )
    estado = forms.ChoiceField(
        label="Estado",
        choices=[('', 'Todos')] + list(Estado.choices),
        required=False,
        widget=forms.Select(attrs=_control()),
    )
    plantilla = forms.CharField(
        label="Mensaje",
        help_text="Puede usar {nombre} y {cedula} para personalizar.",
        widget=forms.Textarea(attrs=_control(rows=5)),
    )
    incluir_fecha = forms.BooleanField(
        label="Agregar fecha y hora de envío",
        required=False,
    )


# ===================================================================
# IMPORTACIÓN Y FILTROS
# ===================================================================

class ImportarArchivoForm(forms.Form):
    """
    Formulario para la subida de una hoja de cálculo en el panel de administración.
    """
    archivo = forms.FileField(
        label="Seleccionar archivo (.csv o .xlsx)",
        help_text="Columnas mínimas: Cédula y Nombre Completo. Se aceptan encabezados con o sin tildes.",
    )

    def clean_archivo(self):
        archivo = self.cleaned_data['archivo']
        if not archivo.name.lower().endswith(EXTENSIONES_PERMITIDAS):
            raise ValidationError("Solo se aceptan archivos .csv o .xlsx.")
        return archivo


class FiltroPersonasForm(forms.Form):
    q = forms.CharField(
        required=False,
        widget=forms.TextInput(attrs=_control(placeholder='Buscar por nombre o cédula')),
    )
    estado = forms.ChoiceField(
        choices=[('', 'Todos los estados')] + list(Estado.choices),
        required=False,
        widget=forms.Select(attrs=_control()),
    )
