# -*- coding: utf-8 -*-
import logging

from django.contrib import messages
from django.core.exceptions import ValidationError
from django.http import HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.urls import reverse
from django.utils import timezone
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.csrf import csrf_protect
from django.views.decorators.http import require_GET, require_POST

from .constants import Estado, RolPersona, RolSesion, SIN_MUNICIPIO
from .decorators import sesion_requerida
from .forms import (
    CambiarEstadoForm, EditarPersonaForm, FiltroPersonasForm, ImportarArchivoForm,
    LoginAdminForm, LoginLiderForm, MensajeChatForm, MensajeriaForm,
    RegistroAsociadoForm, RegistroImpulsorForm, RegistroLiderForm,
)
from .models import Persona, PuestoVotacion
from .reglas import normalizar_ubicacion
from .services import chat as chat_service
from .services.equipos import actualizar_persona
from .services.exportacion import escribir_csv, libro_xlsx
from .services.importacion import importar_personas, importar_puestos
from .services.mensajeria import destinatarios, invitaciones_lider, preparar_envios
from .services.registro import cambiar_estado, registrar_lider, registrar_miembro, registrar_persona
from .services.tablero import TableroElectoralService
from .services.territorio import cargar_geojson, colorear_mapa, conteos_normalizados, resumen_territorio
from .sesion import cerrar_sesion, iniciar_sesion_admin, iniciar_sesion_lider

# Configuración de logging
logger = logging.getLogger(__name__)

ADMIN = RolSesion.ADMIN
LIDER = RolSesion.LIDER

# Máximo de errores de fila que se muestran tras una importación
MAX_ERRORES_VISIBLES = 5


def _errores_validacion(request, error):
    for mensaje in getattr(error, 'messages', [str(error)]):
        messages.error(request, mensaje)


# ===================================================================
# ACCESO
# ===================================================================

def inicio(request):
    if request.sesion is not None:
        return redirect('dashboard')
    return redirect('login')


def login_view(request):
    if request.sesion is not None:
        return redirect('dashboard')

    form_lider = LoginLiderForm(prefix='lider')
    form_admin = LoginAdminForm(prefix='admin')

    if request.method == 'POST':
        tipo = request.POST.get('tipo', 'lider')
        try:
            if tipo == 'admin':
                form_admin = LoginAdminForm(request.POST, prefix='admin')
                if form_admin.is_valid():
                    iniciar_sesion_admin(request, form_admin.cleaned_data['codigo'])
                    messages.success(request, 'Bienvenido, administrador.')
                    return redirect('dashboard')
            else:
                form_lider = LoginLiderForm(request.POST, prefix='lider')
                if form_lider.is_valid():
                    sesion = iniciar_sesion_lider(request, form_lider.cleaned_data['cedula'])
                    messages.success(request, f'Bienvenido, {sesion.nombre}.')
                    return redirect('dashboard')
        except ValidationError as e:
            _errores_validacion(request, e)

    return render(request, 'electoral/login.html', {
        'form_lider': form_lider,
        'form_admin': form_admin,
    })


def logout_view(request):
    cerrar_sesion(request)
    messages.success(request, 'Sesión cerrada correctamente')
    return redirect('login')


# ===================================================================
# REGISTRO PÚBLICO (AUTOSERVICIO E INVITACIONES)
# ===================================================================

def registro_publico(request):
    """
    Sin parámetros registra un líder. Con ?lider=<cedula> registra un asociado
    bajo ese líder, o un impulsor si además llega &rol=impulsor.
    """
    cedula_lider = request.GET.get('lider') or None
    lider = None
    rol = RolPersona.LIDER
    if cedula_lider:
        lider = Persona.objects.lideres().filter(pk=cedula_lider).first()
        if lider is None:
            messages.error(request, 'El enlace de invitación no es válido: el líder no existe.')
            return redirect('login')
        rol = RolPersona.IMPULSOR if request.GET.get('rol') == RolPersona.IMPULSOR else RolPersona.ASOCIADO

    if rol == RolPersona.LIDER:
        form_class = RegistroLiderForm
    elif rol == RolPersona.IMPULSOR:
        form_class = RegistroImpulsorForm
    else:
        form_class = RegistroAsociadoForm

    form = form_class(data=request.POST or None)
    if request.method == 'POST' and form.is_valid():
        try:
            persona = registrar_persona(form.cleaned_data, rol, cedula_lider=cedula_lider)
        except ValidationError as e:
            _errores_validacion(request, e)
        else:
            messages.success(
                request,
                f'¡Registro exitoso, {persona.nombre_completo}! Estado: {persona.get_estado_display()}.',
            )
            return redirect(request.get_full_path())

    return render(request, 'electoral/registro.html', {
        'form': form,
        'rol': rol,
        'lider': lider,
    })


# ===================================================================
# DASHBOARD Y TERRITORIO
# ===================================================================

@sesion_requerida()
def dashboard(request):
    municipio = request.GET.get('municipio') or None
    resumen = TableroElectoralService.get_resumen(request.sesion, municipio=municipio)
    return render(request, 'electoral/dashboard.html', {
        'resumen': resumen,
        'municipio': municipio,
        'sin_municipio': SIN_MUNICIPIO,
    })


@sesion_requerida()
@require_GET
def api_dashboard(request):
    municipio = request.GET.get('municipio') or None
    return JsonResponse(TableroElectoralService.get_resumen(request.sesion, municipio=municipio))


@sesion_requerida()
def territorio(request):
    personas = TableroElectoralService.personas_visibles(request.sesion).values('municipio_votacion')
    return render(request, 'electoral/territorio.html', {
        'resumen': resumen_territorio(personas),
    })


@sesion_requerida()
@require_GET
def api_territorio(request):
    geojson = cargar_geojson()
    if geojson is None:
        return JsonResponse({'error': 'Mapa no disponible. Ejecute el comando descargar_mapa.'}, status=503)
    personas = TableroElectoralService.personas_visibles(request.sesion).values('municipio_votacion')
    return JsonResponse(colorear_mapa(geojson, conteos_normalizados(personas)))


@require_GET
def api_puestos_municipio(request):
    """Puestos de votación de un municipio (tabla de referencia) para los formularios."""
    municipio = normalizar_ubicacion(request.GET.get('municipio'))
    puestos = PuestoVotacion.objects.filter(municipio=municipio).values('puesto', 'direccion')
    return JsonResponse({'municipio': municipio, 'puestos': list(puestos)})


# ===================================================================
# LISTADOS
# ===================================================================

def _listado(request, rol, titulo):
    filtro = FiltroPersonasForm(request.GET or None)
    qs = Persona.objects.filter(rol=rol).select_related('cedula_lider')
    if request.sesion.es_lider:
        qs = qs.filter(cedula_lider_id=request.sesion.cedula)
    if filtro.is_valid():
        qs = qs.buscar(filtro.cleaned_data.get('q'))
        if filtro.cleaned_data.get('estado'):
            qs = qs.filter(estado=filtro.cleaned_data['estado'])
    return render(request, 'electoral/personas_lista.html', {
        'personas': qs,
        'filtro': filtro,
        'titulo': titulo,
        'rol': rol,
    })


@sesion_requerida(ADMIN)
def lista_lideres(request):
    texto = request.GET.get('q')
    return render(request, 'electoral/lideres_lista.html', {
        'lideres': TableroElectoralService.resumen_lideres(request.sesion, texto),
        'q': texto or '',
    })


@sesion_requerida([ADMIN, LIDER])
def lista_asociados(request):
    return _listado(request, RolPersona.ASOCIADO, 'Asociados')


@sesion_requerida([ADMIN, LIDER])
def lista_impulsores(request):
    return _listado(request, RolPersona.IMPULSOR, 'Impulsores')


# ===================================================================
# REGISTRO DESDE EL PANEL
# ===================================================================

@sesion_requerida(ADMIN)
def registrar_lider_view(request):
    form = RegistroLiderForm(data=request.POST or None)
    if request.method == 'POST' and form.is_valid():
        try:
            persona = registrar_lider(form.cleaned_data, sesion=request.sesion)
        except ValidationError as e:
            _errores_validacion(request, e)
        else:
            messages.success(request, f'Líder {persona.nombre_completo} registrado ({persona.get_estado_display()}).')
            return redirect('lista_lideres')
    return render(request, 'electoral/persona_form.html', {'form': form, 'titulo': 'Registrar líder'})


def _registrar_miembro(request, rol, form_class, titulo, destino):
    form = form_class(request.sesion, data=request.POST or None)
    if request.method == 'POST' and form.is_valid():
        lider = form.cleaned_data.get('cedula_lider')
        try:
            persona = registrar_miembro(
                form.cleaned_data, rol, request.sesion,
                cedula_lider=lider.cedula if lider else None,
            )
        except ValidationError as e:
            _errores_validacion(request, e)
        else:
            messages.success(request, f'{persona.nombre_completo} registrado ({persona.get_estado_display()}).')
            return redirect(destino)
    return render(request, 'electoral/persona_form.html', {'form': form, 'titulo': titulo})


@sesion_requerida([ADMIN, LIDER])
def registrar_asociado_view(request):
    return _registrar_miembro(request, RolPersona.ASOCIADO, RegistroAsociadoForm, 'Registrar asociado', 'lista_asociados')


@sesion_requerida([ADMIN, LIDER])
def registrar_impulsor_view(request):
    return _registrar_miembro(request, RolPersona.IMPULSOR, RegistroImpulsorForm, 'Registrar impulsor', 'lista_impulsores')


# ===================================================================
# EDICIÓN Y ESTADO (ADMINISTRADOR)
# ===================================================================

@sesion_requerida(ADMIN)
def editar_persona(request, cedula):
    persona = get_object_or_404(Persona, pk=cedula)
    form = EditarPersonaForm(data=request.POST or None, instance=persona)
    if request.method == 'POST' and form.is_valid():
        asignados = None
        if form.cleaned_data.get('rol') == RolPersona.LIDER:
            asignados = [p.cedula for p in form.cleaned_data.get('asociados_asignados') or []]
        try:
            persona = actualizar_persona(persona, form.cleaned_data, cedulas_asignadas=asignados)
        except ValidationError as e:
            _errores_validacion(request, e)
        else:
            messages.success(request, f'Datos de {persona.nombre_completo} actualizados.')
            return redirect('lista_lideres' if persona.es_lider else (
                'lista_impulsores' if persona.rol == RolPersona.IMPULSOR else 'lista_asociados'
            ))
    return render(request, 'electoral/editar_persona.html', {'form': form, 'persona': persona})


@sesion_requerida(ADMIN)
@require_POST
@csrf_protect
def cambiar_estado_view(request, cedula):
    persona = get_object_or_404(Persona, pk=cedula)
    form = CambiarEstadoForm(request.POST)
    if form.is_valid():
        cambiar_estado(persona, form.cleaned_data['estado'])
        messages.success(request, f'{persona.nombre_completo}: {Estado(persona.estado).label}.')
    else:
        messages.error(request, 'Estado inválido.')
    siguiente = request.POST.get('next')
    if siguiente and url_has_allowed_host_and_scheme(siguiente, allowed_hosts={request.get_host()}):
        return redirect(siguiente)
    return redirect('lista_asociados')


# ===================================================================
# CHAT LÍDER <-> ADMINISTRADOR
# ===================================================================

@sesion_requerida([ADMIN, LIDER])
def chat(request):
    sesion = request.sesion
    cedula_lider = sesion.cedula if sesion.es_lider else request.GET.get('lider')
    form = MensajeChatForm(request.POST or None)

    if request.method == 'POST' and form.is_valid():
        try:
            chat_service.enviar_mensaje(sesion, form.cleaned_data['contenido'], cedula_lider=cedula_lider)
        except ValidationError as e:
            _errores_validacion(request, e)
        else:
            url = reverse('chat')
            if sesion.es_admin and cedula_lider:
                url += f'?lider={cedula_lider}'
            return redirect(url)

    mensajes_chat = []
    if cedula_lider:
        chat_service.marcar_leidos(sesion, cedula_lider)
        mensajes_chat = chat_service.conversacion(cedula_lider)

    return render(request, 'electoral/chat.html', {
        'form': MensajeChatForm() if request.method == 'POST' else form,
        'conversaciones': chat_service.conversaciones_activas() if sesion.es_admin else [],
        'mensajes_chat': mensajes_chat,
        'cedula_lider': cedula_lider,
    })


@sesion_requerida([ADMIN, LIDER])
@require_GET
def api_chat_no_leidos(request):
    return JsonResponse({'count': chat_service.conteo_no_leidos(request.sesion)})


# ===================================================================
# MENSAJERÍA E INVITACIONES
# ===================================================================

@sesion_requerida(ADMIN)
def mensajeria(request):
    form = MensajeriaForm(request.POST or None)
    envios, omitidos = [], []
    if request.method == 'POST' and form.is_valid():
        personas = destinatarios(form.cleaned_data['destinatarios'], form.cleaned_data.get('estado'))
        envios, omitidos = preparar_envios(
            personas,
            form.cleaned_data['plantilla'],
            incluir_fecha=form.cleaned_data['incluir_fecha'],
        )
        messages.info(request, f'{len(envios)} mensajes listos para enviar. {len(omitidos)} sin teléfono válido.')
    return render(request, 'electoral/mensajeria.html', {
        'form': form,
        'envios': envios,
        'omitidos': omitidos,
    })


@sesion_requerida(LIDER)
def invitaciones(request):
    lider = get_object_or_404(Persona, pk=request.sesion.cedula, rol=RolPersona.LIDER)
    base_url = request.build_absolute_uri(reverse('registro_publico'))
    return render(request, 'electoral/invitaciones.html', {
        'lider': lider,
        'invitaciones': invitaciones_lider(base_url, lider),
        'cupos_asociados': lider.cupos_disponibles(RolPersona.ASOCIADO),
        'cupos_impulsores': lider.cupos_disponibles(RolPersona.IMPULSOR),
    })


# ===================================================================
# IMPORTACIÓN Y EXPORTACIÓN
# ===================================================================

def _importar(request, funcion, titulo):
    form = ImportarArchivoForm(request.POST or None, request.FILES or None)
    if request.method == 'POST':
        if not form.is_valid():
            messages.error(request, "Error en el formulario. Por favor, sube un archivo .csv o .xlsx válido.")
        else:
            archivo = form.cleaned_data['archivo']
            try:
                resultado = funcion(archivo, archivo.name)
            except ValidationError as e:
                _errores_validacion(request, e)
            except Exception as e:
                messages.error(request, f"No se pudo leer el archivo. Error: {e}")
                logger.exception("Error procesando archivo de importación %s", archivo.name)
            else:
                messages.success(
                    request,
                    f"Proceso finalizado. Creados: {resultado.creados}. "
                    f"Actualizados: {resultado.actualizados}. Vinculados a líder: {resultado.vinculados}.",
                )
                if resultado.errores:
                    messages.warning(
                        request,
                        f"Se encontraron {len(resultado.errores)} filas con errores "
                        f"(mostrando las primeras {MAX_ERRORES_VISIBLES}):",
                    )
                    for error in resultado.errores[:MAX_ERRORES_VISIBLES]:
                        messages.error(request, error)
                return redirect(request.path)
    return render(request, 'electoral/importar.html', {'form': form, 'titulo': titulo})


@sesion_requerida(ADMIN)
def importar_personas_view(request):
    return _importar(request, importar_personas, 'Importar personas')


@sesion_requerida(ADMIN)
def importar_puestos_view(request):
    return _importar(request, importar_puestos, 'Importar puestos de votación')


@sesion_requerida([ADMIN, LIDER])
@require_GET
def exportar_personas(request):
    personas = TableroElectoralService.personas_visibles(request.sesion)
    rol = request.GET.get('rol')
    if rol in RolPersona.values:
        personas = personas.filter(rol=rol)
    nombre = f"personas_{timezone.localdate():%Y%m%d}"

    if request.GET.get('formato') == 'xlsx':
        response = HttpResponse(
            libro_xlsx(personas),
            content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        )
        response['Content-Disposition'] = f'attachment; filename="{nombre}.xlsx"'
        return response

    response = HttpResponse(content_type='text/csv; charset=utf-8')
    response['Content-Disposition'] = f'attachment; filename="{nombre}.csv"'
    return escribir_csv(response, personas)
