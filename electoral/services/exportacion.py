# electoral/services/exportacion.py

import csv
from io import BytesIO

from django.utils import timezone
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from electoral.constants import COLUMNAS_EXPORTACION


def filas_exportacion(personas):
    """Una lista por persona, en el orden de COLUMNAS_EXPORTACION."""
    for p in personas.select_related('cedula_lider'):
        fecha = timezone.localtime(p.fecha_registro).strftime('%d/%m/%Y') if p.fecha_registro else ''
        yield [
            p.nombre_completo,
            p.cedula,
            p.get_rol_display(),
            p.cedula_lider_id or '',
            p.nombre_lider,
            p.telefono or '',
            p.email or '',
            p.municipio_votacion or '',
            p.municipio_puesto or '',
            p.puesto_votacion or '',
            p.mesa_votacion or '',
            'SÍ' if p.vota_en_bello else 'NO',
            p.votos_prometidos,
            p.estado,
            fecha,
            p.notas or '',
        ]


def escribir_csv(destino, personas):
    """Escribe el CSV (con BOM para que Excel respete las tildes) en `destino` (ej: un HttpResponse)."""
    destino.write('\ufeff')
    writer = csv.writer(destino)
    writer.writerow(COLUMNAS_EXPORTACION)
    for fila in filas_exportacion(personas):
        writer.writerow(fila)
    return destino


def libro_xlsx(personas, titulo='Personas'):
    """Genera el .xlsx con encabezado resaltado y columnas ajustadas. Retorna los bytes."""
    wb = Workbook()
    ws = wb.active
    ws.title = titulo[:31]

    header_fill = PatternFill(start_color="0D5E3A", end_color="0D5E3A", fill_type="solid")
    header_font = Font(bold=True, color="FFFFFF", size=10)
    header_align = Alignment(horizontal="center", vertical="center", wrap_text=True)

    ws.append(list(COLUMNAS_EXPORTACION))
    for cell in ws[1]:
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = header_align

    total = 0
    for fila in filas_exportacion(personas):
        ws.append(fila)
        total += 1

    for col_idx, col in enumerate(ws.iter_cols(), 1):
        max_len = max((len(str(cell.value or '')) for cell in col), default=8)
        ws.column_dimensions[get_column_letter(col_idx)].width = max(8, min(45, max_len + 3))

    ws.auto_filter.ref = f"A1:{get_column_letter(len(COLUMNAS_EXPORTACION))}{total + 1}"
    ws.freeze_panes = "A2"

    salida = BytesIO()
    wb.save(salida)
    return salida.getvalue()
