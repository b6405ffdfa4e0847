"""Servicio de generación de reportes de inscripciones (PDF con reportlab y CSV con pandas)."""
from datetime import datetime, timezone
from io import BytesIO

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.pagesizes import landscape, letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import KeepTogether, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from app.core.roles import YEAR_LABELS
from app.models.registration import Registration

# ── Colores institucionales ───────────────────────────────────────────
NAVY = colors.HexColor("#1B2A4A")
GRAY = colors.HexColor("#6B7280")
GRAY_LIGHT = colors.HexColor("#F3F4F6")

STATUS_COLORES = {
    "approved": colors.HexColor("#22C55E"),
    "pending": colors.HexColor("#F5A623"),
    "rejected": colors.HexColor("#EF4444"),
}

# ── Márgenes y medidas de página ──────────────────────────────────────
PAGE_SIZE = landscape(letter)
_MARGIN = 0.6 * inch
_TOP_MARGIN = 1.1 * inch

CSV_COLUMNS = [
    "Student", "Roll Number", "Department", "Year", "Sport", "Category", "Venue", "Event Date", "Status",
]
# Ancho de cada columna de CSV_COLUMNS en el PDF (suma = ancho útil de la página)
_COL_WIDTHS = [w * inch for w in (1.5, 1.0, 1.3, 0.9, 1.3, 0.8, 1.1, 1.1, 0.8)]


def _fecha(valor: datetime | None) -> str:
    return valor.strftime("%d/%m/%Y %H:%M") if valor else ""


def registration_rows(registrations: list[Registration]) -> list[list[str]]:
    """Filas planas (mismo orden que CSV_COLUMNS) para las tablas del PDF y el CSV."""
    return [
        [
            r.student.name,
            r.student.roll_number,
            r.student.department,
            YEAR_LABELS.get(r.student.year, r.student.year),
            r.sport.name,
            r.sport.category,
            r.sport.venue or "",
            _fecha(r.sport.event_date),
            r.status,
        ]
        for r in registrations
    ]


def _make_page_callback(titulo_reporte: str):
    """Dibuja título y número de página en cada hoja."""

    def _dibujar_pagina(canvas, doc):
        canvas.saveState()
        page_width, page_height = PAGE_SIZE

        canvas.setFont("Helvetica-Bold", 14)
        canvas.setFillColor(NAVY)
        canvas.drawCentredString(page_width / 2, page_height - 0.55 * inch, titulo_reporte)

        sep_y = page_height - 0.7 * inch
        canvas.setStrokeColor(NAVY)
        canvas.setLineWidth(1.5)
        canvas.line(_MARGIN, sep_y, page_width - _MARGIN, sep_y)

        canvas.setFont("Helvetica", 8)
        canvas.setFillColor(GRAY)
        canvas.drawRightString(page_width - _MARGIN, 0.35 * inch, f"Página {doc.page}")
        canvas.restoreState()

    return _dibujar_pagina


def _encabezado(subtitulo: str, usuario_nombre: str) -> list:
    estilos = getSampleStyleSheet()
    estilo_meta = ParagraphStyle(
        "MetaReporte",
        parent=estilos["Normal"],
        fontSize=9,
        leading=14,
        textColor=GRAY,
        spaceAfter=3,
    )
    elementos = [Paragraph(subtitulo, estilo_meta)]
    fecha = datetime.now(timezone.utc).strftime("%d/%m/%Y %H:%M UTC")
    elementos.append(Paragraph(f"Generado: {fecha}", estilo_meta))
    if usuario_nombre:
        elementos.append(Paragraph(f"Generado por: {usuario_nombre}", estilo_meta))
    elementos.append(Spacer(1, 0.2 * inch))
    return elementos


def _tabla(headers: list[str], rows: list[list], col_widths: list[float] | None = None) -> Table:
    """Crea una tabla con estilo institucional; la columna de estado va coloreada."""
    data = [headers] + rows
    table = Table(data, colWidths=col_widths, repeatRows=1)
    estilo = [
        ("BACKGROUND", (0, 0), (-1, 0), NAVY),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, 0), 9),
        ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
        ("FONTSIZE", (0, 1), (-1, -1), 8),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 5),
        ("TOPPADDING", (0, 0), (-1, -1), 5),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#D1D5DB")),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]
    for i in range(2, len(data), 2):
        estilo.append(("BACKGROUND", (0, i), (-1, i), GRAY_LIGHT))
    status_col = len(headers) - 1
    for i, row in enumerate(rows, start=1):
        color = STATUS_COLORES.get(row[status_col])
        if color is not None:
            estilo.append(("TEXTCOLOR", (status_col, i), (status_col, i), color))
    table.setStyle(TableStyle(estilo))
    return table


def _resumen(registrations: list[Registration]) -> Table:
    conteo = {"pending": 0, "approved": 0, "rejected": 0}
    for r in registrations:
        conteo[r.status] = conteo.get(r.status, 0) + 1
    rows = [
        ["Total", str(len(registrations))],
        ["Approved", str(conteo["approved"])],
        ["Pending", str(conteo["pending"])],
        ["Rejected", str(conteo["rejected"])],
    ]
    return _tabla(["Indicator", "Value"], rows)


def generate_registrations_pdf(
    registrations: list[Registration],
    titulo: str,
    subtitulo: str,
    usuario_nombre: str = "",
    group_by_sport: bool = False,
) -> bytes:
    """Reporte de inscripciones: resumen por estado y tabla (opcionalmente una sección por deporte)."""
    buf = BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=PAGE_SIZE,
        topMargin=_TOP_MARGIN,
        bottomMargin=_MARGIN,
        leftMargin=_MARGIN,
        rightMargin=_MARGIN,
    )
    page_cb = _make_page_callback(titulo)
    elementos = _encabezado(subtitulo, usuario_nombre)
    estilos = getSampleStyleSheet()
    estilo_seccion = ParagraphStyle(
        "SeccionTitulo", fontSize=12, textColor=NAVY, fontName="Helvetica-Bold", spaceBefore=6, spaceAfter=8,
    )

    elementos.append(KeepTogether([Paragraph("Summary", estilo_seccion), _resumen(registrations)]))
    elementos.append(Spacer(1, 0.25 * inch))

    if not registrations:
        elementos.append(Paragraph("No registrations found.", estilos["Normal"]))
    elif group_by_sport:
        por_deporte: dict[str, list[Registration]] = {}
        for r in registrations:
            por_deporte.setdefault(r.sport.name, []).append(r)
        for nombre in sorted(por_deporte):
            grupo = por_deporte[nombre]
            elementos.append(Paragraph(f"{nombre} ({len(grupo)})", estilo_seccion))
            elementos.append(_tabla(CSV_COLUMNS, registration_rows(grupo), _COL_WIDTHS))
            elementos.append(Spacer(1, 0.2 * inch))
    else:
        elementos.append(Paragraph("Registrations", estilo_seccion))
        elementos.append(_tabla(CSV_COLUMNS, registration_rows(registrations), _COL_WIDTHS))

    doc.build(elementos, onFirstPage=page_cb, onLaterPages=page_cb)
    return buf.getvalue()


def generate_registrations_csv(registrations: list[Registration]) -> bytes:
    """CSV con las mismas columnas que la tabla del PDF."""
    df = pd.DataFrame(registration_rows(registrations), columns=CSV_COLUMNS)
    return df.to_csv(index=False).encode("utf-8")
