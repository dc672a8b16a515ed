from datetime import date, datetime, timezone
from io import BytesIO
from typing import Any, Dict, Iterable, Optional

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# (columna, ancho) en el orden de la hoja
COLUMNAS = [
    ("id", 8),
    ("id_agrokit", 14),
    ("humedad_tierra", 16),
    ("temp_aire", 12),
    ("humedad_aire", 14),
    ("temp_suelo", 12),
    ("luz", 12),
    ("presion", 12),
    ("agua", 10),
    ("timestamp", 22),
]


def generar_excel(filas: Iterable[Dict[str, Any]]) -> bytes:
    """Hoja "Datos" con encabezado fijo; sin filas queda solo el encabezado."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Datos"

    ws.append([nombre for nombre, _ in COLUMNAS])
    for indice, (_, ancho) in enumerate(COLUMNAS, start=1):
        ws.column_dimensions[get_column_letter(indice)].width = ancho

    for fila in filas:
        ws.append([fila.get(nombre) for nombre, _ in COLUMNAS])

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def nombre_archivo(id_agrokit: str, hoy: Optional[date] = None) -> str:
    hoy = hoy or datetime.now(timezone.utc).date()
    return f"agrokit_{id_agrokit}_{hoy.isoformat()}.xlsx"
