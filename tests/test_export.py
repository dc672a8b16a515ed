"""
Descarga del historial en Excel.
"""

from datetime import date, datetime, timezone
from io import BytesIO

from openpyxl import load_workbook

from agrokit.services.exportacion import COLUMNAS, XLSX_MEDIA_TYPE, generar_excel, nombre_archivo

ENCABEZADO = (
    "id", "id_agrokit", "humedad_tierra", "temp_aire", "humedad_aire",
    "temp_suelo", "luz", "presion", "agua", "timestamp",
)


def _hoja(contenido: bytes):
    wb = load_workbook(BytesIO(contenido))
    return wb["Datos"]


class TestEndpointDescarga:
    """GET /api/download/{id_agrokit}."""

    def test_agrokit_sin_lecturas_solo_encabezado(self, client, auth_headers):
        r = client.get("/api/download/KIT9", headers=auth_headers)
        assert r.status_code == 200
        assert r.headers["content-type"] == XLSX_MEDIA_TYPE

        hoja = _hoja(r.content)
        filas = list(hoja.iter_rows(values_only=True))
        assert filas == [ENCABEZADO]

    def test_historial_completo_mas_nuevas_primero(self, client, auth_headers):
        for i, fecha in enumerate(("2025-03-01 10:00:00", "2025-03-03 10:00:00", "2025-03-02 10:00:00")):
            client.post(
                "/api/sensores",
                json={"id_agrokit": "KIT1", "humedad_tierra": 10 + i, "gps": {"lat": 1}, "bateria": 70, "fechaHora": fecha},
            )
        client.post("/api/sensores", json={"id_agrokit": "OTRO", "fechaHora": "2025-03-04 10:00:00"})

        hoja = _hoja(client.get("/api/download/KIT1", headers=auth_headers).content)
        filas = list(hoja.iter_rows(values_only=True))

        assert filas[0] == ENCABEZADO
        assert [f[-1] for f in filas[1:]] == ["2025-03-03 10:00:00", "2025-03-02 10:00:00", "2025-03-01 10:00:00"]
        assert {f[1] for f in filas[1:]} == {"KIT1"}
        assert [f[2] for f in filas[1:]] == [11, 12, 10]

    def test_historial_sin_limite(self, client, auth_headers):
        for i in range(120):
            client.post("/api/sensores", json={"id_agrokit": "KIT1", "luz": i})
        hoja = _hoja(client.get("/api/download/KIT1", headers=auth_headers).content)
        assert hoja.max_row == 121

    def test_adjunto_con_agrokit_y_fecha(self, client, auth_headers):
        r = client.get("/api/download/KIT1", headers=auth_headers)
        hoy = datetime.now(timezone.utc).date().isoformat()
        disposition = r.headers["content-disposition"]
        assert disposition.startswith("attachment")
        assert f"agrokit_KIT1_{hoy}.xlsx" in disposition


class TestPlanilla:
    """Armado del libro."""

    def test_anchos_de_columna(self):
        hoja = _hoja(generar_excel([]))
        assert hoja.column_dimensions["A"].width == 8
        assert hoja.column_dimensions["J"].width == 22
        assert len(COLUMNAS) == 10

    def test_valores_faltantes_quedan_en_blanco(self):
        hoja = _hoja(generar_excel([{"id": 1, "id_agrokit": "K", "timestamp": "2025-01-01 00:00:00"}]))
        fila = list(hoja.iter_rows(min_row=2, values_only=True))[0]
        assert fila[0] == 1
        assert fila[2:9] == (None,) * 7

    def test_nombre_de_archivo(self):
        assert nombre_archivo("KIT1", date(2025, 8, 18)) == "agrokit_KIT1_2025-08-18.xlsx"
