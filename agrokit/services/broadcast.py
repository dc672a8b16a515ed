import logging
from typing import Any, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)

EVENTO_NUEVO_REGISTRO = "nuevo_registro"


class ViewerHub:
    """
    Conexiones WebSocket de los visores en tiempo real.

    Cada evento se envia a todos los visores conectados; el filtrado por
    id_agrokit lo hace el cliente. Sin cola ni reenvio: un visor
    desconectado pierde lo publicado mientras no estaba.
    """

    def __init__(self):
        self._conexiones: Set[WebSocket] = set()

    @property
    def count(self) -> int:
        return len(self._conexiones)

    async def connect(self, websocket: WebSocket) -> None:
        # se registra antes de aceptar: cuando el cliente ve el accept ya recibe eventos
        self._conexiones.add(websocket)
        await websocket.accept()
        logger.info("Visor conectado (%d activos)", self.count)

    def disconnect(self, websocket: WebSocket) -> None:
        self._conexiones.discard(websocket)
        logger.info("Visor desconectado (%d activos)", self.count)

    async def broadcast(self, evento: str, data: Any) -> int:
        """Publica ``{"event", "data"}`` a todos. Devuelve cuantos visores lo recibieron."""
        mensaje = {"event": evento, "data": data}
        enviados = 0
        for websocket in list(self._conexiones):
            try:
                await websocket.send_json(mensaje)
                enviados += 1
            except Exception as e:
                logger.warning("Fallo envio a visor, se descarta: %s", e)
                self._conexiones.discard(websocket)
        return enviados
