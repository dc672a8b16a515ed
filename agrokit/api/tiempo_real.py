from fastapi import APIRouter, WebSocket, WebSocketDisconnect

router = APIRouter(tags=["tiempo-real"])


@router.websocket("/ws")
async def visor(websocket: WebSocket):
    """
    Canal de visores: recibe {"event": "nuevo_registro", "data": {...}}
    por cada lectura ingresada. Lo que mande el cliente se ignora.
    """
    hub = websocket.app.state.hub
    await hub.connect(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        hub.disconnect(websocket)
