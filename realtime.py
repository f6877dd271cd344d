# backend/realtime.py
from flask_socketio import SocketIO, emit, join_room, leave_room

# one shared instance for the whole app
socketio = SocketIO(cors_allowed_origins="*", ping_interval=25, ping_timeout=20)

NS = "/rt"


@socketio.on("connect", namespace=NS)
def on_connect(auth):
    emit("connected", {"ok": True})


@socketio.on("subscribe", namespace=NS)
def on_subscribe(data):
    alert_type = (data or {}).get("type")
    if alert_type:
        join_room(f"alerts:{alert_type}")


@socketio.on("unsubscribe", namespace=NS)
def on_unsubscribe(data):
    alert_type = (data or {}).get("type")
    if alert_type:
        leave_room(f"alerts:{alert_type}")


def emit_alert(payload: dict) -> None:
    """
    Broadcast a freshly created safety alert to:
      - everyone on /rt
      - and the room for its alert type
    """
    socketio.emit("alert:new", payload, namespace=NS)
    if payload.get("type"):
        socketio.emit("alert:new", payload, to=f"alerts:{payload['type']}", namespace=NS)
