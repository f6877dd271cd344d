# wsgi.py
import os

from dotenv import load_dotenv

load_dotenv()

from app import create_app  # noqa: E402
from config import DevelopmentConfig, ProductionConfig  # noqa: E402
from realtime import socketio  # noqa: E402  shared SocketIO instance

_env = os.getenv("APP_ENV", "production").lower()
app = create_app(DevelopmentConfig if _env == "development" else ProductionConfig)

# Local dev only: `python wsgi.py`
if __name__ == "__main__":
    port = int(os.getenv("PORT", "8080"))
    socketio.run(app, host="0.0.0.0", port=port, allow_unsafe_werkzeug=True)
