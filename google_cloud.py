# google_cloud.py
import os, logging
from pathlib import Path

log = logging.getLogger(__name__)

ENV_KEYS = ("GOOGLE_APPLICATION_CREDENTIALS", "DF_SERVICE_ACCOUNT_PATH")


def resolve_credential_path(candidate: str | None) -> str | None:
    """Absolute path of an existing service-account file, else None (with a warning)."""
    if not candidate or not candidate.strip():
        return None

    p = Path(candidate.strip())
    if not p.is_absolute():
        p = Path(os.getcwd()) / p
    p = p.resolve()

    if not p.is_file():
        log.warning(
            "[dialogflow] Service account file not found at %s (cwd=%s). "
            "Dialogflow requests will fail until the file is available.",
            p, os.getcwd(),
        )
        return None
    return str(p)


def configure_google_cloud_credentials() -> str | None:
    """
    Point GOOGLE_APPLICATION_CREDENTIALS at an absolute, existing file.
    Leaves the environment untouched when the file is missing; never raises.
    """
    configured = next((os.environ[k] for k in ENV_KEYS if os.environ.get(k)), None)
    resolved = resolve_credential_path(configured)
    if resolved:
        os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = resolved
    return resolved
