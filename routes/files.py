# routes/files.py
import os

from flask import Blueprint, request, send_file

from services import files as files_service
from utils.http_error import HttpError

files_bp = Blueprint("files", __name__, url_prefix="/api/v1/files")


@files_bp.get("")
def get_file():
    token = request.args.get("token")
    if not token:
        raise HttpError(code=400, client_message="Signed token required")

    file_path, actor_id = files_service.get_file_name_from_token(token)
    resolved = os.path.abspath(file_path)
    if not os.path.isfile(resolved):
        raise HttpError(code=404, client_message="File not found")

    files_service.record_download(file_path, actor_id)
    return send_file(resolved)
