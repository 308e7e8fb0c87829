# routes/drive.py
from flask import jsonify, current_app

from . import drive_bp
from ..exceptions import DriveConfigurationError, DriveNotAuthorizedError, DriveUploadError

from claimdesk import logger


def _exporter():
    return current_app.extensions['drive_exporter']


@drive_bp.route("/status", methods=["GET"])
def drive_status():
    """Whether a Drive credential bundle is stored."""
    return jsonify({"authorized": _exporter().uploader.is_authorized()}), 200


@drive_bp.route("/upload", methods=["POST"])
def drive_upload():
    """
    Upload a JSON export of all clients to Drive and wait for the result.

    Responses:
      200: {"success": true, "file": {"id": ..., "name": ...}}
      400: not authorized yet, visit /auth/google
      500: OAuth client not configured, or every attempt failed
    """
    try:
        file_info = _exporter().export_now()
    except DriveNotAuthorizedError as e:
        return jsonify({"error": str(e)}), 400
    except DriveConfigurationError as e:
        return jsonify({"error": str(e)}), 500
    except DriveUploadError as e:
        logger.error(f"Drive upload failed after {e.attempts} attempt(s): {str(e)}")
        return jsonify({"error": "Drive upload failed after retries", "details": str(e)}), 500
    except Exception as e:
        logger.error(f"Drive upload error: {str(e)}")
        return jsonify({"error": str(e)}), 500

    return jsonify({"success": True, "file": file_info}), 200
