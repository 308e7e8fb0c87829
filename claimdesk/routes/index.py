from flask import jsonify, current_app

from . import index_bp


@index_bp.route("/", methods=["GET"])
def api_index():
    """Name of the API and its main resources"""
    return jsonify({
        "message": current_app.config['APP_NAME'],
        "endpoints": [
            "/api/clients",
            "/api/clients/:id",
            "/api/clients/:clientId/records",
            "/api/records/:id",
            "/api/insurance-expiry",
            "/api/drive/status",
            "/api/drive/upload"
        ]
    }), 200
