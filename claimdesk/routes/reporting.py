from flask import jsonify, current_app

from . import reporting_bp
from ..schemas.client_schemas import ExpirySchema
from ..services.expiry_service import ExpiryService

from claimdesk import logger


@reporting_bp.route("/insurance-expiry", methods=["GET"])
def insurance_expiry_report():
    """
    Insurance expiry report: every client with daysRemaining, isExpired and
    isExpiringSoon, sorted by daysRemaining ascending.
    :return:
    """
    try:
        report = ExpiryService.list_expiring(
            warning_days=current_app.config.get('EXPIRY_WARNING_DAYS', 30)
        )
        return jsonify(ExpirySchema(many=True).dump(report)), 200
    except Exception as e:
        logger.error(f"Error building expiry report: {str(e)}")
        return jsonify({"error": str(e)}), 500
