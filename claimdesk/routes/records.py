# routes/records.py
from flask import jsonify

from . import records_bp
from ..exceptions import NotFoundError
from ..services.record_service import RecordService
from ..signals import notify_data_changed

from claimdesk import logger


@records_bp.route("/<record_id>", methods=["DELETE"])
def delete_record(record_id):
    """Delete a single claim record."""
    try:
        RecordService.delete_record(record_id)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception as e:
        logger.error(f"Error deleting record {record_id}: {str(e)}")
        return jsonify({"error": str(e)}), 500

    notify_data_changed('record.deleted', record_id)
    return jsonify({"message": "Record deleted"}), 200
