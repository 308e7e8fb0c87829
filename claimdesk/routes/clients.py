# routes/clients.py
from flask import jsonify, request

from . import client_bp
from ..exceptions import NotFoundError
from ..schemas.client_schemas import ClientSchema
from ..schemas.record_schemas import RecordSchema
from ..services.client_service import ClientService
from ..services.record_service import RecordService
from ..signals import notify_data_changed
from ..utils.helpers import parse_bool
from ..validation import validate_client_input, validate_record_input, first_error_message

from claimdesk import logger


@client_bp.route("", methods=["GET"])
def list_clients():
    """
    Get all clients ordered by name.

    Query params:
      q: optional search text, matched against name and phone; results are
         ranked starts-with, then contains, then phone-only matches.
    """
    try:
        clients = ClientService.list_clients(request.args.get('q'))
        return jsonify(ClientSchema(many=True).dump(clients)), 200
    except Exception as e:
        logger.error(f"Error listing clients: {str(e)}")
        return jsonify({"error": str(e)}), 500


@client_bp.route("/<client_id>", methods=["GET"])
def get_client(client_id):
    """
    Get a single client with its claim records ordered by claim date.

    Query params:
      aggregate: when 'true', records of every client row with the same
                 name and phone are merged into the response.
    Responses:
      200: client fields plus "records"
      404: client not found
    """
    aggregate = parse_bool(request.args.get('aggregate'))
    try:
        client, records = ClientService.get_client_detail(client_id, aggregate=aggregate)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception as e:
        logger.error(f"Error fetching client {client_id}: {str(e)}")
        return jsonify({"error": str(e)}), 500

    payload = ClientSchema().dump(client)
    payload['records'] = RecordSchema(many=True).dump(records)
    return jsonify(payload), 200


@client_bp.route("", methods=["POST"])
def create_client():
    """
    Create a new client.

    The phone number may contain separators ('123-456-7890'); it is stored as
    its 10 digits. Returns 400 when name is blank or the phone is not 10 digits.
    """
    validated_data, errors = validate_client_input(request.get_json(silent=True))
    if errors:
        logger.error(f"Validation error: {errors}")
        return jsonify({"error": first_error_message(errors), "fields": errors}), 400

    try:
        client = ClientService.create_client(validated_data)
    except Exception as e:
        logger.error(f"Error creating client: {str(e)}")
        return jsonify({"error": str(e)}), 500

    notify_data_changed('client.created', client.id)
    return jsonify(ClientSchema().dump(client)), 201


@client_bp.route("/<client_id>", methods=["PUT"])
def update_client(client_id):
    """Replace a client's fields. Same validation as creation."""
    validated_data, errors = validate_client_input(request.get_json(silent=True))
    if errors:
        logger.error(f"Validation error: {errors}")
        return jsonify({"error": first_error_message(errors), "fields": errors}), 400

    try:
        client = ClientService.update_client(client_id, validated_data)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception as e:
        logger.error(f"Error updating client {client_id}: {str(e)}")
        return jsonify({"error": str(e)}), 500

    notify_data_changed('client.updated', client.id)
    return jsonify(ClientSchema().dump(client)), 200


@client_bp.route("/<client_id>", methods=["DELETE"])
def delete_client(client_id):
    """Delete a client together with all of its claim records."""
    try:
        removed = ClientService.delete_client(client_id)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception as e:
        logger.error(f"Error deleting client {client_id}: {str(e)}")
        return jsonify({"error": str(e)}), 500

    notify_data_changed('client.deleted', client_id)
    return jsonify({"message": "Client deleted", "recordsDeleted": removed}), 200


@client_bp.route("/<client_id>/records", methods=["POST"])
def add_record(client_id):
    """
    Add a claim record for a client.

    JSON Payload (example):
    {
      "claimNumber": "CLM-1001",
      "claimAmount": 2500,
      "claimDate": "2026-03-14",
      "status": "Pending",
      "recordType": "Annual",
      "description": "Windscreen"
    }
    claimNumber and recordType are required; claimDate defaults to today.
    """
    validated_data, errors = validate_record_input(request.get_json(silent=True))
    if errors:
        logger.error(f"Validation error: {errors}")
        return jsonify({"error": first_error_message(errors), "fields": errors}), 400

    try:
        record = RecordService.add_record(client_id, validated_data)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception as e:
        logger.error(f"Error adding record for client {client_id}: {str(e)}")
        return jsonify({"error": str(e)}), 500

    notify_data_changed('record.created', record.id)
    return jsonify(RecordSchema().dump(record)), 201
