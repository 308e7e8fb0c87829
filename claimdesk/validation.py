from marshmallow import ValidationError
from .schemas.client_schemas import ClientSchema
from .schemas.record_schemas import RecordSchema


def validate_client_input(data):
    schema = ClientSchema()
    try:
        validated_data = schema.load(data or {})
        return validated_data, None
    except ValidationError as err:
        return None, err.messages


def validate_record_input(data):
    schema = RecordSchema()
    try:
        validated_data = schema.load(data or {})
        return validated_data, None
    except ValidationError as err:
        return None, err.messages


def first_error_message(messages):
    """Pick a single human readable message out of a marshmallow error map"""
    if isinstance(messages, dict):
        for value in messages.values():
            return first_error_message(value)
    if isinstance(messages, list) and messages:
        return first_error_message(messages[0])
    return str(messages)
