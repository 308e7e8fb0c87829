from marshmallow import Schema, fields, validate, pre_load, EXCLUDE

from claimdesk.models.record import ClaimStatus, RecordType


class RecordSchema(Schema):
    """
    Represents a claim record attached to a client.
    claimDate defaults to the day the record is created.
    """

    class Meta:
        unknown = EXCLUDE

    id = fields.String(dump_only=True)
    client_id = fields.String(data_key='clientId', dump_only=True)
    claim_number = fields.String(
        data_key='claimNumber',
        required=True,
        validate=validate.Length(min=1, max=100, error="Claim number is required"),
        error_messages={"required": "Claim number is required", "null": "Claim number is required"}
    )
    claim_amount = fields.Float(data_key='claimAmount', load_default=0)
    claim_date = fields.Date(data_key='claimDate', allow_none=True, load_default=None)
    status = fields.String(
        load_default=ClaimStatus.PENDING.value,
        validate=validate.OneOf([status.value for status in ClaimStatus])
    )
    record_type = fields.String(
        data_key='recordType',
        required=True,
        validate=validate.OneOf(
            [record_type.value for record_type in RecordType],
            error="Record type must be one of: {choices}"
        ),
        error_messages={"required": "Record type is required", "null": "Record type is required"}
    )
    description = fields.String(allow_none=True, load_default='')
    created_at = fields.DateTime(data_key='createdAt', dump_only=True)

    @pre_load
    def drop_blank_values(self, data, **kwargs):
        """Blank optional values fall back to their defaults"""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for key in ('claimAmount', 'claimDate', 'status'):
            if data.get(key) in ('', None):
                data.pop(key, None)
        if isinstance(data.get('claimNumber'), str):
            data['claimNumber'] = data['claimNumber'].strip()
        if data.get('recordType') == '':
            data.pop('recordType')
        return data
