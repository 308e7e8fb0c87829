from marshmallow import Schema, fields, validate, validates, ValidationError, pre_load, EXCLUDE

from claimdesk.utils.helpers import normalize_phone

PHONE_LENGTH = 10

DATE_FIELDS = ('startDate', 'expiryDate')
AMOUNT_FIELDS = ('premium', 'premiumPaid')


class ClientSchema(Schema):
    """
    Schema for Client serialization/deserialization.
    JSON keys are camelCase; phone numbers are reduced to digits before validation.
    """

    class Meta:
        unknown = EXCLUDE

    id = fields.String(dump_only=True)
    name = fields.String(
        required=True,
        validate=validate.Length(min=1, max=200, error="Name is required"),
        error_messages={"required": "Name is required", "null": "Name is required"}
    )
    email = fields.String(allow_none=True, load_default='', validate=validate.Length(max=200))
    phone = fields.String(
        required=True,
        error_messages={
            "required": "Phone number is required and must be 10 digits",
            "null": "Phone number is required and must be 10 digits"
        }
    )

    customer_id_no = fields.String(data_key='customerIdNo', allow_none=True, load_default='')
    vehicle_number_plate = fields.String(data_key='vehicleNumberPlate', allow_none=True, load_default='')
    company = fields.String(allow_none=True, load_default='')
    insurance_category = fields.String(data_key='insuranceCategory', allow_none=True, load_default='')
    insurance_type = fields.String(data_key='insuranceType', allow_none=True, load_default='')
    business_type = fields.String(data_key='businessType', allow_none=True, load_default='')

    premium = fields.Float(load_default=0, validate=validate.Range(min=0, error="Premium cannot be negative"))
    premium_paid = fields.Float(
        data_key='premiumPaid',
        load_default=0,
        validate=validate.Range(min=0, error="Premium paid cannot be negative")
    )
    balance = fields.Float(dump_only=True)

    start_date = fields.Date(data_key='startDate', allow_none=True, load_default=None)
    expiry_date = fields.Date(data_key='expiryDate', allow_none=True, load_default=None)
    created_at = fields.DateTime(data_key='createdAt', dump_only=True)

    @pre_load
    def clean_input(self, data, **kwargs):
        """Normalize phone, trim name, and treat blank dates/amounts as absent"""
        if not isinstance(data, dict):
            return data
        data = dict(data)

        if data.get('phone') is not None:
            data['phone'] = normalize_phone(data['phone'])

        if isinstance(data.get('name'), str):
            data['name'] = data['name'].strip()

        for key in DATE_FIELDS:
            if isinstance(data.get(key), str) and not data[key].strip():
                data[key] = None

        for key in AMOUNT_FIELDS:
            if data.get(key) in ('', None):
                data.pop(key, None)

        return data

    @validates('phone')
    def validate_phone(self, value, **kwargs):
        """Validate phone number format"""
        if len(value) != PHONE_LENGTH or not value.isdigit():
            raise ValidationError("Phone number is required and must be 10 digits")


class ExpirySchema(Schema):
    """Client fields shown on the insurance expiry report plus the derived status."""
    id = fields.String()
    name = fields.String()
    vehicle_number_plate = fields.String(data_key='vehicleNumberPlate')
    insurance_category = fields.String(data_key='insuranceCategory')
    insurance_type = fields.String(data_key='insuranceType')
    company = fields.String()
    expiry_date = fields.Date(data_key='expiryDate', allow_none=True)
    days_remaining = fields.Integer(data_key='daysRemaining')
    is_expired = fields.Boolean(data_key='isExpired')
    is_expiring_soon = fields.Boolean(data_key='isExpiringSoon')
