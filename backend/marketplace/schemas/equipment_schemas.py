from marshmallow import fields, validate, EXCLUDE

from marketplace.extensions.ma import ma


class EquipmentSchema(ma.Schema):
    """
    Payload for creating equipment. `provider_id` defaults to the
    caller's own provider profile in the service.
    """

    class Meta:
        unknown = EXCLUDE

    name = fields.String(
        required=True,
        validate=validate.Length(min=1, max=200, error="Name must be between 1 and 200 characters"),
    )
    description = fields.String(
        required=False,
        allow_none=True,
        validate=validate.Length(max=2000, error="Description must be less than 2000 characters"),
    )
    price_per_day = fields.Decimal(
        required=True,
        as_string=True,
        validate=validate.Range(
            min=0,
            max=99999,
            min_inclusive=False,
            error="Price must be positive and at most 99999",
        ),
    )
    image_url = fields.Url(
        required=False,
        allow_none=True,
        validate=validate.Length(max=500),
    )
    provider_id = fields.String(required=False, allow_none=True)
    is_active = fields.Boolean(required=False)
    is_available = fields.Boolean(required=False)


class EquipmentUpdateSchema(EquipmentSchema):
    name = fields.String(
        required=False,
        validate=validate.Length(min=1, max=200, error="Name must be between 1 and 200 characters"),
    )
    price_per_day = fields.Decimal(
        required=False,
        as_string=True,
        validate=validate.Range(
            min=0,
            max=99999,
            min_inclusive=False,
            error="Price must be positive and at most 99999",
        ),
    )
