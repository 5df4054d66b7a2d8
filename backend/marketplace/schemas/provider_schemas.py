from marshmallow import fields, validate, pre_load, EXCLUDE

from marketplace.extensions.ma import ma


def _trimmed(data: dict, *names: str) -> dict:
    out = dict(data)
    for name in names:
        value = out.get(name)
        if isinstance(value, str):
            out[name] = value.strip()
    return out


class ProviderRegisterSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    business_name = fields.String(
        required=True,
        data_key="businessName",
        validate=[
            validate.Length(min=2, max=200, error="Business name must be between 2 and 200 characters"),
            validate.Regexp(r"^[a-zA-Z0-9\s\-'&.]+$", error="Business name contains invalid characters"),
        ],
    )
    description = fields.String(
        required=False,
        allow_none=True,
        validate=validate.Length(min=10, max=2000, error="Description must be between 10 and 2000 characters"),
    )
    address = fields.String(
        required=True,
        validate=validate.Length(min=5, max=500, error="Address must be between 5 and 500 characters"),
    )
    zip_code = fields.String(
        required=True,
        data_key="zipCode",
        validate=[
            validate.Length(min=4, max=20, error="Zip code must be between 4 and 20 characters"),
            validate.Regexp(r"^[a-zA-Z0-9\s\-]+$", error="Invalid zip code format"),
        ],
    )
    phone = fields.String(
        required=False,
        allow_none=True,
        validate=[
            validate.Length(min=10, max=20, error="Phone number must be between 10 and 20 characters"),
            validate.Regexp(r"^[\d\s\-+().]+$", error="Invalid phone number format"),
        ],
    )

    @pre_load
    def strip_strings(self, data, **kwargs):
        return _trimmed(data, "businessName", "description", "address", "zipCode", "phone")
