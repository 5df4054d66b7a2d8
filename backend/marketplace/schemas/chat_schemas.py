from marshmallow import fields, validate, EXCLUDE

from marketplace.extensions.ma import ma


class MessageCreateSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    message = fields.String(required=True)


class ConversationCreateSchema(ma.Schema):
    """
    Customer starting a chat with a provider. `providerId` is the
    provider's user identity.
    """

    class Meta:
        unknown = EXCLUDE

    provider_id = fields.String(required=True, data_key="providerId", validate=validate.Length(min=1, max=36))
    provider_name = fields.String(required=True, data_key="providerName", validate=validate.Length(min=1, max=200))
    customer_name = fields.String(required=True, data_key="customerName", validate=validate.Length(min=1, max=200))
    message = fields.String(required=True)
