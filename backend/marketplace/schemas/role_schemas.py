from marshmallow import Schema, fields, validate

from marketplace.models.user_role import APP_ROLES


class RoleChangeSchema(Schema):
	user_id = fields.String(required=True, data_key="userId", validate=validate.Length(min=1, max=36))
	role = fields.String(required=True, validate=validate.OneOf(APP_ROLES))
	action = fields.String(required=True, validate=validate.OneOf(["add", "remove"]))
