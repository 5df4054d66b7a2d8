from marketplace.extensions import db
from marketplace.utils.ids import new_uuid


APP_ROLES = ("admin", "customer", "service_provider")


class UserRole(db.Model):
    __tablename__ = "user_roles"

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    user_id = db.Column(db.String(36), nullable=False, index=True)
    role = db.Column(db.String(30), nullable=False)

    __table_args__ = (
        db.UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),
    )

    def __repr__(self) -> str:
        return f"<UserRole user={self.user_id} role={self.role}>"
