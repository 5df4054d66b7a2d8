from .service_provider import ServiceProvider
from .equipment import Equipment
from .equipment_rental import EquipmentRental, RENTAL_STATUSES
from .conversation import Conversation
from .message import Message, SENDER_TYPES
from .user_role import UserRole, APP_ROLES

__all__ = [
    "ServiceProvider",
    "Equipment",
    "EquipmentRental",
    "RENTAL_STATUSES",
    "Conversation",
    "Message",
    "SENDER_TYPES",
    "UserRole",
    "APP_ROLES",
]
