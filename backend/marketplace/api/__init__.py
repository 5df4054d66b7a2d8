from .rental_routes import bp as rentals_bp
from .equipment_routes import bp as equipment_bp
from .provider_routes import bp as providers_bp
from .chat_routes import bp as chat_bp
from .admin_routes import bp as admin_bp

__all__ = [
    "rentals_bp",
    "equipment_bp",
    "providers_bp",
    "chat_bp",
    "admin_bp",
]
