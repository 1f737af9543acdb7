from .health import health_bp
from .auth import auth_bp
from .users import users_bp
from .products import products_bp
from .booking import booking_bp
