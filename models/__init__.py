from .db import db
from .user import User, Role, user_roles
from .audit_log import AuditLog
from .session import Session
from .service import Service
from .availability import Availability
from .booking import Booking, BookingStatus
from .review import Review
