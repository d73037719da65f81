# Elite Vinewood Auto: database models
# Import all models here for SQLAlchemy discovery

from dealership.models.vehicle import Vehicle                  # noqa
from dealership.models.category import Category                # noqa
from dealership.models.particularity import Particularity      # noqa
from dealership.models.order import Order, OrderItem           # noqa
from dealership.models.banned_unique_id import BannedUniqueId  # noqa
from dealership.models.admin_user import AdminUser             # noqa
from dealership.models.announcement import Announcement        # noqa
from dealership.models.activity_log import ActivityLog         # noqa
from dealership.models.audit_log import AuditLog               # noqa
