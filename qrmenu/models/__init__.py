from .base import Base
from .user import User
from .cafe import Cafe
from .category import Category
from .menu_item import MenuItem
from .activity_log import ActivityLog
