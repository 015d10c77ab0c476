"""ORM models; importing this package registers every table on ``Base.metadata``."""

from .brand import Brand
from .department import Department
from .equipment import Equipment
from .user import User

__all__ = ["Brand", "Department", "Equipment", "User"]
