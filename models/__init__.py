"""
Imports every ORM model so that Base.metadata is complete wherever the
schema as a whole is needed, e.g. alembic autogenerate.
"""

from src.user.auth.models import RefreshToken as RefreshToken
from src.user.models import User as User
