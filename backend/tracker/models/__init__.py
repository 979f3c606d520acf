"""
ORM models. Importing this package registers every table on Base.metadata.
"""

from tracker.models.user import PasswordResetToken, User
from tracker.models.profile import Profile
from tracker.models.push_subscription import PushSubscription

__all__ = ["User", "PasswordResetToken", "Profile", "PushSubscription"]
