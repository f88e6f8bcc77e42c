from .user import UserModel
from .complaint import ComplaintModel

__all__ = [
    "UserModel",
    "ComplaintModel",
]
