# CRUD operations package

from .plan import plan_crud
from .subscription import subscription_crud

__all__ = [
    'plan_crud',
    'subscription_crud'
]
