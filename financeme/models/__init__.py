"""
Modelli del database

Import esplicito dei modelli per assicurare che siano registrati nei metadata
quando l'app chiama db.create_all().
"""
from financeme.models.group import Group, GroupInvite, GroupMember  # noqa: F401
from financeme.models.category import Category  # noqa: F401
from financeme.models.credit_card import CreditCard  # noqa: F401
from financeme.models.transaction import Transaction  # noqa: F401
from financeme.models.appointment import Appointment  # noqa: F401
from financeme.models.budget import Budget  # noqa: F401
from financeme.models.goal import Goal  # noqa: F401
from financeme.models.user_config import UserConfig, SpendingNotification  # noqa: F401
