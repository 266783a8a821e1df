from pricing.stores.django_store import DjangoRuleTableStore
from pricing.stores.interfaces import RuleTableStore

__all__ = ["DjangoRuleTableStore", "RuleTableStore"]
