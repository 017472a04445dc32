from .eligibility import can_override, is_private, is_static
from .ingest import collect_method_overrides, process_all_method_overrides
from .resolver import OverrideResolver
from .signature import is_subsignature
from .visibility import AlwaysVisible, ModifierVisibilityChecker

__all__ = [
    "AlwaysVisible",
    "ModifierVisibilityChecker",
    "OverrideResolver",
    "can_override",
    "collect_method_overrides",
    "is_private",
    "is_static",
    "is_subsignature",
    "process_all_method_overrides",
]
