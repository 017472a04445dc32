from __future__ import annotations

from ..constants import MethodFlag
from ..types_defs import MethodProtocol


def is_private(method: MethodProtocol) -> bool:
    return MethodFlag.PRIVATE in method.flags


def is_static(method: MethodProtocol) -> bool:
    return MethodFlag.STATIC in method.flags


def can_override(method: MethodProtocol) -> bool:
    """Private, static and constructor methods never take part in overriding."""
    return not (is_private(method) or is_static(method) or method.is_constructor)
