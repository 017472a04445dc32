from __future__ import annotations

from ..constants import SEPARATOR_DOT, MethodFlag
from ..types_defs import MethodProtocol, TypeProtocol
from .eligibility import is_private


def package_of(type_: TypeProtocol) -> str:
    return type_.qualified_name.rpartition(SEPARATOR_DOT)[0]


class AlwaysVisible:
    def is_visible(self, method: MethodProtocol, context: TypeProtocol | None) -> bool:
        return True


class ModifierVisibilityChecker:
    """Visibility of a member seen from a subtype, decided by its modifiers.

    Public and protected methods are visible everywhere in the hierarchy. A
    private method is visible only from its own declaring type. A method with
    no access modifier is package-private and visible only from types in the
    same package as its declaring type.
    """

    def is_visible(self, method: MethodProtocol, context: TypeProtocol | None) -> bool:
        if method.flags & {MethodFlag.PUBLIC, MethodFlag.PROTECTED}:
            return True
        if context is None or (owner := method.declaring_type) is None:
            return False
        if is_private(method):
            return owner == context
        return package_of(owner) == package_of(context)
