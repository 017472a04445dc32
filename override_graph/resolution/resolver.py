from __future__ import annotations

from loguru import logger

from .. import exceptions as ex
from .. import logs
from ..types_defs import (
    MethodProtocol,
    TypeHierarchyProtocol,
    TypeProtocol,
    VisibilityCheckerProtocol,
)
from .eligibility import can_override, is_private
from .signature import is_subsignature
from .visibility import AlwaysVisible


class OverrideResolver:
    """Answers override queries against one type hierarchy snapshot.

    The resolver holds no state between calls. Every public traversal creates
    its own visited set, so one instance can serve concurrent callers as long
    as the hierarchy is not modified while they run.
    """

    def __init__(
        self,
        hierarchy: TypeHierarchyProtocol,
        focus_type: TypeProtocol | None = None,
        visibility_checker: VisibilityCheckerProtocol | None = None,
    ):
        self._hierarchy = hierarchy
        self._focus_type = focus_type
        self._visibility_checker = visibility_checker or AlwaysVisible()

    @property
    def hierarchy(self) -> TypeHierarchyProtocol:
        return self._hierarchy

    @property
    def focus_type(self) -> TypeProtocol | None:
        return self._focus_type

    def find_declaring_method(
        self, overriding: MethodProtocol, test_visibility: bool = False
    ) -> MethodProtocol | None:
        """Finds the 'original' declaration that `overriding` descends from.

        Returns the last method of the override chain, i.e. the one that does
        not override anything itself, or None when `overriding` overrides
        nothing.
        """
        chain = self.find_override_chain(overriding, test_visibility)
        if len(chain) < 2:
            return None

        declaring = chain[-1]
        logger.debug(
            logs.DECLARING_FOUND.format(
                method=overriding.qualified_name, target=declaring.qualified_name
            )
        )
        return declaring

    def find_override_chain(
        self, method: MethodProtocol, test_visibility: bool = False
    ) -> list[MethodProtocol]:
        chain = [method]
        overridden = self.find_overridden_method(method, test_visibility)
        while overridden is not None:
            if overridden in chain:
                raise ex.ContractViolation(
                    ex.OVERRIDE_CYCLE.format(
                        method=method.qualified_name, target=overridden.qualified_name
                    )
                )
            chain.append(overridden)
            overridden = self.find_overridden_method(overridden, test_visibility)
        return chain

    def find_overridden_method(
        self, overriding: MethodProtocol, test_visibility: bool = False
    ) -> MethodProtocol | None:
        """Finds the method directly overridden by `overriding`.

        Supertypes are searched in hierarchy order, superclass before
        interfaces, each with its own visited set, so a private match that
        ends one supertype's search is found again by a later supertype that
        reaches the same ancestor. Private candidates are skipped. With
        `test_visibility` the final result must also be visible from the focus
        type, otherwise None is returned.
        """
        if not can_override(overriding):
            logger.debug(
                logs.INELIGIBLE_METHOD.format(method=overriding.qualified_name)
            )
            return None

        type_ = self._declaring_type(overriding)
        for supertype in self._hierarchy.get_supertypes(type_):
            candidate = self.find_overridden_method_in_hierarchy(supertype, overriding)
            if candidate is None:
                continue
            if is_private(candidate):
                logger.debug(
                    logs.PRIVATE_CANDIDATE_DISCARDED.format(
                        method=overriding.qualified_name,
                        target=candidate.qualified_name,
                    )
                )
                continue
            if test_visibility and not self._is_visible(candidate, type_):
                return None

            logger.debug(
                logs.OVERRIDDEN_FOUND.format(
                    method=overriding.qualified_name,
                    target=candidate.qualified_name,
                )
            )
            return candidate

        return None

    def find_overridden_method_in_hierarchy(
        self, type_: TypeProtocol, overriding: MethodProtocol
    ) -> MethodProtocol | None:
        """Finds the method overridden by `overriding` in `type_` or its supertypes.

        `type_` itself is checked first, then its supertypes depth-first,
        superclass before interfaces. When generics let two methods of one
        type be overridden at once, the first one found is returned.
        """
        return self._search_hierarchy(type_, overriding, set())

    def _search_hierarchy(
        self,
        type_: TypeProtocol,
        overriding: MethodProtocol,
        visited: set[TypeProtocol],
    ) -> MethodProtocol | None:
        # (H) supertypes pushed in reverse so pops follow recursive DFS order
        stack = [type_]
        while stack:
            current = stack.pop()
            if current in visited:
                logger.debug(
                    logs.CYCLE_GUARD_HIT.format(type_name=current.qualified_name)
                )
                continue
            visited.add(current)

            if (
                method := self.find_overridden_method_in_type(current, overriding)
            ) is not None:
                return method

            stack.extend(reversed(self._hierarchy.get_supertypes(current)))

        return None

    def find_overridden_method_in_type(
        self, overridden_type: TypeProtocol, overriding: MethodProtocol
    ) -> MethodProtocol | None:
        return next(
            (
                method
                for method in overridden_type.get_methods()
                if is_subsignature(overriding, method)
            ),
            None,
        )

    def find_overriding_method_in_type(
        self, overriding_type: TypeProtocol, overridden: MethodProtocol
    ) -> MethodProtocol | None:
        return next(
            (
                method
                for method in overriding_type.get_methods()
                if is_subsignature(method, overridden)
            ),
            None,
        )

    def is_subsignature(
        self, overriding: MethodProtocol, overridden: MethodProtocol
    ) -> bool:
        return is_subsignature(overriding, overridden)

    def _declaring_type(self, method: MethodProtocol) -> TypeProtocol:
        if (type_ := method.declaring_type) is None:
            raise ex.ContractViolation(
                ex.NO_DECLARING_TYPE.format(method=method.qualified_name)
            )
        return type_

    def _is_visible(self, method: MethodProtocol, querying_type: TypeProtocol) -> bool:
        context = self._focus_type or querying_type
        if self._visibility_checker.is_visible(method, context):
            return True
        logger.debug(
            logs.NOT_VISIBLE.format(
                target=method.qualified_name, context=context.qualified_name
            )
        )
        return False
