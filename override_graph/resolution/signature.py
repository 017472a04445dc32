from __future__ import annotations

from ..types_defs import MethodProtocol


def is_subsignature(overriding: MethodProtocol, overridden: MethodProtocol) -> bool:
    """Tests whether `overriding` is a subsignature of `overridden`.

    This is one of the requirements for `overriding` to override
    `overridden`. Only names are compared, so parameter lists, return types and
    generic erasure are not considered. Subsignature is not symmetric in
    general; callers must keep the (overriding, overridden) argument order.
    """
    return overriding.name == overridden.name
