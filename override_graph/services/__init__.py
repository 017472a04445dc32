from typing import Protocol, runtime_checkable

from ..types_defs import PropertyDict, PropertyValue


@runtime_checkable
class IngestorProtocol(Protocol):
    def ensure_relationship_batch(
        self,
        from_spec: tuple[str, str, PropertyValue],
        rel_type: str,
        to_spec: tuple[str, str, PropertyValue],
        properties: PropertyDict | None = None,
    ) -> None: ...

    def flush_all(self) -> None: ...
