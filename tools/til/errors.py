"""Exceptions raised by the TIL repository layer."""


class TilError(Exception):
    """Base class for TIL engine errors."""


class EntityNotFoundError(TilError):
    def __init__(self, kind: str, entity_id: str):
        super().__init__(f"{kind} not found: {entity_id}")
        self.kind = kind
        self.entity_id = entity_id


class ImmutableFieldError(TilError):
    def __init__(self, field: str):
        super().__init__(f"Field cannot be changed after creation: {field}")
        self.field = field
