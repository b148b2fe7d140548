"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class NotFoundError(DomainException):
    """Referenced house, room, tenant or payment does not exist"""

    def __init__(self, entity: str, entity_id: int):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class ValidationError(DomainException):
    """Required field missing or malformed, or a write would break an invariant"""

    pass


class StoreUnavailableError(DomainException):
    """Underlying storage could not be reached or failed mid-operation"""

    pass
