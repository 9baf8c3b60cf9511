import uuid
from typing import Protocol


class IIDGenerator(Protocol):
    """Strategy for assigning record identifiers."""

    def next_id(self) -> str:
        """Generates the next unique identifier."""
        ...


class UUID4Generator(IIDGenerator):
    """Random UUIDv4 identifiers, as strings."""

    def next_id(self) -> str:
        return str(uuid.uuid4())

