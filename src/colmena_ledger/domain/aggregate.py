"""Aggregate Root base class with versioning for optimistic concurrency."""

from __future__ import annotations

from typing import TYPE_CHECKING, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, PrivateAttr
from pydantic_core import PydanticUndefined

if TYPE_CHECKING:
    from ..primitives.id_generator import IIDGenerator

ID = TypeVar("ID", str, int)


class AggregateRoot(BaseModel, Generic[ID]):
    """Base class for every persisted ledger record.

    Generic over ``ID``. Carries a ``version`` that the stores compare on
    save, so a record read by two workflows can only be written back by one
    of them.

    Usage::

        class Container(AggregateRoot[str]):
            status: ContainerStatus = ContainerStatus.RECOVERED

        # ID generated at construction time
        container = Container(id_generator=generator, created_by="u-1", ...)

        # ID provided explicitly
        container = Container(id="c-1", created_by="u-1", ...)
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True,
        populate_by_name=True,
    )

    id: ID
    _version: int = PrivateAttr(default=0)

    def __init__(
        self, id_generator: IIDGenerator | None = None, **data: object
    ) -> None:
        """
        Initialize a record.

        Args:
            id_generator: Optional ID generator strategy. If provided and 'id'
                         is not in data, ID will be auto-generated.
            **data: Record attributes. Must include 'id' OR have
                id_generator provided.

        Raises:
            ValueError: If neither 'id' is provided nor id_generator is supplied.
        """
        if "id" not in data and id_generator is not None:
            data = {**data, "id": id_generator.next_id()}
        elif "id" not in data:
            field_info = self.__class__.model_fields.get("id")
            has_default = field_info and (
                (field_info.default is not PydanticUndefined)
                or (field_info.default_factory is not None)
            )
            if not has_default:
                raise ValueError(
                    "Either 'id' must be provided or 'id_generator' must be supplied "
                    "to auto-generate the ID at initialization time."
                )

        super().__init__(**data)

    @property
    def version(self) -> int:
        """Read-only version, managed by the persistence layer."""
        return self._version

    def set_version(self, version: int) -> None:
        """Record the version assigned by a store after a successful save."""
        self._version = version
