from dataclasses import dataclass, field
from typing import TypeVar

from pydantic import TypeAdapter

from keyclaim.serializers.serializer import Serializer
from keyclaim.store_state import StoreState

T = TypeVar("T")


@dataclass
class PydanticSerializer(Serializer[T]):
    type_adapter: TypeAdapter[T]
    indent: int | None = None

    def serialize(self, obj: T) -> bytes:
        result = self.type_adapter.dump_json(obj, indent=self.indent)
        return result

    def deserialize(self, data: bytes) -> T:
        # pydantic.ValidationError is a ValueError
        result = self.type_adapter.validate_json(data)
        return result


@dataclass
class StoreStateSerializer(PydanticSerializer[StoreState]):
    """Human readable JSON for the full store state"""

    type_adapter: TypeAdapter[StoreState] = field(
        default_factory=lambda: TypeAdapter(StoreState)
    )
    indent: int | None = 2
