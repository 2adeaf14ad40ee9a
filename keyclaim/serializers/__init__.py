"""
Serializers package for keyclaim.

This package contains serializer implementations for converting store state
to and from the bytes written to the backing medium.
"""

from .serializer import Serializer, get_default_serializer
from .pydantic_serializer import PydanticSerializer, StoreStateSerializer

__all__ = [
    'Serializer',
    'get_default_serializer',
    'PydanticSerializer',
    'StoreStateSerializer',
]
