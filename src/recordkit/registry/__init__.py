"""Registries shared across recordkit."""

from .base import TypeRegistry, lazy_import
from .records import (
    get_record_class,
    get_record_registry,
    register_record,
    register_record_path,
    unregister_record,
)

__all__ = [
    'TypeRegistry',
    'get_record_class',
    'get_record_registry',
    'lazy_import',
    'register_record',
    'register_record_path',
    'unregister_record',
]
