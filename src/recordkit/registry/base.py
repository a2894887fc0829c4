from __future__ import annotations

"""Name-keyed registries that resolve entries eagerly or from dotted paths."""

import importlib
import typing as t

from recordkit.errors import UnknownTypeError
from recordkit.utils.logs import logger

RT = t.TypeVar('RT')

__all__ = ['TypeRegistry', 'lazy_import']

_imported_strings: t.Dict[str, t.Any] = {}


def lazy_import(dotted_path: str) -> t.Any:
    """Import ``pkg.module.Attribute`` once and cache the resolved object."""

    if dotted_path not in _imported_strings:
        try:
            module_path, attr_name = dotted_path.strip().rsplit('.', 1)
        except ValueError as exc:
            raise ImportError(f'"{dotted_path}" doesn\'t look like a module path') from exc

        module = importlib.import_module(module_path)
        try:
            _imported_strings[dotted_path] = getattr(module, attr_name)
        except AttributeError as exc:
            raise ImportError(
                f'Module "{module_path}" does not define a "{attr_name}" attribute'
            ) from exc
    return _imported_strings[dotted_path]


class TypeRegistry(t.Generic[RT]):
    """Mutable registry mapping names to objects.

    The registry stores two maps:

    - ``mregistry`` for objects registered ahead of time.
    - ``uninit_registry`` for dotted import paths that are resolved on demand
      and promoted into ``mregistry`` on first lookup.

    Lookups of a name in neither map raise :class:`UnknownTypeError`.
    """

    def __init__(self, name: str, verbose: t.Optional[bool] = False) -> None:
        self.name = name
        self.verbose = verbose
        self.mregistry: t.Dict[str, RT] = {}
        self.uninit_registry: t.Dict[str, str] = {}

    def _register(self, key: str, value: RT) -> None:
        """Store ``value`` under ``key``, replacing (and logging) an existing entry."""

        existing = self.mregistry.get(key)
        if existing is not None and existing is not value:
            logger.warning(f'[{self.name}] Replacing `{key}`: {existing!r} -> {value!r}')
        self.mregistry[key] = value
        self.uninit_registry.pop(key, None)
        if self.verbose:
            logger.info(f'[{self.name}] Registered: {key}')

    def __setitem__(self, key: str, value: RT) -> None:
        self._register(key, value)

    def register_path(self, key: str, path: str) -> None:
        """Register a dotted import path that is only imported when ``key`` is requested."""

        if key in self.mregistry:
            return
        self.uninit_registry[key] = path

    def unregister(self, key: str) -> t.Optional[RT]:
        """Remove ``key`` from the registry, returning the previous value if any."""

        self.uninit_registry.pop(key, None)
        return self.mregistry.pop(key, None)

    def _get(self, key: str, _raise_error: bool = True) -> t.Optional[RT]:
        if key in self.mregistry:
            return self.mregistry[key]

        if key in self.uninit_registry:
            path = self.uninit_registry.pop(key)
            try:
                obj = lazy_import(path)
            except ImportError as exc:
                raise UnknownTypeError(key, f'[{self.name}] Unable to import `{key}` from {path}: {exc}') from exc
            self.mregistry.setdefault(key, obj)
            return self.mregistry[key]

        if not _raise_error:
            return None
        raise UnknownTypeError(key, f'[{self.name}] `{key}` is not registered')

    def get(self, key: str, default: t.Optional[RT] = None) -> t.Optional[RT]:
        """Return the entry for ``key`` or ``default`` when it is not registered."""

        item = self._get(key, _raise_error=False)
        return default if item is None else item

    def __getitem__(self, key: str) -> RT:
        return self._get(key)

    def __contains__(self, key: object) -> bool:
        return key in self.mregistry or key in self.uninit_registry

    def keys(self) -> t.List[str]:
        return [*self.mregistry, *self.uninit_registry]
