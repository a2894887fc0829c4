from __future__ import annotations

"""Custom property descriptors."""

import threading
import typing as t

CPR = t.TypeVar('CPR')

__all__ = ['classproperty']


class classproperty(property):
    """Creates a read-only class-level property.

    Acts like a combination of ``@classmethod`` and ``@property``: the getter
    receives the class, and the value is reachable from the class and from its
    instances.

    With ``lazy=True`` the value is computed once per class and cached, so a
    subclass gets its own value rather than inheriting the parent's.

    Examples:
        >>> class Demo:
        ...     @classproperty(lazy=True)
        ...     def label(cls):
        ...         return cls.__name__.lower()
        ...
        >>> Demo.label
        'demo'
    """

    def __new__(cls, fget=None, doc=None, lazy=False):
        if fget is None:
            def wrapper(func):
                return cls(func, lazy=lazy)

            return wrapper

        return super().__new__(cls)

    def __init__(self, fget: t.Callable[[t.Type[t.Any]], CPR], doc: t.Optional[str] = None, lazy: bool = False) -> None:
        self._lazy = lazy
        if lazy:
            self._lock = threading.RLock()
            self._cache: t.Dict[t.Type[t.Any], CPR] = {}
        if isinstance(fget, classmethod):
            fget = fget.__func__

        super().__init__(fget=fget, doc=doc)
        if doc is not None:
            self.__doc__ = doc

    def __get__(self, obj: t.Any, objtype: t.Optional[t.Type[t.Any]] = None) -> CPR:
        if objtype is None:
            objtype = type(obj)
        if not self._lazy:
            return self.fget(objtype)
        with self._lock:
            if objtype not in self._cache:
                self._cache[objtype] = self.fget(objtype)
            return self._cache[objtype]

    def getter(self, fget):
        raise NotImplementedError('classproperty only supports the getter passed at creation')

    def setter(self, fset):
        raise NotImplementedError('classproperty can only be read-only')

    def deleter(self, fdel):
        raise NotImplementedError('classproperty can only be read-only')
