"""
The base class for marshalled records.
"""

import contextlib
import typing as t

from pydantic import BaseModel, ConfigDict, PrivateAttr

from recordkit.fields import FieldSpec, build_field_specs, iter_field_records
from recordkit.registry.records import register_record
from recordkit.utils.properties import classproperty

if t.TYPE_CHECKING:
    from recordkit.engine import DecodeReport

RecordT = t.TypeVar('RecordT', bound='Record')

__all__ = ['Record']


class Record(BaseModel):
    """
    A typed object that marshals to and from a JSON-compatible dictionary.

    Every declared field is a saved key and must have a default.  Subclasses
    are registered under :attr:`record_name` (their class name unless set) so
    that a stored ``representedClassName`` can be turned back into the right
    type.

    Class attributes:
        record_version: The schema version written under ``"version"``.
        record_name: The name written under ``"representedClassName"``.

    Example:
        >>> import typing as t
        >>> from recordkit import Record, RecordField
        >>> class Person(Record):
        ...     record_version: t.ClassVar[int] = 2
        ...     name: str = ''
        ...     nickname: t.Optional[str] = RecordField(None, legacy_keys=['alias'])
        ...
        >>> person = Person.from_dict({'name': 'Ada', 'alias': 'Countess'})
        >>> person.nickname
        'Countess'
        >>> person.dictionary
        {'name': 'Ada', 'nickname': 'Countess', 'version': 2}
    """

    model_config = ConfigDict(extra='ignore', populate_by_name=True, arbitrary_types_allowed=True)

    record_version: t.ClassVar[int] = 0
    record_name: t.ClassVar[t.Optional[str]] = None

    _version: int = PrivateAttr(0)
    _has_changes: bool = PrivateAttr(False)
    _tracking_suspended: int = PrivateAttr(0)
    _loaded_version: t.Optional[int] = PrivateAttr(None)
    _decode_report: t.Optional['DecodeReport'] = PrivateAttr(None)

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: t.Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        if 'record_name' not in cls.__dict__:
            cls.record_name = cls.__name__
        if cls.__pydantic_complete__:
            # Fails class creation for unsupported field declarations
            cls.field_specs
        register_record(cls)

    @classproperty(lazy=True)
    def field_specs(cls) -> t.Tuple[FieldSpec, ...]:
        """The marshalling specs of the saved keys, in declaration order."""

        if not cls.__pydantic_complete__:
            cls.model_rebuild()
        return build_field_specs(cls)

    @classproperty
    def saved_keys(cls) -> t.Tuple[str, ...]:
        return tuple(spec.name for spec in cls.field_specs)

    @classmethod
    def get_field_spec(cls, name: str) -> FieldSpec:
        for spec in cls.field_specs:
            if spec.name == name:
                return spec
        raise KeyError(f'{cls.__name__} has no saved key `{name}`')

    def model_post_init(self, __context: t.Any) -> None:
        self._version = type(self).record_version
        explicit = {name: getattr(self, name) for name in self.model_fields_set}
        with self.changes_suspended():
            self.load_default_values()
            for name, value in explicit.items():
                setattr(self, name, value)
        self._has_changes = False

    def __setattr__(self, name: str, value: t.Any) -> None:
        super().__setattr__(name, value)
        if name in type(self).model_fields and not self._tracking_suspended:
            self._has_changes = True

    """
    Migration Hooks
    """

    def load_default_values(self) -> None:
        """
        Set up initial values beyond the declared field defaults.

        Called once for every new record, including those created by decode,
        before any input is applied.  Values given to the constructor are
        re-applied afterwards.
        """
        pass

    def set_value_for_key(self, key: str, old_key: str, data: t.Mapping[str, t.Any]) -> None:
        """
        Migrate the value stored under the legacy ``old_key`` into the saved
        key ``key``.

        Only called while decoding, when ``key`` is missing from ``data`` but
        ``old_key`` is present.  The default decodes ``data[old_key]`` as the
        current field type; override to reshape the old value.
        """
        from recordkit.engine import get_marshaller

        get_marshaller().assign(self, self.get_field_spec(key), data[old_key], path=old_key)

    """
    Change Tracking
    """

    @contextlib.contextmanager
    def changes_suspended(self) -> t.Iterator['Record']:
        """Assignments inside the block do not mark the record as changed."""

        self._tracking_suspended += 1
        try:
            yield self
        finally:
            self._tracking_suspended -= 1

    @property
    def has_changes(self) -> bool:
        return self._has_changes

    @has_changes.setter
    def has_changes(self, value: bool) -> None:
        self._has_changes = bool(value)

    @property
    def has_any_changes(self) -> bool:
        """Whether this record or any record nested in it has changes."""

        return any(record._has_changes for record in self.iter_records())

    def clear_changes(self) -> None:
        """Reset ``has_changes`` on this record and every nested record."""

        for record in self.iter_records():
            record._has_changes = False

    """
    Metadata
    """

    @property
    def version(self) -> int:
        return self._version

    @version.setter
    def version(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError(f'version must be a non-negative int, got {value!r}')
        self._version = value

    @property
    def loaded_version(self) -> t.Optional[int]:
        """The ``version`` read by the last decode into this record, if any."""

        return self._loaded_version

    @property
    def represented_class_name(self) -> str:
        return type(self).record_name or type(self).__name__

    @property
    def decode_report(self) -> 'DecodeReport':
        if self._decode_report is None:
            from recordkit.engine import DecodeReport
            self._decode_report = DecodeReport()
        return self._decode_report

    """
    Equality & Traversal
    """

    def is_equal_to_object(self, other: t.Any) -> bool:
        """Same concrete type and deep-equal values for every saved key."""

        if self is other:
            return True
        if type(self) is not type(other):
            return False
        from recordkit.engine import get_marshaller
        marshaller = get_marshaller()
        return all(
            marshaller.values_equal(spec.type, getattr(self, spec.name), getattr(other, spec.name))
            for spec in self.field_specs
        )

    def __eq__(self, other: t.Any) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return self.is_equal_to_object(other)

    def iter_records(self) -> t.Iterator['Record']:
        """Yield this record and every nested record, depth-first pre-order."""

        yield self
        for spec in self.field_specs:
            for child in iter_field_records(spec.type, getattr(self, spec.name)):
                yield from child.iter_records()

    def enumerate_objects(self, visitor: t.Callable[['Record'], t.Any]) -> bool:
        """
        Call ``visitor`` on each record from :meth:`iter_records` until it
        returns something truthy.

        Returns:
            ``True`` if the visitor stopped the traversal.
        """

        for record in self.iter_records():
            if visitor(record):
                return True
        return False

    """
    Marshalling
    """

    @property
    def dictionary(self) -> t.Dict[str, t.Any]:
        """The encoded form of the record.  Assigning a mapping loads it in place."""

        from recordkit.engine import get_marshaller
        return get_marshaller().encode(self)

    @dictionary.setter
    def dictionary(self, data: t.Mapping[str, t.Any]) -> None:
        from recordkit.engine import get_marshaller
        get_marshaller().load(self, data)

    def to_dict(self, polymorphic: t.Optional[bool] = None) -> t.Dict[str, t.Any]:
        from recordkit.engine import get_marshaller
        return get_marshaller().encode(self, polymorphic=polymorphic)

    @classmethod
    def from_dict(
        cls: t.Type[RecordT],
        data: t.Mapping[str, t.Any],
        report: t.Optional['DecodeReport'] = None,
    ) -> RecordT:
        from recordkit.engine import get_marshaller
        return get_marshaller().decode(data, cls, report=report)

    def dumps(self, polymorphic: t.Optional[bool] = None) -> bytes:
        from recordkit.engine import get_marshaller
        return get_marshaller().dumps(self, polymorphic=polymorphic)

    @classmethod
    def loads(
        cls: t.Type[RecordT],
        buffer: t.Union[str, bytes],
        report: t.Optional['DecodeReport'] = None,
    ) -> RecordT:
        from recordkit.engine import get_marshaller
        return get_marshaller().loads(buffer, cls, report=report)
