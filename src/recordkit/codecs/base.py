from __future__ import annotations

"""Base class for value codecs."""

import abc
import typing as t

from pydantic import BaseModel, ConfigDict

__all__ = ['ValueCodec']

CodecT = t.TypeVar('CodecT', bound='ValueCodec')


class ValueCodec(BaseModel, abc.ABC):
    """An immutable value that knows its own JSON-safe projection.

    Codecs are frozen, so a record holding one can only change it by
    assigning a new value, which keeps change tracking on the record exact.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, arbitrary_types_allowed=True)

    # ``None`` on the wire decodes to a value rather than an absent field
    decodes_null: t.ClassVar[bool] = False

    @abc.abstractmethod
    def to_json(self) -> t.Any:
        """Return the JSON-safe projection of the value."""

    @classmethod
    @abc.abstractmethod
    def from_json(cls: t.Type[CodecT], value: t.Any) -> CodecT:
        """Build a value from its JSON projection.

        Raises:
            ValueError: ``value`` has the right shape but invalid content.
            TypeError: ``value`` has the wrong shape.
        """
