from __future__ import annotations

"""RGBA color codec."""

import typing as t
from collections.abc import Mapping

from pydantic import Field

from .base import ValueCodec

__all__ = ['Color']

NativeColor = t.Union[str, t.Sequence[int]]

_COMPONENTS = ('red', 'green', 'blue', 'alpha')


class Color(ValueCodec):
    """An RGBA color with fractional components in ``[0, 1]``.

    Encodes as ``[red, green, blue, alpha]``.  Decoding also accepts a
    ``{red, green, blue, alpha}`` mapping and a three element array (opaque).
    """

    red: float = Field(0.0, ge=0.0, le=1.0)
    green: float = Field(0.0, ge=0.0, le=1.0)
    blue: float = Field(0.0, ge=0.0, le=1.0)
    alpha: float = Field(1.0, ge=0.0, le=1.0)

    @classmethod
    def with_components(cls, red: float, green: float, blue: float, alpha: float = 1.0) -> 'Color':
        return cls(red=red, green=green, blue=blue, alpha=alpha)

    @classmethod
    def from_native(cls, color: NativeColor) -> 'Color':
        """Create a color from a ``#RRGGBB[AA]`` hex string or 0-255 RGB(A) tuple."""

        if isinstance(color, str):
            text = color.strip().lstrip('#')
            if len(text) in {3, 4}:
                text = ''.join(ch * 2 for ch in text)
            if len(text) not in {6, 8}:
                raise ValueError(f'Invalid hex color: {color!r}')
            parts = [int(text[i:i + 2], 16) for i in range(0, len(text), 2)]
        else:
            parts = [int(part) for part in color]
        if len(parts) == 3:
            parts.append(255)
        if len(parts) != 4 or any(not 0 <= part <= 255 for part in parts):
            raise ValueError(f'Invalid native color: {color!r}')
        return cls(**{name: part / 255 for name, part in zip(_COMPONENTS, parts)})

    @property
    def components(self) -> t.Tuple[float, float, float, float]:
        return (self.red, self.green, self.blue, self.alpha)

    @property
    def native(self) -> t.Tuple[int, int, int, int]:
        """The color as a 0-255 RGBA tuple."""

        return tuple(round(part * 255) for part in self.components)

    @property
    def hex(self) -> str:
        """``#rrggbb`` for opaque colors, ``#rrggbbaa`` otherwise."""

        parts = self.native if self.alpha < 1.0 else self.native[:3]
        return '#' + ''.join(f'{part:02x}' for part in parts)

    def to_json(self) -> t.List[float]:
        return list(self.components)

    @classmethod
    def from_json(cls, value: t.Any) -> 'Color':
        if isinstance(value, Mapping):
            return cls.model_validate(value)
        if isinstance(value, (list, tuple)) and len(value) in {3, 4}:
            return cls(**dict(zip(_COMPONENTS, value)))
        raise TypeError(f'Expected a 3/4 element array or a mapping for Color, got {value!r}')
