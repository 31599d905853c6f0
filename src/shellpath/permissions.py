"""Octal permission triplets and bit toggling.

The mode text printed by ``stat -c '%a'`` is parsed into a
:class:`PermissionTriplet`, one permission bit is set or cleared across the
owner/group/other digits, and the result is serialized back for ``chmod``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag

__all__ = ["PermissionBit", "PermissionTriplet"]

_OCTAL_DIGITS = frozenset("01234567")


class PermissionBit(IntFlag):
    """A single rwx permission bit within one octal digit."""

    EXECUTE = 0x1
    WRITE = 0x2
    READ = 0x4


@dataclass(frozen=True)
class PermissionTriplet:
    """Owner, group and other permission digits.

    Attributes:
        owner: Owner digit, 0-7.
        group: Group digit, 0-7.
        other: Other digit, 0-7.
    """

    owner: int
    group: int
    other: int

    def __post_init__(self) -> None:
        """Validate invariants."""
        for digit in self.digits:
            if not 0 <= digit <= 7:
                raise ValueError(f"Permission digit out of range: {digit}")

    @classmethod
    def parse(cls, text: str) -> PermissionTriplet | None:
        """Parse three octal digits.

        Args:
            text: Mode text such as ``"755"``.

        Returns:
            The triplet, or None unless text is exactly three octal digits.
        """
        if len(text) != 3 or not set(text) <= _OCTAL_DIGITS:
            return None
        return cls(int(text[0]), int(text[1]), int(text[2]))

    @classmethod
    def from_mode(cls, mode: int) -> PermissionTriplet:
        """Build a triplet from the low nine bits of a numeric mode."""
        return cls((mode >> 6) & 0o7, (mode >> 3) & 0o7, mode & 0o7)

    @property
    def digits(self) -> tuple[int, int, int]:
        return self.owner, self.group, self.other

    def toggle(self, bit: PermissionBit, enable: bool, owner_only: bool) -> PermissionTriplet:
        """Set or clear a permission bit.

        When enabling, the bit is set on the owner digit and, unless
        ``owner_only`` is true, on the group and other digits too. Every
        digit that is not set is cleared, so enabling with ``owner_only``
        leaves the bit on the owner alone.

        Args:
            bit: The permission bit to change.
            enable: True to set the bit, False to clear it.
            owner_only: Restrict setting to the owner digit.

        Returns:
            A new triplet.
        """
        mask = int(bit)
        toggled = []
        for index, digit in enumerate(self.digits):
            if enable and (not owner_only or index == 0):
                digit |= mask
            else:
                digit &= ~mask & 0o7
            toggled.append(digit)
        return PermissionTriplet(*toggled)

    def to_mode(self) -> int:
        return (self.owner << 6) | (self.group << 3) | self.other

    def __str__(self) -> str:
        return f"{self.owner}{self.group}{self.other}"
