"""Exceptions raised inside the XSM machine."""

from __future__ import annotations

import enum


class ExceptionKind(enum.IntEnum):
    """Exception cause codes, as stored in the EC register."""

    PAGEFAULT = 0
    ILLINSTR = 1
    ILLMEM = 2
    ARITH = 3


class MachineException(Exception):
    """An exception raised by the machine, with the values for EC, EMA and EPN."""

    def __init__(
        self,
        message: str,
        kind: ExceptionKind,
        mode: int | None = None,
        address: int | None = None,
        page: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = ExceptionKind(kind)
        self.mode = mode
        self.address = address
        self.page = page


class TranslationError(MachineException):
    """A logical address could not be translated to a physical one."""

    default_message = "Address translation failed"
    default_kind = ExceptionKind.ILLMEM

    def __init__(
        self,
        address: int | None = None,
        page: int | None = None,
        mode: int | None = None,
    ) -> None:
        super().__init__(self.default_message, self.default_kind, mode, address, page)


class PageFault(TranslationError):
    """The page is not present in memory."""

    default_message = "Page fault"
    default_kind = ExceptionKind.PAGEFAULT


class AccessViolation(TranslationError):
    """A write to a page that is not writable."""

    default_message = "Access violation"
    default_kind = ExceptionKind.ILLMEM


class IllegalPage(TranslationError):
    """The page lies outside the logical address space."""

    default_message = "Address outside logical address space"
    default_kind = ExceptionKind.ILLMEM