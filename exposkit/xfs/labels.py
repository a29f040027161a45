"""Label resolution for XSM assembly loaded onto the XFS disk."""

from __future__ import annotations

import re
from typing import Iterable, Iterator

from exposkit.xfs.layout import XSM_INSTRUCTION_SIZE, XSM_WORD_SIZE

# Line buffer sizes used while reading the source: longer lines are read
# in several pieces, and each piece is treated as a line of its own.
_SCAN_LIMIT = XSM_INSTRUCTION_SIZE * XSM_WORD_SIZE + 1
_RESOLVE_LIMIT = 100

_OPERAND_SPLIT = re.compile(r"[ ,]")
_UNCONDITIONAL = {"JMP", "CALL"}
_CONDITIONAL = {"JZ", "JNZ"}


class LabelError(Exception):
    """A jump or call refers to a label that is not defined."""

    def __init__(self, label: str) -> None:
        super().__init__(f'Can not resolve label "{label}".')
        self.label = label


def is_label(text: str) -> bool:
    """True if the line is a label definition (ends with a colon)."""
    return text.endswith(":")


def has_letters(text: str | None) -> bool:
    """True if the text holds at least one ASCII letter."""
    if not text:
        return False
    return any(char.isascii() and char.isalpha() for char in text)


def label_name(text: str) -> str:
    """The name of a label definition, without its colons."""
    return next((part for part in text.split(":") if part), "")


def _pieces(lines: Iterable[str], limit: int) -> Iterator[str]:
    """Split lines as a fixed-size line buffer would, dropping newlines."""
    size = limit - 1
    for line in lines:
        pos = 0
        while pos < len(line):
            piece = line[pos:pos + size]
            newline = piece.find("\n")
            if newline != -1:
                piece = piece[:newline + 1]
            pos += len(piece)
            yield piece.split("\n", 1)[0]


class LabelTable:
    """Addresses of the labels defined in a program."""

    def __init__(self) -> None:
        self._labels: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._labels)

    def __contains__(self, name: object) -> bool:
        return name in self._labels

    def reset(self) -> None:
        """Forget every label."""
        self._labels.clear()

    def insert(self, name: str, address: int) -> None:
        """Define a label; a later definition of the same name wins."""
        self._labels[name] = address

    def target(self, name: str) -> int | None:
        """Address of a label relative to the program start, or None."""
        return self._labels.get(name)

    def scan(self, lines: Iterable[str]) -> None:
        """Record every label with the address of the instruction after it."""
        address = 0
        for text in _pieces(lines, _SCAN_LIMIT):
            if is_label(text):
                self.insert(label_name(text), address)
            elif text:
                address += XSM_INSTRUCTION_SIZE

    def resolve(self, lines: Iterable[str], base_address: int) -> list[str]:
        """Drop label lines and replace label targets of jumps and calls by addresses."""
        output = []
        for text in _pieces(lines, _RESOLVE_LIMIT):
            if is_label(text) or not text:
                continue
            tokens = [token for token in _OPERAND_SPLIT.split(text) if token]
            if not tokens:
                output.append(text)
                continue
            opcode = tokens[0]
            left = tokens[1] if len(tokens) > 1 else None
            right = tokens[2] if len(tokens) > 2 else None
            separator = ""
            kind = opcode.upper()
            if kind in _UNCONDITIONAL:
                right, left = left, ""
            elif kind in _CONDITIONAL:
                separator = ", "
            else:
                output.append(text)
                continue
            if not has_letters(right):
                output.append(text)
                continue
            address = self.target(right)
            if address is None:
                raise LabelError(right)
            output.append(f"{opcode} {left}{separator}{address + base_address}")
        return output


def resolve_labels(lines: Iterable[str], base_address: int) -> list[str]:
    """Resolve all labels of a program loaded at ``base_address``."""
    lines = list(lines)
    table = LabelTable()
    table.scan(lines)
    return table.resolve(lines, base_address)