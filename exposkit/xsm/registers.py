"""The register file of the XSM machine."""

from __future__ import annotations

from exposkit.xsm.word import XSM_NUM_REG, Word

REGISTER_NAMES = (
    *(f"R{number}" for number in range(20)),
    "P0", "P1", "P2", "P3",
    "BP", "SP", "IP",
    "PTBR", "PTLR", "EIP", "EC", "EPN", "EMA",
)

REG_PORT_LOW = 20
REG_PORT_HIGH = 23
REG_KERN_LOW = 27
REG_KERN_HIGH = 32
REG_COUNT = 20


class RegisterFile:
    """The 33 machine registers, looked up by case-insensitive name."""

    def __init__(self) -> None:
        self._registers = [Word() for _ in range(XSM_NUM_REG)]
        self._codes = {name.upper(): code for code, name in enumerate(REGISTER_NAMES)}

    def __len__(self) -> int:
        return XSM_NUM_REG

    def code(self, name: str) -> int | None:
        """Index of the named register, or None if there is no such register."""
        return self._codes.get(name.upper())

    def get(self, name: str) -> Word | None:
        """The named register, or None if there is no such register."""
        code = self.code(name)
        return None if code is None else self._registers[code]

    def _require(self, name: str) -> Word:
        register = self.get(name)
        if register is None:
            raise KeyError(f"no such register: {name}")
        return register

    def names(self) -> tuple[str, ...]:
        return REGISTER_NAMES

    def integer(self, name: str) -> int:
        return self._require(name).integer()

    def string(self, name: str) -> str | None:
        register = self.get(name)
        return None if register is None else register.text

    def store_integer(self, name: str, value: int) -> None:
        self._require(name).store_integer(value)

    def store_string(self, name: str, text: str) -> None:
        self._require(name).store_string(text)

    def user_mode(self, name: str) -> bool:
        """Whether a register may be used in USER mode.

        Ports are kernel-only; of the kernel registers only PTBR is refused.
        """
        code = self.code(name)
        if code is None:
            return False
        if REG_PORT_LOW <= code <= REG_PORT_HIGH:
            return False
        if code == REG_KERN_LOW:
            return False
        return True