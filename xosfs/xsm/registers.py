"""The machine's register file."""

from __future__ import annotations

from xosfs.xsm.word import Word

_NAMES = (
    "R0", "R1", "R2", "R3", "R4", "R5", "R6", "R7", "R8", "R9",
    "R10", "R11", "R12", "R13", "R14", "R15", "R16", "R17", "R18", "R19",
    "P0", "P1", "P2", "P3",
    "BP", "SP", "IP", "PTBR", "PTLR", "EIP", "EC", "EPN", "EMA",
)

_PORT_LOW = 20
_PORT_HIGH = 23
_KERNEL_LOW = 27


class RegisterFile:
    """Named registers, looked up without regard to case."""

    def __init__(self) -> None:
        self._registers = [Word() for _ in _NAMES]
        self._codes = {name.upper(): code for code, name in enumerate(_NAMES)}
        self.zero = Word(0)

    def __len__(self) -> int:
        return len(self._registers)

    def code(self, name: str) -> int | None:
        """Index of the register, or None for an unknown name."""
        return self._codes.get(name.upper())

    def register(self, name: str) -> Word:
        """The register's word; KeyError for an unknown name."""
        code = self.code(name)
        if code is None:
            raise KeyError(name)
        return self._registers[code]

    def names(self) -> tuple[str, ...]:
        return _NAMES

    def integer(self, name: str) -> int:
        return self.register(name).to_int()

    def string(self, name: str) -> str | None:
        """The register's contents, or None for an unknown name."""
        code = self.code(name)
        return None if code is None else self._registers[code].value

    def store_integer(self, name: str, value: int) -> None:
        self.register(name).store_int(value)

    def store_string(self, name: str, text: str) -> None:
        self.register(name).store_str(text)

    def user_mode(self, name: str) -> bool:
        """Whether a user-mode program may use the register."""
        code = self.code(name)
        if code is None:
            return False
        if _PORT_LOW <= code <= _PORT_HIGH:
            return False
        if code == _KERNEL_LOW:
            return False
        return True