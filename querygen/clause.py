"""Clauses that a split SQL template is built from, each rendering its code lines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from querygen.model import Status


@dataclass
class _Clause:
    var_name: str = ""
    type: Status = Status.UNKNOWN


@dataclass
class SQLClause(_Clause):
    """Plain SQL text and variables written to a builder."""

    value: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        sql = "+".join(self.value)
        if sql.startswith('"'):
            sql = '"' + sql.lstrip('" ')
        if not sql.endswith(' "'):
            sql += '+" "'
        return sql.replace('"+"', "")

    def create(self) -> str:
        return f"{self.var_name}.WriteString({self})"

    def finish(self) -> str:
        return f"{self.var_name}.WriteString({self})"


@dataclass
class IfClause(_Clause):
    """A conditional block; ``text`` holds the condition line."""

    value: list[Any] = field(default_factory=list)
    text: str = ""

    def __str__(self) -> str:
        return self.text

    def create(self) -> str:
        return f"{self} {{"

    def finish(self) -> str:
        return "}"


@dataclass
class ElseClause(IfClause):
    """An else branch of a conditional block."""

    def create(self) -> str:
        return f"}} {self} {{"

    def finish(self) -> str:
        return ""


@dataclass
class WhereClause(_Clause):
    """A WHERE block collected in its own builder."""

    value: list[Any] = field(default_factory=list)

    def __str__(self) -> str:
        return f"helper.WhereTrim({self.var_name}.String())"

    def create(self) -> str:
        return f"var {self.var_name} strings.Builder"

    def finish(self, name: str) -> str:
        return f"helper.JoinWhereBuilder(&{name},{self.var_name})"


@dataclass
class SetClause(_Clause):
    """A SET block collected in its own builder."""

    value: list[Any] = field(default_factory=list)

    def __str__(self) -> str:
        return f"helper.SetTrim({self.var_name}.String())"

    def create(self) -> str:
        return f"var {self.var_name} strings.Builder"

    def finish(self, name: str) -> str:
        return f"helper.JoinSetBuilder(&{name},{self.var_name})"


@dataclass
class TrimClause(_Clause):
    """A block whose leading and trailing connectors are trimmed."""

    value: list[Any] = field(default_factory=list)

    def __str__(self) -> str:
        return f"helper.TrimALL({self.var_name}.String())"

    def create(self) -> str:
        return f"var {self.var_name} strings.Builder"

    def finish(self, name: str) -> str:
        return f"helper.JoinTrimAllBuilder(&{name},{self.var_name})"


@dataclass
class ForClause(_Clause):
    """A loop block; ``text`` holds the loop header."""

    value: list[Any] = field(default_factory=list)
    for_range: Any = None
    text: str = ""

    def __str__(self) -> str:
        return self.text + "{"

    def create(self) -> str:
        return str(self)

    def finish(self) -> str:
        return "}"