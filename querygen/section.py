"""Splitting of SQL templates into sections and building them into code lines."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from querygen.clause import (
    ElseClause,
    ForClause,
    IfClause,
    SetClause,
    SQLClause,
    TrimClause,
    WhereClause,
)
from querygen.model import GEN_KEYWORDS, Status

_TEMPLATE_SEPARATORS = re.compile(r"[: =,]+")

_KEYWORD_STATUS = {
    "if": Status.IF,
    "else": Status.ELSE,
    "for": Status.FOR,
    "where": Status.WHERE,
    "set": Status.SET,
    "end": Status.END,
    "trim": Status.TRIM,
}

_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}

_SQL_TYPES = (Status.SQL, Status.DATA, Status.VARIABLE)

Clause = Union[SQLClause, IfClause, ElseClause, WhereClause, SetClause, TrimClause, ForClause]


def _quote(text: str) -> str:
    """Return ``text`` as a double-quoted literal with escapes."""
    out = ['"']
    for ch in text:
        if ch == '"':
            out.append('\\"')
        elif ch == "\\":
            out.append("\\\\")
        elif ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ch.isprintable():
            out.append(ch)
        else:
            code = ord(ch)
            if code < 0x80:
                out.append(f"\\x{code:02x}")
            elif code < 0x10000:
                out.append(f"\\u{code:04x}")
            else:
                out.append(f"\\U{code:08x}")
    out.append('"')
    return "".join(out)


@dataclass
class ForRange:
    """The header of a ``for`` loop in a SQL template."""

    index: str = ""
    value: str = ""
    suffix: str = ""
    range_list: str = ""

    def __str__(self) -> str:
        return f"for {self.index}, {self.value} := range {self.range_list}"


@dataclass
class Part:
    """One piece of a split SQL template."""

    type: Status = Status.UNKNOWN
    value: str = ""
    for_range: ForRange = field(default_factory=ForRange)
    sql_slice: Optional["Section"] = field(default=None, repr=False, compare=False)
    split_list: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        if self.type == Status.FOR:
            return str(self.for_range)
        return self.value

    def is_end(self) -> bool:
        """Return True if this part closes a block."""
        return self.type == Status.END

    def sql_param_name(self) -> str:
        """Return the value with dots removed, usable as a parameter key."""
        return self.value.replace(".", "")

    def _split_template(self) -> None:
        self.split_list = [w for w in _TEMPLATE_SEPARATORS.split(self.value.strip()) if w]

    def _check_template(self) -> None:
        if not self.split_list:
            raise ValueError("template is null")
        if GEN_KEYWORDS.contain(self.value):
            raise ValueError("template can not use gen keywords")
        keyword = self.split_list[0]
        status = _KEYWORD_STATUS.get(keyword)
        if status is None:
            raise ValueError(f"unknown syntax: {keyword}")
        self.type = status
        if self.type == Status.FOR:
            if len(self.split_list) != 5:
                raise ValueError(f"for range syntax error: {self.value}")
            if self.sql_slice is not None and self.sql_slice._has_same_name(self.split_list[2]):
                raise ValueError("cannot use the same value name in different for loops")
            self.for_range.index = self.split_list[1]
            self.for_range.value = self.split_list[2]
            self.for_range.range_list = self.split_list[4]


@dataclass
class Section:
    """A SQL template split into parts, and the code lines built from it."""

    members: list[Part] = field(default_factory=list)
    tmpls: list[str] = field(default_factory=list)
    current_index: int = 0
    clause_total: dict[Status, int] = field(
        default_factory=lambda: {Status.WHERE: 0, Status.SET: 0}
    )
    for_value: list[ForRange] = field(default_factory=list)

    def _next(self) -> Part:
        if self.current_index < len(self.members) - 1:
            self.current_index += 1
            return self.members[self.current_index]
        return Part(type=Status.END)

    def sub_index(self) -> None:
        """Step the cursor back by one part."""
        self.current_index -= 1

    def has_more(self) -> bool:
        """Return True if parts remain after the current one."""
        return self.current_index < len(self.members) - 1

    def is_null(self) -> bool:
        """Return True if there are no parts."""
        return not self.members

    def _current(self) -> Part:
        return self.members[self.current_index]

    def _append_tmpl(self, value: str) -> None:
        self.tmpls.append(value)

    def _has_same_name(self, value: str) -> bool:
        return any(p.type == Status.FOR and p.for_range.value == value for p in self.members)

    def build_sql(self) -> list[Clause]:
        """Build all parts into clauses, appending code lines to ``tmpls``."""
        if self.is_null():
            raise ValueError("sql is null")
        name = "generateSQL"
        res: list[Clause] = []
        while True:
            c = self._current()
            if c.type in _SQL_TYPES:
                sql_clause = self._parse_sql(name)
                res.append(sql_clause)
                self._append_tmpl(sql_clause.finish())
            elif c.type == Status.IF:
                if_clause = self._parse_if(name)
                res.append(if_clause)
                self._append_tmpl(if_clause.finish())
            elif c.type == Status.WHERE:
                where_clause = self._parse_where()
                res.append(where_clause)
                self._append_tmpl(where_clause.finish(name))
            elif c.type == Status.SET:
                set_clause = self._parse_set()
                res.append(set_clause)
                self._append_tmpl(set_clause.finish(name))
            elif c.type == Status.TRIM:
                trim_clause = self._parse_trim()
                res.append(trim_clause)
                self._append_tmpl(trim_clause.finish(name))
            elif c.type == Status.FOR:
                for_clause = self._parse_for(name)
                res.append(for_clause)
                self._append_tmpl(for_clause.finish())
            elif c.type != Status.END:
                raise ValueError(f"unknow clause:{c.value}")
            if not self.has_more():
                break
            self._next()
        return res

    def _parse_if(self, name: str) -> IfClause:
        c = self._current()
        res = IfClause(text=c.value)
        self._append_tmpl(res.create())
        if not self.has_more():
            return res
        c = self._next()
        while True:
            if c.type in _SQL_TYPES:
                sql_clause = self._parse_sql(name)
                res.value.append(sql_clause)
                self._append_tmpl(sql_clause.finish())
            elif c.type == Status.IF:
                if_clause = self._parse_if(name)
                res.value.append(if_clause)
                self._append_tmpl(if_clause.finish())
            elif c.type == Status.WHERE:
                where_clause = self._parse_where()
                res.value.append(where_clause)
                self._append_tmpl(where_clause.finish(name))
            elif c.type == Status.SET:
                set_clause = self._parse_set()
                res.value.append(set_clause)
                self._append_tmpl(set_clause.finish(name))
            elif c.type == Status.ELSE:
                res.value.append(self._parse_else(name))
            elif c.type == Status.FOR:
                for_clause = self._parse_for(name)
                res.value.append(for_clause)
                self._append_tmpl(res.finish())
            elif c.type == Status.TRIM:
                trim_clause = self._parse_trim()
                res.value.append(trim_clause)
                self._append_tmpl(trim_clause.finish(name))
            elif c.type == Status.END:
                return res
            else:
                raise ValueError(f"unknow clause : {c.value}")
            if not self.has_more():
                break
            c = self._next()
        if c.is_end():
            raise ValueError("incomplete SQL,if not end")
        return res

    def _parse_else(self, name: str) -> ElseClause:
        res = ElseClause(text=self._current().value)
        self._append_tmpl(res.create())
        if not self.has_more():
            return res
        c = self._next()
        while True:
            if c.type in _SQL_TYPES:
                sql_clause = self._parse_sql(name)
                res.value.append(sql_clause)
                self._append_tmpl(sql_clause.create())
            elif c.type == Status.IF:
                if_clause = self._parse_if(name)
                res.value.append(if_clause)
                self._append_tmpl(if_clause.finish())
            elif c.type == Status.WHERE:
                where_clause = self._parse_where()
                res.value.append(where_clause)
                self._append_tmpl(where_clause.finish(name))
            elif c.type == Status.SET:
                set_clause = self._parse_set()
                res.value.append(set_clause)
                self._append_tmpl(set_clause.finish(name))
            elif c.type == Status.ELSE:
                res.value.append(self._parse_else(name))
            elif c.type == Status.FOR:
                for_clause = self._parse_for(name)
                res.value.append(for_clause)
                self._append_tmpl(for_clause.finish())
            elif c.type == Status.TRIM:
                trim_clause = self._parse_trim()
                res.value.append(trim_clause)
                self._append_tmpl(trim_clause.finish(name))
            else:
                self.sub_index()
                return res
            if not self.has_more():
                break
            c = self._next()
        return res

    def _parse_where(self) -> WhereClause:
        c = self._current()
        res = WhereClause(var_name=self.get_name(c.type))
        self._append_tmpl(res.create())
        res.type = c.type
        if not self.has_more():
            return res
        c = self._next()
        while True:
            if c.type in _SQL_TYPES:
                sql_clause = self._parse_sql(res.var_name)
                res.value.append(sql_clause)
                self._append_tmpl(sql_clause.finish())
            elif c.type == Status.IF:
                if_clause = self._parse_if(res.var_name)
                res.value.append(if_clause)
                self._append_tmpl(if_clause.finish())
            elif c.type == Status.FOR:
                for_clause = self._parse_for(res.var_name)
                res.value.append(for_clause)
                self._append_tmpl(for_clause.finish())
            elif c.type == Status.WHERE:
                where_clause = self._parse_where()
                res.value.append(where_clause)
                self._append_tmpl(where_clause.finish(res.var_name))
            elif c.type == Status.TRIM:
                trim_clause = self._parse_trim()
                res.value.append(trim_clause)
                self._append_tmpl(trim_clause.finish(res.var_name))
            elif c.type == Status.END:
                return res
            else:
                raise ValueError(f"unknow clause : {c.value}")
            if not self.has_more():
                break
            c = self._next()
        if c.is_end():
            return res
        raise ValueError("incomplete SQL,where not end")

    def _parse_set(self) -> SetClause:
        c = self._current()
        res = SetClause(var_name=self.get_name(c.type))
        self._append_tmpl(res.create())
        if not self.has_more():
            return res
        c = self._next()
        res.type = c.type
        while True:
            if c.type in _SQL_TYPES:
                sql_clause = self._parse_sql(res.var_name)
                res.value.append(sql_clause)
                self._append_tmpl(sql_clause.finish())
            elif c.type == Status.IF:
                if_clause = self._parse_if(res.var_name)
                res.value.append(if_clause)
                self._append_tmpl(if_clause.finish())
            elif c.type == Status.FOR:
                for_clause = self._parse_for(res.var_name)
                res.value.append(for_clause)
                self._append_tmpl(for_clause.finish())
            elif c.type == Status.WHERE:
                where_clause = self._parse_where()
                res.value.append(where_clause)
                self._append_tmpl(where_clause.finish(res.var_name))
            elif c.type == Status.TRIM:
                trim_clause = self._parse_trim()
                res.value.append(trim_clause)
                self._append_tmpl(trim_clause.finish(res.var_name))
            elif c.type == Status.END:
                return res
            else:
                raise ValueError(f"unknow clause : {c.value}")
            if not self.has_more():
                break
            c = self._next()
        if c.is_end():
            raise ValueError("incomplete SQL,set not end")
        return res

    def _parse_trim(self) -> TrimClause:
        c = self._current()
        res = TrimClause(var_name=self.get_name(c.type))
        self._append_tmpl(res.create())
        if not self.has_more():
            return res
        c = self._next()
        res.type = c.type
        while True:
            if c.type in _SQL_TYPES:
                sql_clause = self._parse_sql(res.var_name)
                res.value.append(sql_clause)
                self._append_tmpl(sql_clause.finish())
            elif c.type == Status.IF:
                if_clause = self._parse_if(res.var_name)
                res.value.append(if_clause)
                self._append_tmpl(if_clause.finish())
            elif c.type == Status.FOR:
                for_clause = self._parse_for(res.var_name)
                res.value.append(for_clause)
                self._append_tmpl(for_clause.finish())
            elif c.type == Status.WHERE:
                where_clause = self._parse_where()
                res.value.append(where_clause)
                self._append_tmpl(where_clause.finish(res.var_name))
            elif c.type == Status.END:
                return res
            else:
                raise ValueError(f"unknow clause : {c.value}")
            if not self.has_more():
                break
            c = self._next()
        if c.is_end():
            raise ValueError("incomplete SQL,set not end")
        return res

    def _parse_for(self, name: str) -> ForClause:
        c = self._current()
        res = ForClause(for_range=c.for_range, text=c.value)
        self._append_tmpl(res.create())
        self.for_value.append(c.for_range)
        if not self.has_more():
            return res
        c = self._next()
        while True:
            if c.type in _SQL_TYPES:
                str_clause = self._parse_sql(name)
                res.value.append(str_clause)
                self._append_tmpl(f"{name}.WriteString({str_clause})")
            elif c.type == Status.IF:
                if_clause = self._parse_if(name)
                res.value.append(if_clause)
                self._append_tmpl(if_clause.finish())
            elif c.type == Status.FOR:
                for_clause = self._parse_for(name)
                res.value.append(for_clause)
                self._append_tmpl(for_clause.finish())
            elif c.type == Status.TRIM:
                trim_clause = self._parse_trim()
                res.value.append(trim_clause)
                self._append_tmpl(trim_clause.finish(name))
            elif c.type == Status.END:
                self.for_value.pop()
                return res
            else:
                raise ValueError(f"unknow clause : {c.value}")
            if not self.has_more():
                break
            c = self._next()
        if c.is_end():
            raise ValueError("incomplete SQL,set not end")
        return res

    def _parse_sql(self, name: str) -> SQLClause:
        res = SQLClause(var_name=name, type=Status.SQL)
        while True:
            c = self._current()
            if c.type in (Status.SQL, Status.VARIABLE):
                res.value.append(c.value)
            elif c.type == Status.DATA:
                self._append_tmpl(f"params = append(params,{c.value})")
                res.value.append('"?"')
            else:
                self.sub_index()
                return res
            if not self.has_more():
                return res
            self._next()

    def check_sql_var(self, param: str, status: Status, method: Any) -> Part:
        """Turn a SQL variable into a part; ``@@table`` becomes the quoted table name."""
        if status == Status.VARIABLE and param == "table":
            return Part(type=Status.SQL, value=_quote(method.table))
        if status == Status.DATA:
            method.has_for_params = True
        if status == Status.VARIABLE:
            param = f"{method.s}.Quote({param})"
        return Part(type=status, value=param)

    def get_name(self, status: Status) -> str:
        """Return the next builder variable name for a WHERE, SET or TRIM block."""
        prefixes = {Status.WHERE: "whereSQL", Status.SET: "setSQL", Status.TRIM: "trimSQL"}
        prefix = prefixes.get(status)
        if prefix is None:
            return "generateSQL"
        count = self.clause_total.get(status, 0)
        self.clause_total[status] = count + 1
        return f"{prefix}{count}"

    def check_template(self, tmpl: str) -> Part:
        """Parse a ``{{...}}`` template expression into a part; raise ValueError if invalid."""
        part = Part(value=tmpl, sql_slice=self)
        part._split_template()
        part._check_template()
        return part