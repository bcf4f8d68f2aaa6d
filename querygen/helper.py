"""Helpers that assemble dynamic SQL clauses and validate model objects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class Cond:
    """A condition and the text used when it holds."""

    cond: bool
    result: str


def if_clause(conds: Iterable[Cond]) -> str:
    """Join the results of the holding conditions, each trimmed of spaces."""
    return " " + " ".join((c.result if c.cond else "").strip(" ") for c in conds)


def where_clause(conds: Iterable[str]) -> str:
    """Build a WHERE clause from conditions, defaulting to AND between them."""
    return _join_clause(conds, "WHERE", _where_value, " ")


def set_clause(conds: Iterable[str]) -> str:
    """Build a SET clause from assignments."""
    return _join_clause(conds, "SET", _set_value, ",")


def _join_clause(conds, keyword, deal, sep) -> str:
    sql = trim_all(sep.join(deal(c) for c in conds))
    if sql:
        sql = " " + keyword + " " + sql
    return sql


def trim_all(text: str) -> str:
    """Strip a leading and/or/xor/comma and a trailing one."""
    return _trim_right(_trim_left(text))


def _trim_left(text: str) -> str:
    text = text.strip()
    lower = text.lower()
    if lower.startswith("and "):
        return text[4:]
    if lower.startswith("or "):
        return text[3:]
    if lower.startswith("xor "):
        return text[4:]
    if lower.startswith(","):
        return text[1:]
    return text


def _trim_right(text: str) -> str:
    text = text.strip()
    lower = text.lower()
    if lower.endswith(" and"):
        return text[:-3]
    if lower.endswith(" or"):
        return text[:-2]
    if lower.endswith(" xor"):
        return text[:-3]
    if lower.endswith(","):
        return text[:-1]
    return text


def _where_value(value: str) -> str:
    value = value.strip(" ")
    lower = value.lower()
    if lower == "":
        return ""
    if lower.startswith(("and ", "or ", "xor ")):
        return value
    return "AND " + value


def _set_value(value: str) -> str:
    return value.strip(", ")


def join_where(value: str) -> str:
    """Return the WHERE fragment for a built condition, or "" if empty."""
    value = trim_all(value)
    return f"WHERE {value} " if value else ""


def join_set(value: str) -> str:
    """Return the SET fragment for built assignments, or "" if empty."""
    value = trim_all(value)
    return f"SET {value} " if value else ""


def join_trim_all(value: str) -> str:
    """Return the trimmed text followed by a space."""
    return trim_all(value) + " "


def check_object(obj) -> None:
    """Validate a model object; raise ValueError if a required name is empty.

    The object has ``struct_name`` and ``fields``; each field has ``name`` and ``type``.
    """
    if not obj.struct_name:
        raise ValueError("object's struct_name cannot be empty")
    for fld in obj.fields:
        if not fld.name:
            raise ValueError(f"object {obj.struct_name}'s field name cannot be empty")
        if not fld.type:
            raise ValueError(f"object {obj.struct_name}'s field type cannot be empty")