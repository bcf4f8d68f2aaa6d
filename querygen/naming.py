"""Small helpers for names of structs, packages and SQL variables."""

from __future__ import annotations

import re

_MODEL_NAME = re.compile(r"\w+", re.ASCII)


def is_capitalize(text: str) -> bool:
    """Return True if the first character is an ASCII capital letter."""
    return bool(text) and "A" <= text[0] <= "Z"


def is_end(char: str) -> bool:
    """Return True if ``char`` cannot be part of a SQL variable name."""
    if "a" <= char <= "z" or "A" <= char <= "Z" or "0" <= char <= "9":
        return False
    return char not in ("-", "_", ".")


def _del_pointer_sym(name: str) -> str:
    return name.lstrip("*")


def get_package_name(full_name: str) -> str:
    """Return the package part of a qualified type name."""
    return _del_pointer_sym(full_name).split(".")[0]


def get_pure_name(text: str) -> str:
    """Return the lower-cased first letter of a type name."""
    return _del_pointer_sym(text).lower()[0]


def get_struct_name(type_name: str) -> str:
    """Return the last dotted component of a type name."""
    return type_name.split(".")[-1]


def uncapitalize(text: str) -> str:
    """Lower-case the first character."""
    return text[:1].lower() + text[1:]


def check_struct_name(name: str) -> None:
    """Raise ValueError if ``name`` is not a valid exported model name."""
    if name == "":
        return
    if not _MODEL_NAME.fullmatch(name):
        raise ValueError("model name cannot contains invalid character")
    if not "A" <= name[0] <= "Z":
        raise ValueError("model name must be initial capital")