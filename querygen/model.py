"""Core model types: SQL section states, keyword sets, fields, options and config."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Callable, Optional

DEFAULT_MODEL_PKG = "model"


class Status(IntEnum):
    """State of a piece of a parsed SQL template."""

    UNKNOWN = 0
    SQL = 1
    DATA = 2
    VARIABLE = 3
    IF = 4
    ELSE = 5
    WHERE = 6
    SET = 7
    FOR = 8
    END = 9
    TRIM = 10


class SourceCode(Enum):
    """Where a model description came from."""

    STRUCT = 0
    TABLE = 1
    OBJECT = 2


@dataclass(frozen=True)
class KeyWord:
    """A set of reserved words."""

    words: tuple[str, ...]

    def full_match(self, word: str) -> bool:
        """Return True if ``word`` equals one of the reserved words."""
        return word in self.words

    def contain(self, text: str) -> bool:
        """Return True if any reserved word occurs inside ``text``."""
        return any(item in text for item in self.words)


GORM_KEYWORDS = KeyWord(
    (
        "UnderlyingDB", "UseDB", "UseModel", "UseTable", "Quote", "Debug", "TableName", "WithContext",
        "As", "Not", "Or", "Build", "Columns", "Hints",
        "Distinct", "Omit",
        "Select", "Where", "Order", "Group", "Having", "Limit", "Offset",
        "Join", "LeftJoin", "RightJoin",
        "Save", "Create", "CreateInBatches",
        "Update", "Updates", "UpdateColumn", "UpdateColumns",
        "Find", "FindInBatches", "First", "Take", "Last", "Pluck", "Count",
        "Scan", "ScanRows", "Row", "Rows",
        "Delete", "Unscoped",
        "Scopes",
    )
)

DO_KEYWORDS = KeyWord(("Alias", "TableName", "WithContext"))

GEN_KEYWORDS = KeyWord(("generateSQL", "whereClause", "setClause"))

_DEFAULT_DATA_TYPE = "string"


def _tinyint(detail_type: str) -> str:
    return "bool" if detail_type.strip().startswith("tinyint(1)") else "int32"


def _const(value: str) -> Callable[[str], str]:
    return lambda _detail: value


_DATA_TYPES: dict[str, Callable[[str], str]] = {
    "numeric": _const("int32"),
    "integer": _const("int32"),
    "int": _const("int32"),
    "smallint": _const("int32"),
    "mediumint": _const("int32"),
    "bigint": _const("int64"),
    "float": _const("float32"),
    "real": _const("float64"),
    "double": _const("float64"),
    "decimal": _const("float64"),
    "char": _const("string"),
    "varchar": _const("string"),
    "tinytext": _const("string"),
    "mediumtext": _const("string"),
    "longtext": _const("string"),
    "binary": _const("[]byte"),
    "varbinary": _const("[]byte"),
    "tinyblob": _const("[]byte"),
    "blob": _const("[]byte"),
    "mediumblob": _const("[]byte"),
    "longblob": _const("[]byte"),
    "text": _const("string"),
    "json": _const("string"),
    "enum": _const("string"),
    "time": _const("time.Time"),
    "date": _const("time.Time"),
    "datetime": _const("time.Time"),
    "timestamp": _const("time.Time"),
    "year": _const("int32"),
    "bit": _const("[]uint8"),
    "boolean": _const("bool"),
    "tinyint": _tinyint,
}


def get_data_type(data_type: str, detail_type: str) -> str:
    """Map a database column type to the generated field type."""
    convert = _DATA_TYPES.get(data_type.lower())
    if convert is None:
        return _DEFAULT_DATA_TYPE
    return convert(detail_type)


_TITLED_TYPES = frozenset(
    {
        "string", "bytes",
        "int", "int8", "int16", "int32", "int64",
        "uint", "uint8", "uint16", "uint32", "uint64",
        "float64", "float32",
        "bool",
    }
)


@dataclass
class Field:
    """A field of a generated model structure."""

    name: str = ""
    type: str = ""
    column_name: str = ""
    column_comment: str = ""
    multiline_comment: bool = False
    tag: dict[str, str] = field(default_factory=dict)
    gorm_tag: dict[str, list[str]] = field(default_factory=dict)
    custom_gen_type: str = ""
    relation: Any = None

    def is_relation(self) -> bool:
        """Return True if the field describes a relation."""
        return self.relation is not None

    def gen_type(self) -> str:
        """Return the name of the query field type for this field."""
        if self.is_relation():
            return self.type
        if self.custom_gen_type:
            return self.custom_gen_type
        typ = self.type.lstrip("*")
        if typ in _TITLED_TYPES:
            return typ[:1].upper() + typ[1:]
        if typ == "time.Time":
            return "Time"
        if typ in ("json.RawMessage", "[]byte"):
            return "Bytes"
        if typ == "serializer":
            return "Serializer"
        return "Field"

    def escape_keyword(self) -> "Field":
        """Escape the name if it clashes with a query method name."""
        return self.escape_keyword_for(GORM_KEYWORDS)

    def escape_keyword_for(self, keywords: KeyWord) -> "Field":
        """Append an underscore to the name if it is one of ``keywords``."""
        if keywords.full_match(self.name):
            self.name += "_"
        return self


class SQLBuffer:
    """Accumulates SQL text, collapsing runs of whitespace."""

    def __init__(self) -> None:
        self._chars: list[str] = []

    def __len__(self) -> int:
        return len(self._chars)

    def write_byte(self, char: str) -> None:
        """Append a character verbatim."""
        self._chars.append(char)

    def write_sql(self, char: str) -> None:
        """Append a character, turning whitespace into at most one space."""
        if char in ("\n", "\t", " "):
            if not self._chars or self._chars[-1] != " ":
                self._chars.append(" ")
        else:
            self._chars.append(char)

    def dump(self) -> str:
        """Return the accumulated text and clear the buffer."""
        text = "".join(self._chars)
        self._chars.clear()
        return text


FIELD_OPTION_TYPE = "field"
METHOD_OPTION_TYPE = "method"


class ModifyFieldOpt:
    """Option that modifies each generated field."""

    def __init__(self, func: Callable[[Optional[Field]], Optional[Field]]) -> None:
        self._func = func

    def option_type(self) -> str:
        return FIELD_OPTION_TYPE

    def operator(self) -> Callable[[Optional[Field]], Optional[Field]]:
        """Return the field transformation."""
        return self._func


class FilterFieldOpt(ModifyFieldOpt):
    """Option that drops a field when its operator returns None."""


class CreateFieldOpt(ModifyFieldOpt):
    """Option that creates an extra field; its operator is called with None."""


class AddMethodOpt:
    """Option that adds custom methods to a model."""

    def __init__(self, func: Callable[[], list[Any]]) -> None:
        self._func = func

    def option_type(self) -> str:
        return METHOD_OPTION_TYPE

    def methods(self) -> list[Any]:
        """Return the methods this option contributes."""
        return list(self._func())


def sort_options(opts):
    """Split options into (modify, filter, create, method) lists, keeping order."""
    modify: list[ModifyFieldOpt] = []
    filters: list[FilterFieldOpt] = []
    create: list[CreateFieldOpt] = []
    methods: list[AddMethodOpt] = []
    for opt in opts or ():
        if isinstance(opt, FilterFieldOpt):
            filters.append(opt)
        elif isinstance(opt, CreateFieldOpt):
            create.append(opt)
        elif isinstance(opt, ModifyFieldOpt):
            modify.append(opt)
        elif isinstance(opt, AddMethodOpt):
            methods.append(opt)
    return modify, filters, create, methods


def _base_name(path: str) -> str:
    if path == "":
        return "."
    stripped = path.rstrip(os.sep)
    if stripped == "":
        return os.sep
    return stripped.rsplit(os.sep, 1)[-1]


@dataclass
class Config:
    """Configuration for generating one model."""

    model_pkg: str = ""
    table_prefix: str = ""
    table_name: str = ""
    model_name: str = ""
    import_pkg_paths: list[str] = field(default_factory=list)
    model_opts: list[Any] = field(default_factory=list)

    schema_name_opts: list[Callable[[Any], str]] = field(default_factory=list)
    table_name_ns: Optional[Callable[[str], str]] = None
    model_name_ns: Optional[Callable[[str], str]] = None
    file_name_ns: Optional[Callable[[str], str]] = None

    data_type_map: dict[str, Callable[[Any], str]] = field(default_factory=dict)
    field_nullable: bool = False
    field_coverable: bool = False
    field_signable: bool = False
    field_with_index_tag: bool = False
    field_with_type_tag: bool = False
    field_json_tag_ns: Optional[Callable[[str], str]] = None
    modify_opts: list[ModifyFieldOpt] = field(default_factory=list)
    filter_opts: list[FilterFieldOpt] = field(default_factory=list)
    create_opts: list[CreateFieldOpt] = field(default_factory=list)

    method_opts: list[AddMethodOpt] = field(default_factory=list)

    def preprocess(self) -> "Config":
        """Fill defaults, reduce the model package to its base name and sort options."""
        if not self.model_pkg:
            self.model_pkg = DEFAULT_MODEL_PKG
        self.model_pkg = _base_name(self.model_pkg)
        (
            self.modify_opts,
            self.filter_opts,
            self.create_opts,
            self.method_opts,
        ) = sort_options(self.model_opts)
        return self

    def get_names(self) -> tuple[str, str, str]:
        """Return (table name, struct name, file name)."""
        table_name, struct_name = self.table_name, self.model_name
        if self.model_name_ns is not None:
            struct_name = self.model_name_ns(table_name)
        if self.table_name_ns is not None:
            table_name = self.table_name_ns(table_name)
        if not table_name.startswith(self.table_prefix):
            table_name = self.table_prefix + table_name
        file_name = table_name.lower()
        if self.file_name_ns is not None:
            file_name = self.file_name_ns(self.table_name)
        return table_name, struct_name, file_name

    def get_model_methods(self) -> list[Any]:
        """Collect the custom methods of all method options."""
        return [method for opt in self.method_opts for method in opt.methods()]

    def get_schema_name(self, db: Any) -> str:
        """Return the first non-empty schema name given by the schema options."""
        for opt in self.schema_name_opts:
            name = opt(db)
            if name:
                return name
        return ""