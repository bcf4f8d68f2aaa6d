"""Metadata of generated query structures and the building of their custom methods."""

from __future__ import annotations

from dataclasses import dataclass, replace
from dataclasses import field as dc_field
from typing import Iterable, Optional

from querygen.interface import InterfaceMethod
from querygen.method import Method, default_method_table_name
from querygen.model import GORM_KEYWORDS, Field, KeyWord, SourceCode
from querygen.naming import get_package_name, is_capitalize
from querygen.param import InterfaceSet, Param


@dataclass
class QueryStructMeta:
    """Everything known about one model and the query structure generated for it."""

    generated: bool = False
    file_name: str = ""
    s: str = ""
    query_struct_name: str = ""
    model_struct_name: str = ""
    table_name: str = ""
    table_comment: str = ""
    struct_info: Param = dc_field(default_factory=Param)
    fields: list[Field] = dc_field(default_factory=list)
    source: SourceCode = SourceCode.STRUCT
    import_pkg_paths: list[str] = dc_field(default_factory=list)
    model_methods: list[Method] = dc_field(default_factory=list)
    interface_mode: bool = False

    def revise_field_name(self) -> None:
        """Escape field names that clash with query method names."""
        self.revise_field_name_for(GORM_KEYWORDS)

    def revise_field_name_for(self, keywords: KeyWord) -> None:
        """Escape field names that are among ``keywords``."""
        for fld in self.fields:
            fld.escape_keyword_for(keywords)

    def append_or_update_field(self, field: Field) -> None:
        """Replace the field of the same name, or append it if there is none.

        Relation fields are always appended; fields without a column name are
        otherwise ignored.
        """
        if field.is_relation():
            self.fields.append(field)
        if field.column_name == "":
            return
        for index, existing in enumerate(self.fields):
            if existing.name == field.name:
                self.fields[index] = field
                return
        self.fields.append(field)

    def has_field(self) -> bool:
        """Return True if the structure has any fields."""
        return bool(self.fields)

    def check(self) -> None:
        """Raise ValueError if no data object can be generated for this struct."""
        if self.struct_info.in_main_pkg():
            raise ValueError(
                "can't generated data object for struct in main package, "
                f"ignore:{self.model_struct_name}"
            )
        if not is_capitalize(self.model_struct_name):
            raise ValueError(
                "can't generated data object for non-exportable struct, "
                f"ignore:{self.query_struct_name}"
            )

    def relations(self) -> list:
        """Return the relations of all relation fields, in field order."""
        return [fld.relation for fld in self.fields if fld.is_relation()]

    def struct_comment(self) -> str:
        """Return the comment placed above the model struct."""
        if self.table_comment:
            return self.table_comment
        if self.table_name:
            return f"mapped from table <{self.table_name}>"
        return "mapped from object"

    def query_struct_comment(self) -> str:
        """Return the comment placed above the query struct, or "" without a table comment."""
        if self.table_comment:
            return f"// {self.query_struct_name} {self.table_comment}"
        return ""

    def revise_diy_method(self) -> None:
        """Bind custom methods to the model, dropping duplicates and adding TableName.

        The methods are revised in any case; ValueError is raised afterwards if
        duplicated names were found.
        """
        duplicates: list[str] = []
        table_name_method: Optional[Method] = None
        methods: list[Method] = []
        seen: set[str] = set()
        for method in self.model_methods:
            if method.method_name in seen:
                duplicates.append(method.method_name)
                continue
            if method.method_name == "TableName":
                table_name_method = method
            method.receiver.package = ""
            method.receiver.type = self.model_struct_name
            methods.append(method)
            seen.add(method.method_name)
        if table_name_method is None:
            methods.append(default_method_table_name(self.model_struct_name))
        else:
            body = table_name_method.body.replace(
                '"@@table"', "TableName" + self.model_struct_name
            )
            table_name_method.body = body.replace("@@table", self.table_name)
        self.model_methods = methods
        if duplicates:
            raise ValueError(
                "can't generate struct with duplicated method, please check method name: "
                + ",".join(duplicates)
            )

    def iface_mode(self, on: bool) -> "QueryStructMeta":
        """Return a shallow copy with interface mode switched on or off."""
        return replace(self, interface_mode=on)

    def return_object(self) -> str:
        """Return the type that chained query methods return in generated code."""
        if self.interface_mode:
            return f"I{self.model_struct_name}Do"
        return f"*{self.query_struct_name}Do"


def build_diy_method(
    interface_set: InterfaceSet,
    meta: QueryStructMeta,
    existing: Optional[list[InterfaceMethod]],
) -> list[InterfaceMethod]:
    """Check every interface method that applies to ``meta`` and build its SQL.

    Raises ValueError on the first method that fails a check.
    """
    results: list[InterfaceMethod] = []
    for info in interface_set.interfaces:
        if not info.match_struct(meta.model_struct_name):
            continue
        for method in info.methods:
            built = InterfaceMethod(
                s=meta.s,
                target_struct=meta.query_struct_name,
                origin_struct=meta.struct_info,
                method_name=method.method_name,
                params=list(method.params or ()),
                doc=method.doc,
                table=meta.table_name,
                interface_name=info.name,
                package=get_package_name(info.package),
            )
            built.check_method(existing or [], meta)
            built.check_params(method.params)
            built.check_result(method.result)
            built.check_sql()
            try:
                built.section.build_sql()
            except ValueError as exc:
                raise ValueError(f"sql [{built.sql_string}] build err:{exc}") from exc
            results.append(built)
    return results


def get_struct_names(metas: Iterable[QueryStructMeta]) -> list[str]:
    """Return the model struct names of ``metas``."""
    return [meta.model_struct_name for meta in metas]


def filter_field(field: Field, opts) -> Optional[Field]:
    """Return ``field``, or None if any option's operator drops it."""
    for opt in opts or ():
        if opt.operator()(field) is None:
            return None
    return field


def modify_field(field: Field, opts) -> Field:
    """Apply every option's operator to ``field`` in turn."""
    for opt in opts or ():
        field = opt.operator()(field)
    return field