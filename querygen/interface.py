"""Methods declared on user interfaces, checked and split into SQL sections."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Optional

from querygen.model import GORM_KEYWORDS, SQLBuffer, Status
from querygen.naming import is_end
from querygen.param import Param, params_to_string
from querygen.section import Part, Section, _quote


@dataclass
class InterfaceMethod:
    """A method of a user interface whose body is generated from its SQL comment."""

    doc: str = ""
    s: str = ""
    origin_struct: Param = field(default_factory=Param)
    target_struct: str = ""
    method_name: str = ""
    params: list[Param] = field(default_factory=list)
    result: list[Param] = field(default_factory=list)
    result_data: Param = field(default_factory=Param)
    section: Optional[Section] = None
    sql_params: list[Param] = field(default_factory=list)
    sql_string: str = ""
    gorm_option: str = ""
    table: str = ""
    interface_name: str = ""
    package: str = ""
    has_for_params: bool = False

    def func_sign(self) -> str:
        """Return ``Name(params) (results)``."""
        return f"{self.method_name}({self.param_in_tmpl()}) ({self.result_param_in_tmpl()})"

    def has_sql_data(self) -> bool:
        """Return True if the generated body needs a parameter list."""
        return bool(self.sql_params) or self.has_for_params

    def has_got_point(self) -> bool:
        """Return True if the result is passed by address."""
        return not self.has_need_new_result()

    def has_need_new_result(self) -> bool:
        """Return True if the result value must be allocated first."""
        data = self.result_data
        return not data.is_array and ((data.is_null() and data.is_time()) or data.is_map())

    def gorm_run_method_name(self) -> str:
        """Return ``Find`` for slice results, ``Take`` otherwise."""
        return "Find" if self.result_data.is_array else "Take"

    def returns_sql_result(self) -> bool:
        return any(r.is_sql_result() for r in self.result)

    def returns_sql_row(self) -> bool:
        return any(r.is_sql_row() for r in self.result)

    def returns_sql_rows(self) -> bool:
        return any(r.is_sql_rows() for r in self.result)

    def returns_nothing(self) -> bool:
        """Return True if neither an error nor the affected row count is returned."""
        return not any(r.is_error() or r.name == "rowsAffected" for r in self.result)

    def returns_rows_affected(self) -> bool:
        return any(r.name == "rowsAffected" for r in self.result)

    def returns_error(self) -> bool:
        return any(r.is_error() for r in self.result)

    def is_repeat_from_different_interface(self, other: "InterfaceMethod") -> bool:
        """Return True if ``other`` has the same name and target but another interface."""
        return (
            self.method_name == other.method_name
            and self.interface_name != other.interface_name
            and self.target_struct == other.target_struct
        )

    def is_repeat_from_same_interface(self, other: "InterfaceMethod") -> bool:
        """Return True if ``other`` is the same method of the same interface and target."""
        return (
            self.method_name == other.method_name
            and self.interface_name == other.interface_name
            and self.target_struct == other.target_struct
        )

    def param_in_tmpl(self) -> str:
        return params_to_string(self.params)

    def result_param_in_tmpl(self) -> str:
        return params_to_string(self.result)

    def sql_param_name(self, param: str) -> str:
        """Return ``param`` with dots removed, usable as a map key."""
        return param.replace(".", "")

    def doc_comment(self) -> str:
        """Return the doc text with every following line prefixed by ``// ``."""
        return self.doc.strip().replace("\n", "\n// ").replace("//  ", "// ")

    def check_method(self, methods: list["InterfaceMethod"], meta: Any) -> None:
        """Raise ValueError if the method name clashes with a keyword, method or field."""
        if GORM_KEYWORDS.full_match(self.method_name):
            raise ValueError(f"can not use keyword as method name:{self.method_name}")
        for method in methods or ():
            if self.is_repeat_from_different_interface(method):
                raise ValueError(
                    "can not generate method with the same name from different interface:"
                    f"[{self.interface_name}.{self.method_name}] and "
                    f"[{method.interface_name}.{method.method_name}]"
                )
        for fld in meta.fields:
            if fld.name == self.method_name:
                raise ValueError(
                    "can not generate method same name with struct field:"
                    f"[{self.interface_name}.{self.method_name}] and "
                    f"[{meta.model_struct_name}.{fld.name}]"
                )

    def check_params(self, params: list[Param]) -> None:
        """Resolve parameter types and store them; raise ValueError on invalid ones."""
        checked: list[Param] = []
        for original in params or ():
            param = replace(original)
            if param.package == "UNDEFINED":
                param.package = self.package
            elif param.is_error() or param.is_null():
                raise ValueError(
                    f"type error on interface [{self.interface_name}] param: [{param.name}]"
                )
            elif param.is_gen_m():
                param.type = "map[string]interface{}"
                param.package = ""
            elif param.is_gen_t():
                param.type = self.origin_struct.type
                param.package = self.origin_struct.package
            checked.append(param)
        self.params = checked

    def check_result(self, result: list[Param]) -> None:
        """Resolve result types, name them and pick the execution method."""
        where = f"[{self.interface_name}.{self.method_name}]"
        checked: list[Param] = []
        has_error = False
        for original in result or ():
            param = replace(original)
            if param.package == "UNDEFINED":
                param.package = self.package
            if param.is_gen_m():
                param.type = "map[string]interface{}"
                param.package = ""
            if param.in_main_pkg():
                raise ValueError(f"query method cannot return struct of main package in {where}")
            if param.is_error():
                if has_error:
                    raise ValueError(f"query method cannot return more than 1 error value in {where}")
                param.name = "err"
                has_error = True
            elif param.eq(self.origin_struct) or param.is_gen_t():
                if not self.result_data.is_null():
                    raise ValueError(f"query method cannot return more than 1 data value in {where}")
                param.name = "result"
                param.type = self.origin_struct.type
                param.package = self.origin_struct.package
                self.result_data = param
            elif param.is_interface():
                raise ValueError(f"query method can not return interface in {where}")
            elif param.is_gen_rows_affected():
                param.type = "int64"
                param.package = ""
                param.name = "rowsAffected"
                self.gorm_option = "Exec"
            elif param.is_sql_result():
                param.type = "Result"
                param.package = "sql"
                param.name = "result"
                self.gorm_option = "Statement.ConnPool.ExecContext"
            elif param.is_sql_row():
                param.type = "Row"
                param.package = "sql"
                param.name = "row"
                self.gorm_option = "Raw"
                param.is_pointer = True
            elif param.is_sql_rows():
                param.type = "Rows"
                param.package = "sql"
                param.name = "rows"
                self.gorm_option = "Raw"
                param.is_pointer = True
            else:
                if not self.result_data.is_null():
                    raise ValueError(f"query method cannot return more than 1 data value in {where}")
                if param.package == "" and not (
                    param.is_base_type() or param.is_map() or param.is_time()
                ):
                    param.package = self.package
                param.name = "result"
                self.result_data = param
            checked.append(param)
        self.result = checked

    def check_sql(self) -> None:
        """Take the SQL from the doc comment and split it into sections."""
        self.sql_string = self._parse_doc_string()
        try:
            self.split_sql()
        except ValueError as exc:
            raise ValueError(
                f"interface {self.interface_name} member method {self.method_name} "
                f"check sql err:{exc}"
            ) from exc

    def _default_option(self) -> str:
        return "Exec" if self.result_data.is_null() else "Raw"

    def _parse_doc_string(self) -> str:
        doc = self._sql_doc_string().strip()
        lower = doc.lower()
        if lower.startswith("sql("):
            doc = doc[4:-1]
            self.gorm_option = self._default_option()
        elif lower.startswith("where("):
            doc = doc[6:-1]
            self.gorm_option = "Where"
        else:
            self.gorm_option = self._default_option()
        if len(doc) >= 2 and doc.startswith('"') and doc.endswith('"'):
            doc = doc[1:-1]
        return doc

    def _sql_doc_string(self) -> str:
        doc = self.doc.strip()
        index = doc.find("\n\n")
        if index != -1:
            rest = doc[index + 2:]
            doc = doc[:index] if self.method_name in rest else rest
        if self.method_name:
            doc = doc.removeprefix(self.method_name)
        return doc

    def split_sql(self) -> None:
        """Split ``sql_string`` into sections; raise ValueError on malformed SQL."""
        sql = self.sql_string
        n = len(sql)
        section = Section()
        self.section = section
        buf = SQLBuffer()

        def incomplete() -> ValueError:
            return ValueError(f"incomplete SQL:{sql}")

        def flush_sql() -> None:
            text = buf.dump()
            if text.strip():
                section.members.append(Part(type=Status.SQL, value=_quote(text)))

        def read_quoted(i: int, quote: str) -> int:
            buf.write_byte(sql[i])
            i += 1
            while True:
                if i >= n:
                    raise incomplete()
                buf.write_byte(sql[i])
                if sql[i] == quote and sql[i - 1] != "\\":
                    return i
                i += 1

        def read_template(i: int) -> int:
            i += 2
            while True:
                if i >= n:
                    raise incomplete()
                if sql[i] == '"':
                    i = read_quoted(i, '"') + 1
                if i + 1 >= n:
                    raise incomplete()
                if sql[i] == "}" and sql[i + 1] == "}":
                    clause = buf.dump()
                    try:
                        part = section.check_template(clause)
                    except ValueError as exc:
                        raise ValueError(
                            f"sql [{sql}] dynamic template {clause} err:{exc}"
                        ) from exc
                    section.members.append(part)
                    return i + 1
                buf.write_sql(sql[i])
                i += 1

        def read_variable(i: int) -> int:
            i += 1
            status = Status.DATA
            if sql[i] == "@":
                i += 1
                status = Status.VARIABLE
            while i < n and not is_end(sql[i]):
                buf.write_sql(sql[i])
                i += 1
            section.members.append(section.check_sql_var(buf.dump(), status, self))
            return i - 1

        i = 0
        while i < n:
            char = sql[i]
            if char in "\"'":
                i = read_quoted(i, char)
            elif char == "\\":
                if i + 1 < n and sql[i + 1] == "@":
                    i += 1
                    buf.write_sql(sql[i])
                else:
                    buf.write_sql(char)
            elif char in "{@":
                flush_sql()
                if i + 1 >= n:
                    raise incomplete()
                if char == "{" and sql[i + 1] == "{":
                    i = read_template(i)
                elif char == "@":
                    i = read_variable(i)
            else:
                buf.write_sql(char)
            i += 1
        flush_sql()

    def _check_sql_var_by_params(self, param: str, status: Status) -> Part:
        struct_name = param.split(".")[0]
        for p in self.params:
            if p.name != struct_name:
                continue
            if p.name != param:
                p = Param(name=param, type="string")
            if status == Status.DATA:
                if not any(sp.name == param for sp in self.sql_params):
                    self.sql_params.append(p)
            elif status == Status.VARIABLE:
                if p.type != "string" or p.is_array:
                    raise ValueError(
                        f"variable name must be string :{param} type is {p.type_name()}"
                    )
                param = f"{self.s}.Quote({param})"
            return Part(type=status, value=param)
        if param == "table":
            return Part(type=Status.SQL, value=_quote(self.table))
        raise ValueError(f"unknow variable param:{param}")

    def test_param_in_tmpl(self) -> str:
        """Render the arguments of a generated unit test call."""
        args = []
        for index, param in enumerate(self.params):
            typ = f"{param.package}.{param.type}" if param.package else param.type
            if param.is_array:
                typ = "[]" + typ
            if param.is_pointer:
                typ = "*" + typ
            args.append(f"tt.Input.Args[{index}].({typ})")
        return ",".join(args)

    def test_result_param_in_tmpl(self) -> str:
        """Render the result variables of a generated unit test call."""
        return ",".join(f"res{index}" for index in range(1, len(self.result) + 1))

    def assert_in_tmpl(self) -> str:
        """Render the assertions of a generated unit test."""
        name = _quote(self.method_name)
        return "\n".join(
            f"assert(t, {name}, res{index + 1}, tt.Expectation.Ret[{index}])"
            for index in range(len(self.result))
        )