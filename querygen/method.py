"""Custom methods attached to model and query structures."""

from __future__ import annotations

from dataclasses import dataclass, field

from querygen.param import Param, params_to_string


@dataclass
class Method:
    """A method bound to a generated structure."""

    receiver: Param = field(default_factory=Param)
    method_name: str = ""
    doc: str = ""
    params: list[Param] = field(default_factory=list)
    result: list[Param] = field(default_factory=list)
    body: str = ""

    def func_sign(self) -> str:
        """Return ``Name(params) (results)``."""
        return f"{self.method_name}({self.param_in_tmpl()}) ({self.result_param_in_tmpl()})"

    def base_struct_tmpl(self) -> str:
        """Return the receiver as it appears in the method declaration."""
        return self.receiver.tmpl_string()

    def param_in_tmpl(self) -> str:
        return params_to_string(self.params)

    def result_param_in_tmpl(self) -> str:
        return params_to_string(self.result)

    def doc_comment(self) -> str:
        """Return the doc text with every following line prefixed by ``//``."""
        return self.doc.strip().replace("\n", "\n//")


def default_method_table_name(struct_name: str) -> Method:
    """Return the default ``TableName`` method for a model struct."""
    return Method(
        receiver=Param(is_pointer=True, type=struct_name),
        method_name="TableName",
        doc=f"TableName {struct_name}'s table name ",
        result=[Param(type="string")],
        body=f"{{\n\treturn TableName{struct_name}\n}} ",
    )