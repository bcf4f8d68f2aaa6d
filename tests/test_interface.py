from types import SimpleNamespace

import pytest

from querygen.interface import InterfaceMethod
from querygen.model import Field
from querygen.param import Param


def make_method():
    return InterfaceMethod(
        table="users",
        params=[
            Param(type="int", name="id"),
            Param(type="string", name="name"),
            Param(type="string", name="names", is_array=True),
        ],
    )


CLAUSE_CASES = [
    (
        "select * from @@table",
        ['"select * from "', '"users"'],
        ['generateSQL.WriteString("select * from users ")'],
    ),
    (
        "select * from @@table {{where}} id>@id{{end}}",
        ['"select * from "', '"users"', "where", '" id>"', "id", "end"],
        [
            'generateSQL.WriteString("select * from users ")',
            "var whereSQL0 strings.Builder",
            "params = append(params,id)",
            'whereSQL0.WriteString("id>? ")',
            "helper.JoinWhereBuilder(&generateSQL,whereSQL0)",
        ],
    ),
    (
        "select * from @@table {{where}}{{if id > 0}} id>@id{{end}}{{end}}",
        ['"select * from "', '"users"', "where", "if id > 0", '" id>"', "id", "end", "end"],
        [
            'generateSQL.WriteString("select * from users ")',
            "var whereSQL0 strings.Builder",
            "if id > 0 {",
            "params = append(params,id)",
            'whereSQL0.WriteString("id>? ")',
            "}",
            "helper.JoinWhereBuilder(&generateSQL,whereSQL0)",
        ],
    ),
    (
        'update @@table {{set}}{{if name != ""}}name=@name{{end}},{{if id>0}}id=@id{{end}}{{end}} where id=@id',
        [
            '"update "',
            '"users"',
            "set",
            'if name != ""',
            '"name="',
            "name",
            "end",
            '","',
            "if id>0",
            '"id="',
            "id",
            "end",
            "end",
            '" where id="',
            "id",
        ],
        [
            'generateSQL.WriteString("update users ")',
            "var setSQL0 strings.Builder",
            'if name != "" {',
            "params = append(params,name)",
            'setSQL0.WriteString("name=? ")',
            "}",
            'setSQL0.WriteString(", ")',
            "if id>0 {",
            "params = append(params,id)",
            'setSQL0.WriteString("id=? ")',
            "}",
            "helper.JoinSetBuilder(&generateSQL,setSQL0)",
            "params = append(params,id)",
            'generateSQL.WriteString("where id=? ")',
        ],
    ),
    (
        "select * from @@table {{where}} {{for _, name := range names}}name=@name{{end}}{{end}}",
        [
            '"select * from "',
            '"users"',
            "where",
            "for _, name := range names",
            '"name="',
            "name",
            "end",
            "end",
        ],
        [
            'generateSQL.WriteString("select * from users ")',
            "var whereSQL0 strings.Builder",
            "for _, name := range names{",
            "params = append(params,name)",
            'whereSQL0.WriteString("name=? ")',
            "}",
            "helper.JoinWhereBuilder(&generateSQL,whereSQL0)",
        ],
    ),
]


@pytest.mark.parametrize("sql, split_result, generate_result", CLAUSE_CASES)
def test_clause(sql, split_result, generate_result):
    method = make_method()
    method.sql_string = sql
    method.split_sql()
    assert [p.value for p in method.section.members] == split_result
    method.section.build_sql()
    assert method.section.tmpls == generate_result


def test_clause_cases_share_one_method():
    method = make_method()
    for sql, split_result, generate_result in CLAUSE_CASES:
        method.sql_string = sql
        method.split_sql()
        assert [p.value for p in method.section.members] == split_result
        method.section.build_sql()
        assert method.section.tmpls == generate_result


def test_split_sql_incomplete_quote():
    method = make_method()
    method.sql_string = "select 'abc"
    with pytest.raises(ValueError, match="incomplete SQL"):
        method.split_sql()


def test_split_sql_unclosed_template():
    method = make_method()
    method.sql_string = "select * from users {{where"
    with pytest.raises(ValueError, match="incomplete SQL"):
        method.split_sql()


def test_split_sql_unknown_template():
    method = make_method()
    method.sql_string = "select {{loop}} x"
    with pytest.raises(ValueError, match="unknown syntax: loop"):
        method.split_sql()


def test_split_sql_sets_for_params():
    method = make_method()
    method.sql_string = "select * from t where id=@id"
    method.split_sql()
    assert method.has_for_params is True
    assert method.has_sql_data() is True


def test_check_sql_from_doc_after_blank_line():
    method = make_method()
    method.method_name = "FindByID"
    method.doc = "FindByID\n\nselect * from @@table where id=@id"
    method.check_sql()
    assert method.sql_string == "select * from @@table where id=@id"
    assert method.gorm_option == "Exec"
    assert [p.value for p in method.section.members] == [
        '"select * from "',
        '"users"',
        '" where id="',
        "id",
    ]


def test_check_sql_with_sql_wrapper_and_result():
    method = make_method()
    method.method_name = "Count"
    method.result_data = Param(name="result", type="int")
    method.doc = "sql(select 1)"
    method.check_sql()
    assert method.sql_string == "select 1"
    assert method.gorm_option == "Raw"


def test_check_sql_with_where_wrapper():
    method = make_method()
    method.method_name = "ByID"
    method.doc = 'where("id=@id")'
    method.check_sql()
    assert method.sql_string == "id=@id"
    assert method.gorm_option == "Where"


def test_check_sql_wraps_error():
    method = make_method()
    method.method_name = "Bad"
    method.interface_name = "Querier"
    method.doc = "select 'x"
    with pytest.raises(ValueError, match="interface Querier member method Bad check sql err"):
        method.check_sql()


def test_func_sign_and_tmpl():
    method = InterfaceMethod(
        method_name="FindByID",
        params=[Param(name="id", type="int")],
        result=[Param(name="result", package="model", type="User"), Param(name="err", type="error")],
    )
    assert method.func_sign() == "FindByID(id int) (result model.User,err error)"
    assert method.param_in_tmpl() == "id int"


def test_doc_comment():
    method = InterfaceMethod(doc="  line1\nline2 ")
    assert method.doc_comment() == "line1\n// line2"


def test_sql_param_name():
    assert InterfaceMethod().sql_param_name("user.name") == "username"


def test_check_params_resolves_types():
    method = InterfaceMethod(
        package="model",
        origin_struct=Param(package="model", type="User"),
    )
    method.check_params(
        [
            Param(package="UNDEFINED", name="u", type="Info"),
            Param(package="gen", name="m", type="M"),
            Param(package="gen", name="t", type="T"),
        ]
    )
    assert [(p.package, p.type) for p in method.params] == [
        ("model", "Info"),
        ("", "map[string]interface{}"),
        ("model", "User"),
    ]


def test_check_params_rejects_error():
    method = InterfaceMethod(interface_name="Querier")
    with pytest.raises(ValueError, match=r"type error on interface \[Querier\] param: \[e\]"):
        method.check_params([Param(name="e", type="error")])


def test_check_result_gen_t_and_error():
    method = InterfaceMethod(origin_struct=Param(package="model", type="User"))
    method.check_result([Param(package="gen", type="T"), Param(type="error")])
    assert method.result[0] == Param(package="model", name="result", type="User")
    assert method.result[1].name == "err"
    assert method.result_data.type == "User"
    assert method.returns_error() is True
    assert method.returns_nothing() is False


def test_check_result_two_errors():
    method = InterfaceMethod()
    with pytest.raises(ValueError, match="more than 1 error value"):
        method.check_result([Param(type="error"), Param(type="error")])


def test_check_result_two_data_values():
    method = InterfaceMethod()
    with pytest.raises(ValueError, match="more than 1 data value"):
        method.check_result([Param(type="int"), Param(type="string")])


def test_check_result_rejects_interface_and_main():
    with pytest.raises(ValueError, match="can not return interface"):
        InterfaceMethod().check_result([Param(type="interface{}")])
    with pytest.raises(ValueError, match="main package"):
        InterfaceMethod().check_result([Param(package="main", type="User")])


def test_check_result_rows_affected():
    method = InterfaceMethod()
    method.check_result([Param(package="gen", type="RowsAffected")])
    assert method.result[0] == Param(name="rowsAffected", type="int64")
    assert method.gorm_option == "Exec"
    assert method.returns_rows_affected() is True
    assert method.returns_nothing() is False


def test_check_result_sql_row_and_rows():
    row = InterfaceMethod()
    row.check_result([Param(package="gen", type="SQLRow")])
    assert row.result[0] == Param(package="sql", name="row", type="Row", is_pointer=True)
    assert row.returns_sql_row() is True
    assert row.gorm_option == "Raw"

    rows = InterfaceMethod()
    rows.check_result([Param(package="sql", type="Rows"), Param(type="error")])
    assert rows.result[0].name == "rows"
    assert rows.returns_sql_rows() is True


def test_check_result_sql_result():
    method = InterfaceMethod()
    method.check_result([Param(package="sql", type="Result")])
    assert method.returns_sql_result() is True
    assert method.gorm_option == "Statement.ConnPool.ExecContext"


def test_check_result_default_gets_package():
    method = InterfaceMethod(package="model")
    method.check_result([Param(type="Info")])
    assert method.result_data == Param(package="model", name="result", type="Info")


def test_need_new_result_for_map():
    method = InterfaceMethod(result_data=Param(type="map[string]interface{}"))
    assert method.has_need_new_result() is True
    assert method.has_got_point() is False


def test_gorm_run_method_name():
    assert InterfaceMethod(result_data=Param(type="User", is_array=True)).gorm_run_method_name() == "Find"
    assert InterfaceMethod(result_data=Param(type="User")).gorm_run_method_name() == "Take"


def test_repeat_checks():
    a = InterfaceMethod(method_name="Find1", interface_name="A", target_struct="user")
    b = InterfaceMethod(method_name="Find1", interface_name="B", target_struct="user")
    c = InterfaceMethod(method_name="Find1", interface_name="A", target_struct="user")
    assert a.is_repeat_from_different_interface(b) is True
    assert a.is_repeat_from_same_interface(b) is False
    assert a.is_repeat_from_same_interface(c) is True


def test_check_method_errors():
    meta = SimpleNamespace(model_struct_name="User", fields=[Field(name="Age")])
    with pytest.raises(ValueError, match="keyword"):
        InterfaceMethod(method_name="Where").check_method([], meta)
    with pytest.raises(ValueError, match="struct field"):
        InterfaceMethod(method_name="Age").check_method([], meta)
    other = InterfaceMethod(method_name="Get", interface_name="B")
    with pytest.raises(ValueError, match="different interface"):
        InterfaceMethod(method_name="Get", interface_name="A").check_method([other], meta)


def test_test_param_in_tmpl():
    method = InterfaceMethod(
        params=[
            Param(name="id", type="int"),
            Param(name="names", type="string", is_array=True),
            Param(name="u", package="model", type="User", is_pointer=True),
        ]
    )
    assert method.test_param_in_tmpl() == (
        "tt.Input.Args[0].(int),tt.Input.Args[1].([]string),tt.Input.Args[2].(*model.User)"
    )


def test_test_result_and_assert_tmpl():
    method = InterfaceMethod(method_name="Find", result=[Param(type="int"), Param(type="error")])
    assert method.test_result_param_in_tmpl() == "res1,res2"
    assert method.assert_in_tmpl() == (
        'assert(t, "Find", res1, tt.Expectation.Ret[0])\n'
        'assert(t, "Find", res2, tt.Expectation.Ret[1])'
    )