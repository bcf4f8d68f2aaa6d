# querygen

`querygen` holds the pieces a code generator needs to describe models and
to turn SQL templates written in method comments into the lines of code
that assemble those statements at run time.

## What is in the package

- **`querygen.model`**: model fields (`Field`, with `gen_type()` and keyword
  escaping), reserved word sets (`KeyWord`, `GORM_KEYWORDS`, `DO_KEYWORDS`,
  `GEN_KEYWORDS`), the column type mapping `get_data_type()`, the
  whitespace-collapsing `SQLBuffer`, field and method options
  (`ModifyFieldOpt`, `FilterFieldOpt`, `CreateFieldOpt`, `AddMethodOpt`,
  `sort_options()`) and the naming configuration `Config`
  (`preprocess()`, `get_names()`, `get_model_methods()`, `get_schema_name()`).
- **`querygen.helper`**: helpers that assemble dynamic `WHERE`/`SET`
  fragments and remove stray leading or trailing `AND`/`OR`/`XOR`/`,`
  (`where_clause`, `set_clause`, `if_clause`, `trim_all`, `join_where`,
  `join_set`, `join_trim_all`), and `check_object()`, which raises
  `ValueError` for an object without a struct name or with a nameless or
  typeless field.
- **`querygen.imports`**: `ImportList`, an immutable, ordered, de-duplicated
  list of quoted import paths, with the ready-made `QUERY_IMPORTS` and
  `UNIT_TEST_IMPORTS`.
- **`querygen.pool`**: `Pool`, a thread-safe token pool limiting how many
  workers run at once (`wait`, `done`, `num`, `size`, `wait_all`,
  `async_wait_all`; also usable as a context manager).
- **`querygen.naming`**: small name helpers (`uncapitalize`,
  `get_struct_name`, `get_package_name`, `check_struct_name`, ...).
- **`querygen.param`** and **`querygen.method`**: method parameters
  (`Param`), interfaces (`InterfaceInfo`, `InterfaceSet`) and custom model
  methods (`Method`, `default_method_table_name()`).
- **`querygen.clause`**, **`querygen.section`**, **`querygen.interface`**:
  `InterfaceMethod.split_sql()` splits an annotated SQL string into parts
  (`@name` parameters, `@@name` quoted variables, `@@table`, and
  `{{if}}`/`{{else}}`/`{{where}}`/`{{set}}`/`{{trim}}`/`{{for}}`/`{{end}}`
  blocks); `Section.build_sql()` turns the parts into clauses and appends
  the generated code lines to `Section.tmpls`. `InterfaceMethod` also
  checks parameters and results (`check_params`, `check_result`,
  `check_sql`) and renders signatures and unit-test fragments.
- **`querygen.query`**: `QueryStructMeta`, the per-model data the generated
  code is rendered from, and `build_diy_method()`, which checks and builds
  every interface method that applies to a model.

Malformed input is reported with `ValueError`.

## Installation

```
pip install querygen
```

## Examples

```python
from querygen.helper import where_clause, set_clause

where_clause(["id = 1", "and name = 'x'"])   # " WHERE id = 1 and name = 'x'"
set_clause(["name = 'x',", "age = 3"])        # " SET name = 'x',age = 3"
```

```python
from querygen.interface import InterfaceMethod
from querygen.param import Param

method = InterfaceMethod(
    method_name="FindByID",
    table="users",
    params=[Param(name="id", type="int")],
)
method.sql_string = "select * from @@table {{where}} id>@id{{end}}"
method.split_sql()
method.section.build_sql()
print("\n".join(method.section.tmpls))
```

prints

```
generateSQL.WriteString("select * from users ")
var whereSQL0 strings.Builder
params = append(params,id)
whereSQL0.WriteString("id>? ")
helper.JoinWhereBuilder(&generateSQL,whereSQL0)
```

## What the package does not do

It is a library of building blocks only. It does not connect to a
database or read table schemas, does not read interface declarations from
source files, does not render whole output files or write them to disk,
and has no command-line tool.

## Running the tests

```
pip install -e ".[test]"
pytest
```