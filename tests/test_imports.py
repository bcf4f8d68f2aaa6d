from querygen.imports import QUERY_IMPORTS, UNIT_TEST_IMPORTS, ImportList


def test_add_quotes_and_terminates_group():
    assert ImportList().add("fmt").paths() == ['"fmt"', ""]


def test_add_keeps_already_quoted():
    assert ImportList().add('"os"').paths() == ['"os"', ""]


def test_add_skips_existing_paths():
    base = ImportList().add("fmt")
    assert base.add("fmt", "os").paths() == ['"fmt"', "", '"os"', ""]


def test_add_is_non_mutating():
    base = ImportList().add("fmt")
    base.add("os")
    assert base.paths() == ['"fmt"', ""]


def test_blank_entries_kept():
    assert ImportList().add("a", "", "b").paths() == ['"a"', "", '"b"', ""]


def test_default_lists():
    assert QUERY_IMPORTS.paths()[0] == '"context"'
    assert '"testing"' in UNIT_TEST_IMPORTS.paths()
    assert UNIT_TEST_IMPORTS.paths()[-1] == ""