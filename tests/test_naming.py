import pytest

from querygen.naming import (
    check_struct_name,
    get_package_name,
    get_pure_name,
    get_struct_name,
    is_capitalize,
    is_end,
    uncapitalize,
)


@pytest.mark.parametrize("text, expected", [("User", True), ("user", False), ("", False), ("_U", False)])
def test_is_capitalize(text, expected):
    assert is_capitalize(text) is expected


@pytest.mark.parametrize("char", ["a", "Z", "5", "-", "_", "."])
def test_is_end_false(char):
    assert is_end(char) is False


@pytest.mark.parametrize("char", [" ", ")", ",", "'", "{"])
def test_is_end_true(char):
    assert is_end(char) is True


def test_get_package_name():
    assert get_package_name("*model.User") == "model"
    assert get_package_name("model") == "model"


def test_get_struct_name():
    assert get_struct_name("model.User") == "User"
    assert get_struct_name("User") == "User"


def test_get_pure_name():
    assert get_pure_name("*User") == "u"


def test_uncapitalize():
    assert uncapitalize("User") == "user"
    assert uncapitalize("") == ""
    assert uncapitalize("ID")[0] == "i"


def test_check_struct_name_invalid_character():
    with pytest.raises(ValueError, match="invalid character"):
        check_struct_name("Us er")


def test_check_struct_name_not_capital():
    with pytest.raises(ValueError, match="initial capital"):
        check_struct_name("user")


def test_check_struct_name_non_ascii():
    with pytest.raises(ValueError, match="invalid character"):
        check_struct_name("Usér")