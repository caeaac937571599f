import pytest

from resgen.names import mangle, module_name, value_name


@pytest.mark.parametrize(
    "name,expected",
    [
        ("", "void"),
        ("hello", "hello"),
        ("Foo", "_Foo"),
        ("9lives", "_9lives"),
        ("my-file.v2", "my_file_v2"),
        ("_private", "_private"),
        ("été", "_t_"),
    ],
)
def test_value_name(name, expected):
    assert value_name(name) == expected


@pytest.mark.parametrize(
    "name,expected",
    [
        ("", "Void"),
        ("assets", "Assets"),
        ("Assets", "Assets"),
        ("9x", "M_9x"),
        ("_x", "M_x"),
        ("a-b", "A_b"),
        (".hidden", "M_hidden"),
    ],
)
def test_module_name(name, expected):
    assert module_name(name) == expected


def test_mangle_keeps_length():
    assert mangle("a b/c") == "a_b_c"
    assert len(mangle("héllo")) == len("héllo")


@pytest.mark.parametrize("name", ["", "Foo", "9x", "a-b", "_x", "x.y.z", "ÉA"])
def test_mangling_is_idempotent(name):
    assert value_name(value_name(name)) == value_name(name)
    assert module_name(module_name(name)) == module_name(name)


@pytest.mark.parametrize("name", ["Foo", "0", "zz", "ä", "-"])
def test_results_are_valid_identifiers(name):
    v = value_name(name)
    m = module_name(name)
    assert v.isidentifier() and not v[0].isupper() and v.isascii()
    assert m.isidentifier() and m[0].isupper() and m.isascii()
