import pytest

from resgen.errors import E_UNKNOWN_SUBFORMAT, ConfigurationError
from resgen.layout import pretty_string
from resgen.subformats import (
    DEFAULT_EXTENSIONS,
    SUBFORMATS,
    DecodeStatus,
    build_registry,
)


def _show(sub_name, data, width=100):
    plugin = SUBFORMATS.find(sub_name)
    return pretty_string(plugin.render(plugin.parse(data), width), width)


def test_catalog_lists_builtin_subformats():
    assert SUBFORMATS.keys() == ["raw", "int", "lines", "json", "yaml"]
    assert dict(DEFAULT_EXTENSIONS) == {"json": "json", "yaml": "yaml", "yml": "yaml"}


def test_decode_is_tri_state():
    reg = build_registry()
    missing = reg.decode("notes.txt", b"{")
    assert missing.status is DecodeStatus.NOT_FOUND
    assert (missing.tag, missing.type_name) == ("raw", "string")

    failed = reg.decode("broken.json", b"{")
    assert failed.status is DecodeStatus.FAILED
    assert failed.error is not None
    assert (failed.tag, failed.type_name) == ("raw", "string")

    parsed = reg.decode("DATA.JSON", b"[1]")
    assert parsed.parsed
    assert parsed.value == [1]
    assert (parsed.tag, parsed.type_name) == ("json", "Yojson.Safe.t")


def test_no_extension_never_matches():
    reg = build_registry({"": "int"})
    assert reg.lookup("Makefile") is None


def test_overrides_extend_defaults():
    reg = build_registry({".TXT": "lines", "json": "raw"})
    assert reg.lookup("a.txt").name == "lines"
    assert reg.lookup("a.json").name == "raw"
    assert reg.lookup("a.yml").name == "yaml"


def test_unknown_subformat_is_a_configuration_error():
    with pytest.raises(ConfigurationError) as ei:
        build_registry({"txt": "markdown"})
    assert ei.value.code == E_UNKNOWN_SUBFORMAT
    assert ei.value.context == {"extension": "txt", "subformat": "markdown"}
    assert "(available: raw, int, lines, json, yaml)" in ei.value.message


def test_int_subformat():
    assert _show("int", b" 42\n") == "42"
    assert _show("int", b"-7") == "(-7)"
    plugin = SUBFORMATS.find("int")
    with pytest.raises(ValueError):
        plugin.parse(b"forty-two")
    with pytest.raises(ValueError):
        plugin.parse(str(2**62).encode())


def test_lines_subformat():
    assert _show("lines", b"alpha\nbeta\n") == '["alpha"; "beta"]'
    assert _show("lines", b"") == "[]"
    assert _show("lines", b"no newline") == '["no newline"]'
    assert SUBFORMATS.find("lines").parse(b"a\n\nb") == [b"a", b"", b"b"]


def test_lines_subformat_breaks_when_too_wide():
    data = b"\n".join([b"x" * 30] * 4)
    out = _show("lines", data, width=40)
    assert out.splitlines()[0] == "["
    assert out.splitlines()[-1] == "]"
    assert all(len(line) <= 40 for line in out.splitlines())


def test_json_subformat_renders_yojson():
    out = _show("json", b'{"a": [1, null], "b": "x"}')
    assert out == '`Assoc [("a", `List [`Int 1; `Null]); ("b", `String "x")]'


def test_json_scalars():
    assert _show("json", b"true") == "`Bool true"
    assert _show("json", b"1.5") == "`Float 1.5"
    assert _show("json", b"-2.0") == "`Float (-2.0)"
    assert _show("json", b"-3") == "`Int (-3)"
    assert _show("json", str(2**70).encode()) == '`Intlit "1180591620717411303424"'


def test_negative_zero_float_is_parenthesised():
    assert _show("json", b"-0.0") == "`Float (-0.0)"
    assert _show("json", b"0.0") == "`Float 0.0"


def test_deep_json_nesting():
    out = _show("json", b"[" * 300 + b"1" + b"]" * 300, width=10000)
    assert out == "`List [" * 300 + "`Int 1" + "]" * 300


def test_yaml_subformat_renders_yojson():
    out = _show("yaml", b"a: 1\nb: [x, y]\n")
    assert out == '`Assoc [("a", `Int 1); ("b", `List [`String "x"; `String "y"])]'
    assert _show("yaml", b"") == "`Null"


def test_yaml_binary_scalar_is_escaped_bytes():
    assert _show("yaml", b"!!binary aGVsbG8=\n") == "`String \"hello\""
    out = _show("yaml", b"k: !!binary AP8=\n")
    assert out == '`Assoc [("k", `String "\\x00\\xFF")]'


def test_raw_subformat_is_identity():
    raw = SUBFORMATS.find("raw")
    assert raw.parse(b"abc") == b"abc"
    assert _show("raw", b"abc") == '"abc"'
