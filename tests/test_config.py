import json
from pathlib import Path

import pytest

from resgen.config import RenderConfig, load_config, parse_subformat_spec
from resgen.errors import E_BAD_OPTION, E_CONFIG, ConfigurationError


def test_defaults():
    config = RenderConfig()
    assert config.format == "static"
    assert config.width == 80
    assert config.use_variants is True
    assert config.output is None
    assert config.validate() is config


def test_yaml_config_with_dashed_keys(tmp_path):
    path = tmp_path / "resgen.yaml"
    path.write_text(
        "format: ocamlres\n"
        "width: 100\n"
        "use-variants: false\n"
        "output-dir: gen\n"
        "subformats:\n"
        "  .TXT: lines\n"
        "exclude: '*.tmp'\n"
    )
    config = load_config(path)
    assert config.format == "ocamlres"
    assert config.width == 100
    assert config.use_variants is False
    assert config.output_dir == Path("gen")
    assert config.subformats == {"txt": "lines"}
    assert config.exclude == ["*.tmp"]


def test_json_config(tmp_path):
    path = tmp_path / "resgen.json"
    path.write_text(json.dumps({"strict_subformats": True, "output": "out.ml"}))
    config = load_config(path)
    assert config.strict_subformats is True
    assert config.output == Path("out.ml")


def test_empty_config_file_keeps_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == RenderConfig()


@pytest.mark.parametrize(
    "content",
    [
        "colour: blue\n",
        "width: wide\n",
        "width: 0\n",
        "use_variants: maybe\n",
        "subformats: [json]\n",
        "- just\n- a list\n",
        "width: [unclosed\n",
    ],
)
def test_bad_config_files(tmp_path, content):
    path = tmp_path / "bad.yaml"
    path.write_text(content)
    with pytest.raises(ConfigurationError):
        load_config(path)


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigurationError) as ei:
        load_config(tmp_path / "nope.yaml")
    assert ei.value.code == E_CONFIG


def test_merged_applies_only_given_overrides():
    base = RenderConfig(format="ocamlres", subformats={"txt": "lines"}, exclude=["a"])
    merged = base.merged(
        format=None, width=60, subformats={"csv": "lines"}, exclude=["b"], include_hidden=None
    )
    assert merged.format == "ocamlres"
    assert merged.width == 60
    assert merged.subformats == {"txt": "lines", "csv": "lines"}
    assert merged.exclude == ["a", "b"]
    assert base.width == 80


def test_width_must_be_positive():
    with pytest.raises(ConfigurationError) as ei:
        RenderConfig(width=0).validate()
    assert ei.value.code == E_BAD_OPTION


@pytest.mark.parametrize(
    "spec,expected",
    [("txt=lines", ("txt", "lines")), (".CSV:lines", ("csv", "lines")), (" md = raw ", ("md", "raw"))],
)
def test_parse_subformat_spec(spec, expected):
    assert parse_subformat_spec(spec) == expected


@pytest.mark.parametrize("spec", ["txt", "=lines", "txt=", ""])
def test_parse_subformat_spec_rejects(spec):
    with pytest.raises(ConfigurationError) as ei:
        parse_subformat_spec(spec)
    assert ei.value.code == E_BAD_OPTION
