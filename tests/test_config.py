import warnings

import pytest

from tinyset import configparser
from tinyset.configdefaults import config, create_config
from tinyset.exceptions import TinySetConfigWarning


pytestmark = pytest.mark.filterwarnings("error")


def _create_test_config(flags_string=""):
    return configparser._create_default_config(flags_string)


@pytest.mark.parametrize(
    "flags_string, expected",
    [
        ("", {}),
        ("a=1", {"a": "1"}),
        (" a = 1 , b=two ", {"a": "1", "b": "two"}),
        ("a=1,,b", {"a": "1", "b": "True"}),
        ("sep=x=y", {"sep": "x=y"}),
    ],
)
def test_parse_config_string(flags_string, expected):
    assert configparser.parse_config_string(flags_string) == expected


def test_defaults():
    cfg = create_config("")
    assert cfg.element_coercion == "str"


def test_flags_override_defaults():
    cfg = create_config("element_coercion=raise")
    assert cfg.element_coercion == "raise"


def test_known_flag_does_not_warn():
    with warnings.catch_warnings(record=True) as record:
        warnings.simplefilter("always")
        cfg = create_config("element_coercion=raise")
    assert record == []
    assert cfg.unknown_flags() == []


def test_unknown_flags_listed_next_to_known_ones():
    with pytest.warns(TinySetConfigWarning) as record:
        cfg = create_config("element_coercion=raise,bogus=1")
    assert cfg.unknown_flags() == ["bogus"]
    assert len(record) == 1
    assert cfg.element_coercion == "raise"


def test_flags_from_environment(monkeypatch):
    monkeypatch.setenv("TINYSET_FLAGS", "element_coercion=raise")
    cfg = create_config()
    assert cfg.element_coercion == "raise"
    # The singleton was created at import time and is not affected
    assert config.element_coercion == "str"


def test_unknown_flag_warns():
    with pytest.warns(TinySetConfigWarning, match="unknown option 'not_an_option'"):
        create_config("not_an_option=1")


def test_invalid_flag_value():
    with pytest.raises(ValueError, match="Valid options are"):
        create_config("element_coercion=bogus")


def test_invalid_assignment():
    cfg = create_config("")
    with pytest.raises(ValueError):
        cfg.element_coercion = "bogus"
    assert cfg.element_coercion == "str"


def test_unknown_attribute():
    cfg = create_config("")
    with pytest.raises(AttributeError, match="does not exist"):
        cfg.not_an_option = 1


def test_duplicate_registration():
    cfg = _create_test_config()
    cfg.add("x", "doc", configparser.ConfigParam(1))
    with pytest.raises(AttributeError, match="already taken"):
        cfg.add("x", "doc", configparser.ConfigParam(2))


def test_parsers_are_independent():
    cfg1 = _create_test_config()
    cfg2 = _create_test_config()
    cfg1.add("only_here", "doc", configparser.ConfigParam(1))
    assert cfg1.only_here == 1
    assert not hasattr(cfg2, "only_here")


def test_enumstr_rejects_non_str_options():
    with pytest.raises(ValueError, match="Non-str value"):
        configparser.EnumStr("a", ["b", 1])


def test_change_flags_context_manager():
    cfg = create_config("")
    with cfg.change_flags(element_coercion="raise"):
        assert cfg.element_coercion == "raise"
    assert cfg.element_coercion == "str"


def test_change_flags_dict_argument():
    cfg = create_config("")
    with cfg.change_flags({"element_coercion": "raise"}):
        assert cfg.element_coercion == "raise"
    assert cfg.element_coercion == "str"


def test_change_flags_restores_on_error():
    cfg = create_config("")
    with pytest.raises(RuntimeError):
        with cfg.change_flags(element_coercion="raise"):
            raise RuntimeError()
    assert cfg.element_coercion == "str"


def test_change_flags_invalid_value_restores():
    cfg = create_config("")
    with pytest.raises(ValueError):
        with cfg.change_flags(element_coercion="bogus"):
            pass
    assert cfg.element_coercion == "str"


def test_change_flags_decorator():
    cfg = create_config("")

    @cfg.change_flags(element_coercion="raise")
    def inner():
        return cfg.element_coercion

    assert inner() == "raise"
    assert cfg.element_coercion == "str"


def test_str_lists_options():
    text = str(create_config(""))
    assert "element_coercion (EnumStr)" in text


def test_change_flags_reentrant_decorator():
    cfg = _create_test_config()
    cfg.add("depth", "doc", configparser.ConfigParam(0))
    seen = []

    @cfg.change_flags(depth=1)
    def recurse(n):
        seen.append(cfg.depth)
        cfg.depth = 10 + n
        if n:
            recurse(n - 1)
        seen.append(cfg.depth)

    recurse(2)
    assert seen == [1, 1, 1, 10, 11, 12]
    assert cfg.depth == 0


def test_change_flags_nested_contexts():
    cfg = create_config("")
    flags = cfg.change_flags(element_coercion="raise")
    with flags:
        cfg.element_coercion = "str"
        with flags:
            assert cfg.element_coercion == "raise"
        assert cfg.element_coercion == "str"
    assert cfg.element_coercion == "str"
