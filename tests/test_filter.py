import pytest

from digcore.filter import compile_filter, has_meta, new_include_exclude_filter


def test_empty_patterns_give_no_filter():
    assert compile_filter([]) is None
    assert compile_filter(None) is None


def test_glob_and_regex_example():
    f = compile_filter(["*error*", "/(?i)panic|segfault/"])
    assert f.match("an error occurred") is True
    assert f.match("KERNEL PANIC") is True
    assert f.match("normal log") is False


def test_literal_and_glob_example():
    f = compile_filter(["cpu", "mem", "net*"])
    assert f.match("cpu") is True
    assert f.match("network") is True
    assert f.match("memory") is False


def test_single_literal_exact_match():
    f = compile_filter(["cpu"])
    assert f.match("cpu") is True
    assert f.match("cpu0") is False


def test_literal_set_exact_match():
    f = compile_filter(["cpu", "mem"])
    assert f.match("mem") is True
    assert f.match("me") is False


def test_brace_without_meta_is_literal():
    f = compile_filter(["{a,b}"])
    assert f.match("{a,b}") is True
    assert f.match("a") is False


def test_question_mark_matches_one_char():
    f = compile_filter(["sd?"])
    assert f.match("sda") is True
    assert f.match("sd") is False
    assert f.match("sdab") is False


def test_character_class_and_negation():
    f = compile_filter(["eth[0-2]"])
    assert f.match("eth1") is True
    assert f.match("eth5") is False
    g = compile_filter(["eth[!0-2]"])
    assert g.match("eth5") is True
    assert g.match("eth1") is False


def test_glob_brace_alternatives_with_meta():
    f = compile_filter(["{foo,bar}*"])
    assert f.match("football") is True
    assert f.match("barn") is True
    assert f.match("baz") is False


def test_glob_is_anchored():
    f = compile_filter(["net*"])
    assert f.match("subnet") is False


def test_regex_searches_anywhere():
    f = compile_filter(["/err/"])
    assert f.match("stderr output") is True
    assert f.match("ok") is False


def test_invalid_regex_raises():
    with pytest.raises(ValueError, match="invalid regex"):
        compile_filter(["/(unclosed/"])


def test_invalid_glob_raises():
    with pytest.raises(ValueError):
        compile_filter(["abc[*"])


def test_has_meta():
    assert has_meta("a*b") is True
    assert has_meta("a?b") is True
    assert has_meta("[ab]") is True
    assert has_meta("{a,b}") is False
    assert has_meta("plain") is False


def test_include_exclude_defaults_match_everything():
    f = new_include_exclude_filter([], [])
    assert f.match("anything") is True


def test_include_exclude_combination():
    f = new_include_exclude_filter(["net*"], ["netlo*"])
    assert f.match("network") is True
    assert f.match("netlocal") is False
    assert f.match("cpu") is False


def test_include_default_false_without_include_rejects():
    f = new_include_exclude_filter([], ["x"], include_default=False)
    assert f.match("y") is False


def test_exclude_default_true_without_exclude_rejects():
    f = new_include_exclude_filter(["*"], [], exclude_default=True)
    assert f.match("y") is False


def test_include_exclude_propagates_compile_error():
    with pytest.raises(ValueError):
        new_include_exclude_filter(["/(/"], [])