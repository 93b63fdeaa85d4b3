import pytest

from compressed_shell.utils.template import TemplateRenderer


def test_render():
    assert TemplateRenderer().render("COMMAND: {{ command }}", command="make") == "COMMAND: make"


def test_missing_variable_raises():
    with pytest.raises(ValueError, match="context keys"):
        TemplateRenderer().render("{{ command }} {{ exit_code }}", command="make")


def test_bad_syntax_raises():
    with pytest.raises(ValueError, match="compilation"):
        TemplateRenderer().render("{% for %}")


def test_compiled_once():
    r = TemplateRenderer()
    assert r.compile("{{ a }}") is r.compile("{{ a }}")
