import pytest

from PolybarTitle.errors import RenderError
from PolybarTitle.renderer import DEFAULT_TEMPLATE, TemplateRenderer


class TestTemplateRenderer:
    def test_default_template(self):
        renderer = TemplateRenderer()
        assert renderer.source == DEFAULT_TEMPLATE
        assert renderer.render({"name": "Firefox"}) == "Firefox"

    def test_custom_template(self):
        renderer = TemplateRenderer("  {{ name | upper }} ")
        assert renderer.render({"name": "Firefox"}) == "  FIREFOX "

    def test_no_html_escaping(self):
        assert TemplateRenderer().render({"name": "<b>&</b>"}) == "<b>&</b>"

    def test_invalid_template(self):
        with pytest.raises(RenderError, match="failed to register template string"):
            TemplateRenderer("{{ name ")

    def test_undefined_variable(self):
        renderer = TemplateRenderer("{{ title }}")
        with pytest.raises(RenderError, match="failed to render template"):
            renderer.render({"name": "Firefox"})
