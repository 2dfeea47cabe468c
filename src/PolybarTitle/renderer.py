"""
Output template rendering.
"""
import logging
from typing import Mapping

from jinja2 import Environment, StrictUndefined, TemplateError

from .errors import RenderError

DEFAULT_TEMPLATE = "{{ name }}"


class TemplateRenderer:
    """Compiles the output template once and renders resolved names with it."""

    def __init__(self, template: str = DEFAULT_TEMPLATE):
        """
        :param template: Jinja2 template source, e.g. ``"{{ name }}"``
        :raises RenderError: If the template does not compile
        """
        self.logger = logging.getLogger(__name__)
        self.source = template
        self.environment = Environment(undefined=StrictUndefined, autoescape=False)
        try:
            self.template = self.environment.from_string(template)
        except TemplateError as e:
            raise RenderError(f"failed to register template string: {e}") from e
        self.logger.debug(f"Registered template {template!r}")

    def render(self, data: Mapping[str, str]) -> str:
        """
        Render the template with ``data``.

        :raises RenderError: If rendering fails
        """
        try:
            return self.template.render(**data)
        except TemplateError as e:
            raise RenderError(f"failed to render template: {e}") from e
