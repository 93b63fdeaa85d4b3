"""Jinja2 rendering for prompt payloads."""

from jinja2 import StrictUndefined, Template
from jinja2.sandbox import SandboxedEnvironment


class TemplateRenderer:
    """Sandboxed Jinja2 renderer.

    Templates are compiled on first use and kept. Missing variables raise,
    so a prompt is never sent with a silently empty field.

    Usage:
        from compressed_shell.utils.template import renderer
        prompt = renderer.render("COMMAND: {{ command }}", command="make")
    """

    def __init__(self) -> None:
        self.env = SandboxedEnvironment(
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self._compiled: dict[str, Template] = {}

    def compile(self, template_str: str) -> Template:
        template = self._compiled.get(template_str)
        if template is None:
            try:
                template = self.env.from_string(template_str)
            except Exception as e:
                raise ValueError(f"Template compilation error: {e}") from e
            self._compiled[template_str] = template
        return template

    def render(self, template_str: str, **context) -> str:
        """Render ``template_str`` with ``context``.

        Raises:
            ValueError: If template compilation or rendering fails
        """
        try:
            return self.compile(template_str).render(**context)
        except ValueError:
            raise
        except Exception as e:
            raise ValueError(
                f"Template render error: {e} "
                f"(context keys: {sorted(context)})"
            ) from e


renderer = TemplateRenderer()
