"""
Jinja2 rendering of type declarations.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import jinja2

from ...utils import docstring_text


class TemplateRenderer:
    """Loads the declaration templates of the generated language."""

    # Template directory name
    TEMPLATE_LANG: str = "python"

    # File extension
    FILE_EXTENSION: str = "py"

    def __init__(self):
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
        )
        self.jinja_env.filters["docstring"] = docstring_text

    def render(self, template: str, **context: Any) -> str:
        """
        Render one template.

        Args:
            template: Template name without extension (``structure``, ``enum``...)
            **context: Template variables

        Returns:
            The rendered fragment without surrounding blank lines
        """
        jinja_template = self.jinja_env.get_template(f"{template}.{self.FILE_EXTENSION}.jinja2")
        return jinja_template.render(**context).strip("\n")
