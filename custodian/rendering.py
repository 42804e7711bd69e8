"""
Template rendering for TemplateStep.

Placeholders are substituted literally: no HTML escaping is applied, and a
placeholder with no matching context key renders as empty text.
"""

from typing import Any, Mapping

from jinja2 import Environment, Undefined

_environment = Environment(
    autoescape=False,
    keep_trailing_newline=True,
    undefined=Undefined,
)


def render(template: str, context: Mapping[str, Any]) -> str:
    """Render ``template`` with the values in ``context``."""
    return _environment.from_string(template).render(dict(context))
