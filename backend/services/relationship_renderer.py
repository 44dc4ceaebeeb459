"""
Relationship template rendering

Relationship types carry a display template with positional placeholders,
one per participant in position order:

    "{0} wrote {1}"  ->  '<a href="/creator/...">Ann</a> wrote <a href="/work/...">Book</a>'

Rendering is pure: same participants, template and context give the same
string.
"""
from html import escape
from string import Formatter
from typing import Optional, Sequence, Mapping

from models.entity import Entity
from utils.errors import RenderError

_formatter = Formatter()


def _render_attrs(context: Optional[Mapping[str, str]]) -> str:
    if not context:
        return ""
    return "".join(
        f' {escape(str(name))}="{escape(str(value))}"'
        for name, value in sorted(context.items())
    )


def render_entity_link(entity: Entity, context: Optional[Mapping[str, str]] = None) -> str:
    """Anchor linking to the entity page, labelled with its display name"""
    return (
        f'<a href="{escape(entity.path)}"{_render_attrs(context)}>'
        f'{escape(entity.name)}</a>'
    )


def render_relationship(
    entities: Sequence[Entity],
    template: str,
    context: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Render a relationship for display.

    Args:
        entities: Resolved participants, already in position order
        template: Relationship type template ("{0} wrote {1}")
        context: Extra HTML attributes for every entity link, or None

    Returns:
        HTML string

    Raises:
        RenderError: template is malformed or references a missing participant
    """
    if template is None:
        raise RenderError("Relationship has no template")

    try:
        parsed = list(_formatter.parse(template))
    except ValueError as e:
        raise RenderError(f"Malformed relationship template {template!r}: {e}") from e

    parts = []
    for literal_text, field_name, _format, _conversion in parsed:
        if literal_text:
            parts.append(escape(literal_text))
        if field_name is None:
            continue

        if not (field_name.isascii() and field_name.isdigit()):
            raise RenderError(
                f"Template placeholder {{{field_name}}} is not a participant index"
            )
        index = int(field_name)
        if index >= len(entities):
            raise RenderError(
                f"Template {template!r} needs participant {index} "
                f"but relationship has {len(entities)}"
            )
        parts.append(render_entity_link(entities[index], context))

    return "".join(parts)
