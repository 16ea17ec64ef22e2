"""Turns catalog templates into caller-facing section code."""

import logging
import re
from collections.abc import Mapping
from typing import Any

from sectionforge.interfaces.catalog import Template, VariableDefinition
from sectionforge.interfaces.sink import GeneratedArtifact
from sectionforge.strategies.liquid import (
    clean_section_name,
    cut_unclosed_schema,
    find_schema_blocks,
    parse_schema,
    render_schema_block,
    strip_schema_blocks,
)

logger = logging.getLogger(__name__)

SCHEMA_TYPES = {"color": "color", "textarea": "textarea"}


def schema_type_for(variable_type: str) -> str:
    """Map a variable type to a theme-editor setting type."""
    return SCHEMA_TYPES.get((variable_type or "").lower(), "text")


def _substitute(body: str, key: str, value: str) -> str:
    pattern = re.compile(r"\{\{\s*" + re.escape(key) + r"\s*\}\}")
    return pattern.sub(lambda _m: value, body)


def _setting_for(key: str, variable: VariableDefinition) -> dict[str, Any]:
    setting: dict[str, Any] = {
        "type": schema_type_for(variable.type),
        "id": key,
        "label": variable.label or key,
    }
    if variable.default not in (None, ""):
        if variable.type != "color" or isinstance(variable.default, str):
            setting["default"] = variable.default
    if variable.description:
        setting["info"] = variable.description
    return setting


class SectionAssembler:
    """Renders templates and guarantees a single configuration block."""

    def uses_placeholders(self, template: Template) -> bool:
        return "{{" in template.body and "section.settings" not in template.body

    def render(self, template: Template, customizations: Mapping[str, Any] | None = None) -> str:
        """Substitute ``{{name}}`` placeholders in a template body.

        Customization values win over variable defaults. Bodies that read
        ``section.settings`` directly are returned untouched.

        Args:
            template: Template to render.
            customizations: Optional variable values.

        Returns:
            The rendered body.
        """
        body = template.body
        if not self.uses_placeholders(template):
            return body

        customizations = customizations or {}
        for key, value in customizations.items():
            body = _substitute(body, key, str(value))

        for key, variable in template.variables.items():
            if key in customizations:
                continue
            body = _substitute(body, key, "" if variable.default is None else str(variable.default))

        return body

    def generate_schema_tag(self, template: Template) -> str:
        """Build a configuration block from the template's variables."""
        schema = {
            "name": clean_section_name(template.name),
            "tag": "section",
            "class": "section",
            "settings": [_setting_for(key, var) for key, var in template.variables.items()],
        }
        return render_schema_block(schema)

    def assemble(self, template: Template, customizations: Mapping[str, Any] | None = None) -> str:
        """Return the full section code with exactly one configuration block."""
        body = cut_unclosed_schema(self.render(template, customizations))
        blocks = find_schema_blocks(body)

        if len(blocks) == 1 and parse_schema(blocks[0].group(0)) is not None:
            return body

        if blocks:
            kept = next((b.group(0) for b in blocks if parse_schema(b.group(0)) is not None), None)
            body = strip_schema_blocks(body).rstrip()
            if kept is not None:
                logger.debug(f"Template {template.id}: dropped {len(blocks) - 1} extra configuration block(s)")
                return f"{body}\n\n{kept}\n"

        return f"{body.rstrip()}\n\n{self.generate_schema_tag(template)}\n"

    def to_artifact(self, template: Template, customizations: Mapping[str, Any] | None = None) -> GeneratedArtifact:
        return GeneratedArtifact(
            body=self.assemble(template, customizations),
            id=template.id,
            name=clean_section_name(template.name),
            description=template.description,
            preview_ref=template.preview_ref,
            source="library",
        )
