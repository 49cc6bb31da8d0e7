"""
Placeholder substitution for node text.

Resolves {{ name }} syntax against a flat mapping of variables, without
eval/exec.
"""

import re
from dataclasses import dataclass
from typing import Any, Mapping


@dataclass
class Placeholder:
    """Represents a parsed {{ name }} placeholder."""

    full_match: str
    name: str
    start_pos: int
    end_pos: int


class TemplateRenderer:
    """
    Renders {{ name }} placeholders.

    - Floats render with one decimal place (25.5 -> "25.5", 20 -> "20")
    - Placeholders with no matching variable are left verbatim
    - Whitespace inside the braces is ignored
    """

    # Pattern to match {{ name }}
    PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*([a-zA-Z_][a-zA-Z0-9_\-]*)\s*\}\}")

    def __init__(self, variables: Mapping[str, Any]):
        self.variables = variables

    def render(self, template: str) -> str:
        """Substitute every known placeholder in a string."""
        placeholders = self.find_placeholders(template)
        if not placeholders:
            return template

        result = template
        for placeholder in reversed(placeholders):  # Reverse to maintain positions
            if placeholder.name not in self.variables:
                continue
            value = self.format_value(self.variables[placeholder.name])
            result = result[:placeholder.start_pos] + value + result[placeholder.end_pos:]

        return result

    def find_placeholders(self, template: str) -> list[Placeholder]:
        """Find all placeholders in a string."""
        return [
            Placeholder(
                full_match=match.group(0),
                name=match.group(1),
                start_pos=match.start(),
                end_pos=match.end(),
            )
            for match in self.PLACEHOLDER_PATTERN.finditer(template)
        ]

    def missing_variables(self, template: str) -> list[str]:
        """Names referenced by the template that have no variable."""
        missing = []
        for placeholder in self.find_placeholders(template):
            if placeholder.name not in self.variables and placeholder.name not in missing:
                missing.append(placeholder.name)
        return missing

    @staticmethod
    def format_value(value: Any) -> str:
        if isinstance(value, float):
            return f"{value:.1f}"
        if value is None:
            return ""
        return str(value)


def render_template(template: str, variables: Mapping[str, Any]) -> str:
    """Convenience wrapper around TemplateRenderer.render."""
    return TemplateRenderer(variables).render(template)
