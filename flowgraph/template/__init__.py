"""Template rendering for node descriptions and email content."""

from flowgraph.template.resolver import TemplateRenderer, render_template

__all__ = ["TemplateRenderer", "render_template"]
