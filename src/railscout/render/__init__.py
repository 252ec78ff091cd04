"""SVG rendering of rail networks."""

from railscout.render.style import Theme
from railscout.render.svg import render_svg

__all__ = ["Theme", "render_svg"]
