from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class TemplateStyles:
    background_color: str
    text_color: str
    axis_color: str
    grid_color: str
    bar_radius: int
    font_family: str
    font_size: int


@dataclass(frozen=True)
class Template:
    id: str
    name: str
    styles: TemplateStyles
    palette: Tuple[str, ...]


BUILTIN_TEMPLATES: Tuple[Template, ...] = (
    Template(
        id="clean-default",
        name="Clean Default",
        styles=TemplateStyles(
            background_color="#FFFFFF",
            text_color="#1F2937",
            axis_color="#6B7280",
            grid_color="#E5E7EB",
            bar_radius=4,
            font_family="Segoe UI, Roboto, sans-serif",
            font_size=13,
        ),
        palette=("#3B82F6", "#10B981", "#F59E0B", "#EF4444", "#8B5CF6", "#EC4899", "#06B6D4"),
    ),
    Template(
        id="corporate-blue",
        name="Corporate Blue",
        styles=TemplateStyles(
            background_color="#F0F4F8",
            text_color="#1E3A5F",
            axis_color="#4A6FA5",
            grid_color="#CBD5E1",
            bar_radius=2,
            font_family="Segoe UI, Roboto, Helvetica Neue, Arial, sans-serif",
            font_size=12,
        ),
        palette=("#1E3A5F", "#2563EB", "#3B82F6", "#60A5FA", "#93C5FD", "#1D4ED8", "#1E40AF"),
    ),
    Template(
        id="minimal-dark",
        name="Minimal Dark",
        styles=TemplateStyles(
            background_color="#1A1A2E",
            text_color="#E0E0E0",
            axis_color="#888888",
            grid_color="#2D2D44",
            bar_radius=6,
            font_family="Inter, SF Pro Display, sans-serif",
            font_size=13,
        ),
        palette=("#00D9FF", "#FF6B6B", "#FFE66D", "#4ECB71", "#A78BFA", "#FB923C", "#F472B6"),
    ),
)


def get_template_by_id(template_id: str) -> Template | None:
    for t in BUILTIN_TEMPLATES:
        if t.id == template_id:
            return t
    return None


def get_default_template() -> Template:
    return BUILTIN_TEMPLATES[0]


def template_to_style_vars(template: Template) -> Dict[str, str]:
    s = template.styles
    return {
        "--tl-bg": s.background_color,
        "--tl-text": s.text_color,
        "--tl-axis": s.axis_color,
        "--tl-grid": s.grid_color,
        "--tl-bar-radius": f"{s.bar_radius}px",
        "--tl-font-family": s.font_family,
        "--tl-font-size": f"{s.font_size}px",
    }
