"""
Renderers for a laid-out scene.
"""
from .html import EdgeData, NodeData, RenderConfig, SceneRenderer, render_html
from .static import render_png, scene_positions

__all__ = [
    "EdgeData",
    "NodeData",
    "RenderConfig",
    "SceneRenderer",
    "render_html",
    "render_png",
    "scene_positions",
]
