"""Presentation service for generated documents."""

from .app import create_app, render_viewer, run_service

__all__ = ["create_app", "render_viewer", "run_service"]
