"""Project model for templating."""

from .model import Project

__all__ = ["Project"]
