"""templating - materialize template sources into a generated source root."""

__version__ = "0.1.0"
