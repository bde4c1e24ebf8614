"""sitekeeper - maintenance pipeline for static content sites."""

__version__ = "1.0.0"

GENERATOR_NAME = "sitekeeper"
