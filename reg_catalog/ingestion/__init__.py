"""Ingestion module for loading and saving catalog documents."""

from .loaders import (
    FrameworkLoader,
    LoadError,
    load_framework,
    save_framework,
    load_research_input,
    read_json,
    write_json,
)

__all__ = [
    "FrameworkLoader",
    "LoadError",
    "load_framework",
    "save_framework",
    "load_research_input",
    "read_json",
    "write_json",
]
