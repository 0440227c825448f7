"""Configuration bundle generation and writing."""

from .generator import ConfigBundleGenerator, write_bundle

__all__ = ["ConfigBundleGenerator", "write_bundle"]
