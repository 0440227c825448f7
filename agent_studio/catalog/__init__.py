"""Capability catalog: agent descriptors and the static tables around them."""

from .catalog import CapabilityCatalog
from .models import (
    AdditionValidation,
    AgentDescriptor,
    AgentDomain,
    CapabilitySuggestion,
    CatalogError,
)

__all__ = [
    "AdditionValidation",
    "AgentDescriptor",
    "AgentDomain",
    "CapabilityCatalog",
    "CapabilitySuggestion",
    "CatalogError",
]
