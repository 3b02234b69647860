"""
Placeholder rules for each questionnaire kind.

This module registers the built-in rulebooks; the transformer looks them
up by name.
"""

from .base import RuleContext, used_features
from .registry import (
    Rulebook,
    register_rulebook,
    get_rulebook,
    list_rulebooks,
    unregister_rulebook,
)
from . import data, infrastructure, process, service, system

DEFAULT_RULEBOOK = "system"

for _module in (system, process, service, infrastructure, data):
    register_rulebook(_module.RULEBOOK)

__all__ = [
    "DEFAULT_RULEBOOK",
    "Rulebook",
    "RuleContext",
    "register_rulebook",
    "get_rulebook",
    "list_rulebooks",
    "unregister_rulebook",
    "used_features",
]
