"""
Rulebook registry.

Each questionnaire kind (system, process, service, ...) has its own
rulebook, a table from placeholder name to rule. The transformer picks
one by name, the CLI lists them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from .base import Rule


@dataclass(frozen=True)
class Rulebook:
    """Named table of placeholder rules."""
    name: str
    description: str
    rules: Mapping[str, Rule] = field(default_factory=dict)

    def get(self, placeholder: str) -> Optional[Rule]:
        return self.rules.get(placeholder)

    @property
    def tables(self) -> List[str]:
        """Placeholders whose rule builds table rows, sorted."""
        return sorted(name for name, rule in self.rules.items() if getattr(rule, "is_table", False))

    def __contains__(self, placeholder: object) -> bool:
        return placeholder in self.rules

    def __len__(self) -> int:
        return len(self.rules)


# Global rulebook registry
_RULEBOOK_REGISTRY: Dict[str, Rulebook] = {}


def register_rulebook(rulebook: Rulebook) -> None:
    """
    Register a rulebook under its name, replacing any previous one.

    Args:
        rulebook: The rulebook to register
    """
    _RULEBOOK_REGISTRY[rulebook.name] = rulebook


def get_rulebook(name: str) -> Optional[Rulebook]:
    """
    Get a rulebook by name.

    Args:
        name: The rulebook name (e.g., "system", "process")

    Returns:
        The rulebook, or None if not found
    """
    return _RULEBOOK_REGISTRY.get(name)


def list_rulebooks() -> List[Dict[str, str]]:
    """
    List all registered rulebooks.

    Returns:
        List of dicts with 'name' and 'description' keys, sorted by name
    """
    return sorted(
        ({"name": rb.name, "description": rb.description} for rb in _RULEBOOK_REGISTRY.values()),
        key=lambda x: x["name"],
    )


def unregister_rulebook(name: str) -> None:
    """
    Unregister a rulebook from the global registry.

    Args:
        name: The rulebook name to unregister
    """
    _RULEBOOK_REGISTRY.pop(name, None)


__all__ = [
    "Rulebook",
    "register_rulebook",
    "get_rulebook",
    "list_rulebooks",
    "unregister_rulebook",
]
