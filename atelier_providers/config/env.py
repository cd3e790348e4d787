"""Credential environment variables per provider.

Each provider has an ordered list of variable names; the first one holding a
real value wins. Gemini also accepts ``GOOGLE_API_KEY``. Values that are
obviously template text (``your-...``, ``changeme``, ``placeholder``) are
treated as unset, so a copied ``.env.example`` never reaches the wire.
"""

from __future__ import annotations

import os
from typing import Dict, Optional, Sequence, Tuple

KEY_VARIABLES: Dict[str, Sequence[str]] = {
    "openai": ("OPENAI_API_KEY",),
    "openrouter": ("OPENROUTER_API_KEY",),
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
}

_TEMPLATE_MARKERS = ("placeholder", "changeme")


def is_placeholder(value: Optional[str]) -> bool:
    """True for template values such as ``your-key-here`` or ``CHANGEME``."""
    if not value:
        return False
    lowered = value.strip().lower()
    return lowered.startswith("your-") or any(marker in lowered for marker in _TEMPLATE_MARKERS)


def key_variables(provider: str) -> Sequence[str]:
    return KEY_VARIABLES.get((provider or "").lower(), ())


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(key, variable_name)`` or ``(None, None)`` when nothing usable is set."""
    found = (
        (os.environ[name], name)
        for name in key_variables(provider)
        if os.environ.get(name) and not is_placeholder(os.environ[name])
    )
    return next(found, (None, None))


__all__ = ["KEY_VARIABLES", "is_placeholder", "key_variables", "resolve_provider_key"]
