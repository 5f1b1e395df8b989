"""
Addon classifier - decides whether an addon is a cover, formatting or ISBN line.

The catalog's explicit ``type`` tag is authoritative. When it is missing
(older catalog records), a slug/name text match is used as a heuristic
fallback. An explicit tag of a different kind is never overridden by the text.
"""
from typing import Optional

from .models import Addon

# Substring heuristics, applied to "<slug> <name>" lowercased
_KEYWORDS = {
    'cover': 'cover',
    'formatting': 'format',
    'isbn': 'isbn',
}


def _fingerprint(addon: Addon) -> str:
    return f"{addon.slug} {addon.name}".lower()


def classify(addon: Addon) -> str:
    """Return the addon's kind: cover, formatting, isbn or other."""
    if addon.type:
        return addon.type

    # Heuristic fallback for untagged addons
    fingerprint = _fingerprint(addon)
    for kind, keyword in _KEYWORDS.items():
        if keyword in fingerprint:
            return kind
    return 'other'


def is_cover_addon(addon: Addon) -> bool:
    return classify(addon) == 'cover'


def is_formatting_addon(addon: Addon) -> bool:
    return classify(addon) == 'formatting'


def is_isbn_addon(addon: Addon) -> bool:
    return classify(addon) == 'isbn'


def find_addon(addons, kind: str) -> Optional[Addon]:
    """First addon of the given kind, in selection order."""
    for addon in addons:
        if classify(addon) == kind:
            return addon
    return None
