"""
Translation hook for user-visible strings.

All text that ends up in front of a user (plan notes, filter summary,
statistics labels) goes through ``translate``.  A front end installs a
``gettext`` translation once at start-up; until then the text is
returned unchanged.
"""

import gettext
from typing import Optional

_translation = gettext.NullTranslations()


def install_translation(translation: gettext.NullTranslations) -> None:
    """Route all subsequent ``translate`` calls through *translation*."""
    global _translation
    _translation = translation if translation is not None else gettext.NullTranslations()


def translate(text: str, context: Optional[str] = None) -> str:
    """Translate *text*, optionally disambiguated by a message *context*."""
    if context is None:
        return _translation.gettext(text)
    return _translation.pgettext(context, text)
