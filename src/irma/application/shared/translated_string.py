from __future__ import annotations

from .serializers import WireModel


class TranslatedString(WireModel):
    """Text shown to the user, in English and Dutch.

    Other locales the server may include are dropped on decode.
    """

    en: str
    nl: str
