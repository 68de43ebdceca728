"""Species name and form normalization.

Turns free-text names such as "Moltres [Galarian Form]", "Corviknight Shadow",
"Scizor (Shadow)" or "Galarian Moltres" into a base name, an optional form
qualifier and a shadow flag. Everything here is pure and never raises.
"""

import re
import unicodedata
from dataclasses import dataclass
from typing import Optional

from .constants import DISTINCT_FORMS, REGION_SYNONYMS

_QUALIFIER_RE = re.compile(r'[\(\[]([^\(\)\[\]]*)[\)\]]')
_BRACKET_CHARS = set('()[]')
_SHADOW = 'shadow'


@dataclass(frozen=True)
class NormalizedName:
    """Result of normalizing a free-text species name."""
    base_name: str
    form: Optional[str] = None
    is_shadow: bool = False

    @property
    def species_key(self) -> str:
        return species_key(self.base_name, self.form)

    @property
    def display_name(self) -> str:
        return display_name(self.base_name, self.form)


def canonical_form(qualifier: str) -> str:
    """
    Map a form qualifier to its canonical token.

    Regional qualifiers collapse to one adjective per region. Only a whole
    qualifier (optionally followed by "Form") counts as a region, so
    "Alola Cap" stays a form of its own. Everything else is returned
    verbatim, lowercased.

    Examples:
        "Galarian Form" -> "galarian"
        "Alola" -> "alolan"
        "Forma de Galar" -> "galarian"
        "Alola Cap" -> "alola cap"
        "Foo Bar" -> "foo bar"
    """
    cleaned = ' '.join(qualifier.lower().split())
    if cleaned in REGION_SYNONYMS:
        return REGION_SYNONYMS[cleaned]
    for suffix in (' form', ' forme'):
        if cleaned.endswith(suffix) and cleaned[:-len(suffix)] in REGION_SYNONYMS:
            return REGION_SYNONYMS[cleaned[:-len(suffix)]]
    return cleaned


def normalize_species_name(raw) -> NormalizedName:
    """
    Normalize a free-text species name.

    Examples:
        "Moltres [Galarian Form]" -> ("Moltres", "galarian", False)
        "Corviknight Shadow" -> ("Corviknight", None, True)
        "Ninetales (Alolan) (Shadow)" -> ("Ninetales", "alolan", True)
        "Shadow Galarian Stunfisk" -> ("Stunfisk", "galarian", True)
    """
    if not isinstance(raw, str):
        return NormalizedName('')

    text = ' '.join(raw.split())
    if not text:
        return NormalizedName('')

    is_shadow = False
    if text.lower().startswith(_SHADOW + ' '):
        is_shadow = True
        text = text[len(_SHADOW) + 1:]

    qualifiers = _QUALIFIER_RE.findall(text)
    remainder = _QUALIFIER_RE.sub(' ', text)

    # Unbalanced brackets: keep the literal text as the base name
    if any(ch in _BRACKET_CHARS for ch in remainder):
        tokens = text.split()
        while len(tokens) > 1 and tokens[-1].lower() == _SHADOW:
            is_shadow = True
            tokens.pop()
        return NormalizedName(' '.join(tokens), None, is_shadow)

    tokens = remainder.split()
    kept = []
    for index, token in enumerate(tokens):
        if index > 0 and token.lower() == _SHADOW:
            is_shadow = True
            continue
        kept.append(token)

    form = None
    if len(kept) > 1 and kept[0].lower() in REGION_SYNONYMS:
        form = REGION_SYNONYMS[kept[0].lower()]
        kept = kept[1:]

    for qualifier in qualifiers:
        cleaned = ' '.join(qualifier.split())
        if not cleaned:
            continue
        if cleaned.lower() == _SHADOW:
            is_shadow = True
            continue
        if form is None:
            form = canonical_form(cleaned)

    return NormalizedName(' '.join(kept), form, is_shadow)


def _key_part(text: str) -> str:
    folded = unicodedata.normalize('NFKD', text)
    folded = ''.join(ch for ch in folded if not unicodedata.combining(ch)).lower()
    folded = re.sub(r'[\s\-]+', '_', folded)
    folded = re.sub(r'[^a-z0-9_]', '', folded)
    return re.sub(r'_+', '_', folded).strip('_')


def species_key(base_name: str, form: Optional[str] = None) -> str:
    """Build a species key, e.g. ("Moltres", "galarian") -> "moltres_galarian"."""
    key = _key_part(base_name or '')
    if form:
        form_part = _key_part(form)
        if form_part:
            return f'{key}_{form_part}' if key else form_part
    return key


def _capitalize_words(text: str) -> str:
    return ' '.join(word[:1].upper() + word[1:] for word in text.split())


def display_name(base_name: str, form: Optional[str] = None) -> str:
    """Build a display name, e.g. ("moltres", "galarian") -> "Moltres (Galarian)"."""
    name = _capitalize_words(base_name or '')
    if form:
        return f'{name} ({_capitalize_words(form)})' if name else _capitalize_words(form)
    return name


def split_species_key(key: str) -> tuple[str, Optional[str]]:
    """
    Split a species key into (base, form).

    Known forms are matched from the longest suffix first so that
    "darmanitan_galarian_zen" keeps "galarian_zen" together; otherwise the
    last underscore separates base and form.

    Examples:
        "moltres_galarian" -> ("moltres", "galarian")
        "altaria" -> ("altaria", None)
    """
    key = (key or '').strip().lower()
    if '_' not in key:
        return key, None

    known_forms = DISTINCT_FORMS | set(REGION_SYNONYMS.values())
    for index, char in enumerate(key):
        if char == '_' and key[index + 1:] in known_forms and index > 0:
            return key[:index], key[index + 1:]

    base, _, form = key.rpartition('_')
    if not base or not form:
        return key.strip('_'), None
    return base, form
