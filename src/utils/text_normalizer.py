"""Text normalization utilities for ticket fields and export filenames.

Three concerns live here:

1. **Slugs** -- artist names become filename-safe slugs for exported
   tickets ("Harry  Styles" -> "harry-styles").
2. **Supporting-act lists** -- openers returned by the detail lookup are
   joined into the free-text ``supporting_artists`` field.
3. **Header-safe filenames** -- an ASCII rendition of an export filename
   for HTTP headers, which only carry latin-1.
"""

import re
import unicodedata

_WHITESPACE_RE = re.compile(r"\s+")

# Characters that are unsafe in filenames on at least one major platform.
_UNSAFE_FILENAME_RE = re.compile(r'[\\/:*?"<>|]')
_HYPHEN_RUN_RE = re.compile(r"-{2,}")


def slugify(text: str) -> str:
    """Lowercase *text* and collapse each whitespace run into one hyphen.

    Leading/trailing whitespace is dropped first, so ``"  Harry Styles "``
    becomes ``"harry-styles"``.  Filename-unsafe characters are removed.
    """
    slug = _WHITESPACE_RE.sub("-", text.strip().lower())
    return _UNSAFE_FILENAME_RE.sub("", slug)


def join_artist_names(names: list[str]) -> str:
    """Join opener names with ``", "`` for the supporting-artists field."""
    return ", ".join(names)



def ascii_filename(filename: str) -> str:
    """Return an ASCII-only form of *filename*.

    Accents are decomposed and dropped (``"Björk"`` -> ``"Bjork"``); any other
    non-ASCII character is removed and the hyphen runs that leaves behind are
    collapsed, so ``"ticket-кино-3-5-2024.png"`` becomes
    ``"ticket-3-5-2024.png"``.
    """
    decomposed = unicodedata.normalize("NFKD", filename)
    text = decomposed.encode("ascii", "ignore").decode("ascii")
    return _HYPHEN_RUN_RE.sub("-", text)
