"""
Fenced code block extraction.

Grammar of a fenced block::

    ```<tag>\\n
    <body>
    ```

``<tag>`` is the language identifier directly after the opening fence
(matched case-insensitively, trailing spaces allowed before the newline).
The body runs up to the next three-backtick fence. Blocks are read left
to right in pairs, so a closing fence is never mistaken for an opening
one.
"""

import re
from typing import Iterable, List, Optional

DEFAULT_LANGUAGES = ("python", "py")

FENCE_PATTERN = re.compile(
    r"```(?P<tag>[^\s`]*)[ \t]*\r?\n(?P<body>.*?)```",
    re.DOTALL,
)


def _normalize(languages: Iterable[str]) -> set:
    return {lang.strip().lower() for lang in languages}


def extract_all_code_blocks(
    text: str,
    languages: Iterable[str] = DEFAULT_LANGUAGES,
) -> List[str]:
    """
    Extract every fenced block tagged with one of ``languages``.

    Args:
        text: Model reply
        languages: Accepted language tags

    Returns:
        Stripped block bodies, in order of appearance
    """
    accepted = _normalize(languages)
    return [
        match.group("body").strip()
        for match in FENCE_PATTERN.finditer(text or "")
        if match.group("tag").lower() in accepted
    ]


def extract_code_block(
    text: str,
    languages: Iterable[str] = DEFAULT_LANGUAGES,
) -> Optional[str]:
    """
    Extract the first fenced block tagged with one of ``languages``.

    Args:
        text: Model reply
        languages: Accepted language tags

    Returns:
        Stripped body of the first matching block, or None
    """
    blocks = extract_all_code_blocks(text, languages)
    if not blocks or not blocks[0]:
        return None
    return blocks[0]
