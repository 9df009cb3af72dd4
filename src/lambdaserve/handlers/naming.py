from __future__ import annotations

import re

_WORD_SEPARATORS = re.compile(r"[\s_\-]+")


def to_camel_case(text: str) -> str:
    """
    "foo bar-baz_qux" -> "fooBarBazQux".
    First word is lowercased; later words are capitalized. Digits are untouched.
    """
    out: list[str] = []
    for i, word in enumerate(_WORD_SEPARATORS.split(text)):
        if i == 0:
            out.append(word.lower())
        else:
            out.append(word[:1].upper() + word[1:].lower())
    return "".join(out)
