"""Punctuation and casing helpers for field text.

None of the search pipeline depends on this module. The helpers are useful
either before a search, as the engine's ``normalizer`` hook (padding
punctuation lets whitespace tokens match bare words: ``"world,"`` becomes
``"world ,"``), or afterwards to tidy matched text for display.

Rules applied by format_text_punctuation:
- ``,`` and ``:`` between two digits are data (``1,000``, ``3:16``) and left alone
- ``,`` after a digit and before a space gets a leading space (``1997 , the``)
- ``,`` ``:`` ``;`` between non-digits are padded on both sides
- ``.`` ``?`` ``!`` after a word get a leading space, except inside numbers,
  inside runs such as ``...`` and, away from the end of the text, after
  capitals (acronyms, ALLCAPS)
- Optionally, a space following ``.`` ``?`` ``!`` becomes ``_`` so sentence
  breaks survive whitespace tokenization (``._``, ``?_``, ``!_``)
"""

from __future__ import annotations

import re


VOWELS = frozenset("aáàâãäåeéèêëiíìîïoóòôõöuúùûüh" "æœø")
SPACING_PUNCTUATION = frozenset(",:;")
SENTENCE_PUNCTUATION = frozenset(".?!")
ALL_PUNCTUATION = SPACING_PUNCTUATION | SENTENCE_PUNCTUATION

BREAKING_SENTENCES = (". ", "? ", "! ")
NONBREAKING_SENTENCES = ("._", "?_", "!_")

# Spaces directly before punctuation (removed when unformatting)
SPACE_BEFORE_PUNCTUATION = re.compile(r" +(?=[,:;.?!])")


def format_text_punctuation(text: str, nonbreaking_sentences: bool = False) -> str:
    """Separate punctuation from the words around it.

    Args:
        text: Text to format
        nonbreaking_sentences: Replace the space after ``.``, ``?`` and ``!``
            with ``_``

    Returns:
        Formatted text; unformat_text_punctuation reverses it.
    """
    out: list[str] = []
    last = len(text) - 1
    skip_space_at = -1

    for i, char in enumerate(text):
        if i == skip_space_at:
            out.append("_")
            continue
        if i == 0 or char not in ALL_PUNCTUATION:
            out.append(char)
            continue

        prev = text[i - 1]
        nxt = text[i + 1] if i < last else ""
        digit_before, digit_after = prev.isdigit(), nxt.isdigit()
        space_before = prev.isspace()
        space_after = nxt.isspace() if nxt else False

        if char in SPACING_PUNCTUATION:
            if char == ";" or not (digit_before or digit_after) or not nxt:
                if not space_before:
                    out.append(" ")
                out.append(char)
                if nxt and not space_after:
                    out.append(" ")
            elif char == "," and digit_before and not digit_after and space_after:
                out.append(" ")
                out.append(char)
            else:
                out.append(char)
            continue

        # Sentence punctuation
        if digit_before and digit_after:
            out.append(char)
            continue
        # Acronym and run exemptions apply only before the last character
        interior_exempt = nxt and (prev in SENTENCE_PUNCTUATION or prev.isupper())
        if not space_before and prev != char and not interior_exempt:
            out.append(" ")
        out.append(char)
        if nonbreaking_sentences and space_after:
            skip_space_at = i + 1

    return "".join(out)


def unformat_text_punctuation(text: str) -> str:
    """Remove spaces before punctuation and restore ``._``-style sentence breaks."""
    result = SPACE_BEFORE_PUNCTUATION.sub("", text)
    for nonbreaking, breaking in zip(NONBREAKING_SENTENCES, BREAKING_SENTENCES):
        result = result.replace(nonbreaking, breaking)
    return result


def capitalize_first(text: str) -> str:
    """Uppercase only the first character."""
    if not text:
        return text
    return text[0].upper() + text[1:]


def starts_with_vowel(text: str) -> bool:
    """True when text starts with a vowel sound letter (English a/an rule, plus ``h``)."""
    return bool(text) and text[0].lower() in VOWELS


def spaces_to_underscores(text: str) -> str:
    return text.replace(" ", "_")


def underscores_to_spaces(text: str) -> str:
    return text.replace("_", " ")


def remove_spaces(text: str) -> str:
    return text.replace(" ", "")


def remove_underscores(text: str) -> str:
    return text.replace("_", "")


def break_camel_case(text: str) -> str:
    """Insert spaces before capitals: ``"WithNamesLikeThis"`` -> ``"With Names Like This"``.

    Runs of capitals (acronyms) are kept together and a trailing capital is
    never split off.
    """
    if not text:
        return text
    text = text.strip()
    out: list[str] = []
    for i, char in enumerate(text):
        if 0 < i < len(text) - 1:
            prev = text[i - 1]
            if char.isupper() and not prev.isupper() and not prev.isspace():
                out.append(" ")
        out.append(char)
    return "".join(out)
