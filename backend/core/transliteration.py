"""
Transliteration Mapper - Georgian to Latin Variant Generation

Maps Georgian (Mkhedruli) letters to a Latin base transcription and expands
it into the spelling variants commonly found in romanized word lists:
- Ejective marking (k' t' p' q') added or stripped
- Affricate spellings (c / ts / ts', ch / c / ch')

The rules over-generate on purpose. They enumerate lookup keys for recall;
they are not a phonological model.
"""

import re
from typing import Dict, List

# ===== Character Table =====

GEORGIAN_TO_LATIN: Dict[str, str] = {
    'ა': 'a', 'ბ': 'b', 'გ': 'g', 'დ': 'd', 'ე': 'e', 'ვ': 'v', 'ზ': 'z', 'თ': 't',
    'ი': 'i', 'კ': 'k', 'ლ': 'l', 'მ': 'm', 'ნ': 'n', 'ო': 'o', 'პ': 'p', 'ჟ': 'zh',
    'რ': 'r', 'ს': 's', 'ტ': 't', 'უ': 'u', 'ფ': 'f', 'ქ': 'k', 'ღ': 'gh', 'ყ': 'q',
    'შ': 'sh', 'ჩ': 'ch', 'ც': 'c', 'ძ': 'dz', 'წ': 'c', 'ჭ': 'ch', 'ხ': 'x', 'ჯ': 'j', 'ჰ': 'h',
}

GEORGIAN_BLOCK = re.compile('[\u10A0-\u10FF]')

EJECTIVE_CONSONANTS = 'ktpq'
_ADD_EJECTIVE = re.compile(f'([{EJECTIVE_CONSONANTS}])')
_STRIP_EJECTIVE = re.compile(f"([{EJECTIVE_CONSONANTS}])'")

# (pattern, replacement) pairs applied independently to the base form
AFFRICATE_SUBSTITUTIONS = [
    ('c', 'ts'),
    ('c', "ts'"),
    ('ch', 'c'),
    ('ch', "ch'"),
]


def map_character(char: str) -> str:
    """Latin transcription of one character; unmapped characters pass through"""
    return GEORGIAN_TO_LATIN.get(char, char)


def transliterate(word: str) -> str:
    """Base Latin transcription of a (lowercased) word"""
    return ''.join(map_character(char) for char in word.lower())


def contains_georgian(text: str) -> bool:
    """True if any character falls in the Georgian Unicode block"""
    return isinstance(text, str) and GEORGIAN_BLOCK.search(text) is not None


def generate_variants(word: str) -> List[str]:
    """
    Generate Latin lookup variants for a Georgian word

    Args:
        word: Word to transcribe, typically in Georgian script

    Returns:
        Distinct non-empty variants, base transcription first. Order follows
        generation so lookups over the list are reproducible.
    """
    if not word or not isinstance(word, str):
        return []

    base = transliterate(word)

    candidates = [
        base,
        _ADD_EJECTIVE.sub(r"\1'", base),
        _STRIP_EJECTIVE.sub(r'\1', base),
    ]
    for pattern, replacement in AFFRICATE_SUBSTITUTIONS:
        candidates.append(base.replace(pattern, replacement))

    return [variant for variant in dict.fromkeys(candidates) if variant]
