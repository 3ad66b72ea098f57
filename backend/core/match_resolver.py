"""
Match Resolver - Word to Reference Entry Lookup

Resolves one query word against a loaded reference dictionary:
1. Exact lookup of the lowercased, trimmed word
2. Transliteration variants, only when (1) found nothing and the word
   contains Georgian characters
3. Deduplication by lemma, first occurrence kept
"""

from typing import Any, List
import logging

from .models import Match
from .reference_indexer import ReferenceData, normalize_form
from .transliteration import contains_georgian, generate_variants

logger = logging.getLogger(__name__)


def deduplicate_by_lemma(matches: List[Match]) -> List[Match]:
    """Keep the first match for each distinct lemma value"""
    seen = set()
    unique = []
    for match in matches:
        if match.lemma in seen:
            continue
        seen.add(match.lemma)
        unique.append(match)
    return unique


class MatchResolver:
    """Finds reference entries for query words; pure and read-only"""

    def __init__(self, reference: ReferenceData):
        self.reference = reference

    def find_matches(self, word: Any) -> List[Match]:
        """
        Find reference entries for a word

        Args:
            word: Query word; anything that is not a non-empty string
                yields no matches

        Returns:
            Matches deduplicated by lemma (empty when nothing matched)
        """
        if not word or not isinstance(word, str):
            return []

        search_word = normalize_form(word)
        if not search_word:
            return []

        matches = self._lookup(search_word)

        if not matches and contains_georgian(search_word):
            for variant in generate_variants(search_word):
                matches.extend(self._lookup(variant, variant=variant))

        return deduplicate_by_lemma(matches)

    def _lookup(self, form: str, variant: str = None) -> List[Match]:
        return [
            Match(entry=self.reference.entry_at(position), transliteration_variant=variant)
            for position in self.reference.index.lookup(form)
        ]
