"""
Similarity Checker - keyword-overlap duplicate detection for doubt titles

Cheap and explainable: a doubt is "similar" to a candidate title when at least
`threshold` of the candidate's keywords appear among the words of its title.

Tokenization:
- lowercase
- split on whitespace and non-word characters ("Newton-Raphson" -> newton, raphson)
Keywords are candidate tokens longer than 2 characters that are not stop
words. Existing titles are tokenized the same way, without the stop-word
filter.

The score counts distinct keywords: repeating a word in the new title
("matrix matrix") counts it once, so repetition alone cannot reach the
threshold.
"""
import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 2
MIN_KEYWORD_LENGTH = 3

STOP_WORDS = frozenset({
    'the', 'is', 'at', 'which', 'on', 'how', 'to', 'for', 'of', 'and', 'in',
    'can', 'you', 'explain', 'what', 'help', 'with', 'a', 'an', 'are', 'why',
    'does', 'do', 'this', 'that', 'from', 'by', 'about', 'between', 'when',
    'where', 'who', 'please', 'any', 'some', 'someone', 'difference',
})

_TOKEN_PATTERN = re.compile(r"[^\W_]+")


def tokenize(title: str) -> List[str]:
    """Lowercased word tokens of a title, in order"""
    return _TOKEN_PATTERN.findall((title or "").lower())


def extract_keywords(title: str) -> List[str]:
    """Distinct keywords of a title, in order of first appearance"""
    seen = []
    for token in tokenize(title):
        if len(token) >= MIN_KEYWORD_LENGTH and token not in STOP_WORDS and token not in seen:
            seen.append(token)
    return seen


@dataclass(frozen=True)
class SimilarityMatch:
    """An existing doubt that overlaps the candidate title"""
    doubt_id: str
    title: str
    score: int
    shared: Tuple[str, ...]


class SimilarityChecker:
    """
    Finds existing doubts whose titles share keywords with a new title.

    Args:
        threshold: Minimum number of shared keywords (default 2)
    """

    def __init__(self, threshold: int = DEFAULT_THRESHOLD):
        if threshold < 1:
            raise ValueError("threshold must be >= 1")
        self.threshold = threshold

    def shared_keywords(self, keywords: Iterable[str], existing_title: str) -> Tuple[str, ...]:
        existing_words = set(tokenize(existing_title))
        return tuple(k for k in keywords if k in existing_words)

    def find_similar(
        self,
        title: str,
        corpus: Sequence[Tuple[str, str]],
    ) -> List[SimilarityMatch]:
        """
        Compare a candidate title against existing titles.

        Args:
            title: Candidate doubt title
            corpus: (doubt_id, title) pairs of existing doubts

        Returns:
            Matches meeting the threshold, highest score first (stable
            otherwise). Empty if the candidate has too few keywords.
        """
        keywords = extract_keywords(title)
        if len(keywords) < self.threshold:
            return []

        matches = []
        for doubt_id, existing_title in corpus:
            shared = self.shared_keywords(keywords, existing_title)
            if len(shared) >= self.threshold:
                matches.append(SimilarityMatch(doubt_id, existing_title, len(shared), shared))

        matches.sort(key=lambda m: m.score, reverse=True)
        if matches:
            logger.debug(f"'{title}' overlaps {len(matches)} doubt(s) on {keywords}")
        return matches

    def is_similar(self, title: str, existing_title: str) -> bool:
        """Pairwise form of find_similar"""
        return bool(self.find_similar(title, [("", existing_title)]))
