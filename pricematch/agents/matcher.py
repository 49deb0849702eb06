from __future__ import annotations
import re
import unicodedata
from typing import Iterable, Optional, Set, Tuple

from pricematch.schemas import CandidateItem
from pricematch.utils.logger import get_logger

logger = get_logger(__name__)

_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")
_SPACES_RE    = re.compile(r"\s+")
_MIN_TOKEN_LEN = 3


def normalize(text: Optional[str]) -> str:
    """Lowercase, strip accents, keep only [a-z0-9] words separated by one space."""
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text.lower())
    stripped   = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    cleaned    = _NON_ALNUM_RE.sub(" ", stripped)
    return _SPACES_RE.sub(" ", cleaned).strip()


def _tokens(text: Optional[str]) -> Set[str]:
    return {w for w in normalize(text).split(" ") if len(w) >= _MIN_TOKEN_LEN}


def similarity(query: Optional[str], candidate: Optional[str]) -> float:
    """
    Share of the query's tokens (len > 2) that appear in the candidate.

    Directional: extra tokens in the candidate are not penalised, so
    similarity("vitamina c", "vitamina c efervescente") == 1.0.
    """
    q = _tokens(query)
    if not q:
        return 0.0
    return len(q & _tokens(candidate)) / len(q)


def select_best(
    candidates: Iterable[CandidateItem], query: str,
) -> Tuple[Optional[CandidateItem], float]:
    best: Optional[CandidateItem] = None
    best_score = -1.0
    for cand in candidates:
        score = similarity(query, cand.raw_name)
        logger.debug("score=%.2f | %s", score, cand.raw_name[:60])
        # strict '>' keeps the first candidate on ties
        if score > best_score:
            best, best_score = cand, score
    return best, max(best_score, 0.0)
