# -*- coding: utf-8 -*-
"""
Pydantic schemas shared by the resolver, the extractor and the HTTP layer.

Pydantic v2 compliant.
"""
from __future__ import annotations
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, Field


PROTOCOL_VERSION = "1.0"


# ═══════════════════════════════════════════════════════════════════════════════
# ENUMS
# ═══════════════════════════════════════════════════════════════════════════════


class NotFoundReason(str, Enum):
    UNSUPPORTED_COMPETITOR = "unsupported_competitor"
    NO_RESULTS_PAGE        = "no_results_page"
    NO_CANDIDATES          = "no_candidates"
    BELOW_THRESHOLD        = "below_threshold"
    PRICE_UNPARSABLE       = "price_unparsable"
    NAVIGATION_FAILURE     = "navigation_failure"


class CandidateSource(str, Enum):
    DOM             = "dom"
    STRUCTURED_DATA = "structured_data"


class ExtractStatus(str, Enum):
    OK         = "ok"
    NO_RESULTS = "no_results"
    TIMEOUT    = "timeout"
    ERROR      = "error"


# ═══════════════════════════════════════════════════════════════════════════════
# INPUT
# ═══════════════════════════════════════════════════════════════════════════════


class Product(BaseModel):
    name: str

    def search_term(self, limit: int = 4) -> str:
        """First `limit` whitespace-delimited tokens of the name."""
        return " ".join(self.name.split()[:limit])


class ResolveRequest(BaseModel):
    # validated by the resolver so a malformed product surfaces as a 500
    product:    Optional[Dict[str, Any]] = None
    competitor: Optional[str]            = None


# ═══════════════════════════════════════════════════════════════════════════════
# EXTRACTION
# ═══════════════════════════════════════════════════════════════════════════════


class CandidateItem(BaseModel):
    raw_name:       str
    raw_price_text: str             = ""
    url:            str             = ""
    source:         CandidateSource = CandidateSource.DOM


class ExtractOutcome(BaseModel):
    status:     ExtractStatus       = ExtractStatus.OK
    candidates: List[CandidateItem] = Field(default_factory=list)
    message:    str                 = ""
    search_url: str                 = ""


# ═══════════════════════════════════════════════════════════════════════════════
# OUTPUT
# ═══════════════════════════════════════════════════════════════════════════════


class Found(BaseModel):
    found:        Literal[True] = True
    matched_name: str
    price:        float = Field(ge=0.0, allow_inf_nan=False)
    url:          str
    match_score:  float = Field(ge=0.0, le=1.0)


class NotFound(BaseModel):
    found:  Literal[False] = False
    reason: NotFoundReason
    detail: str = ""


# tagged on `found`
ResolutionResult = Union[Found, NotFound]


class ServiceStatus(BaseModel):
    ok:          bool      = True
    version:     str       = PROTOCOL_VERSION
    competitors: List[str] = Field(default_factory=list)
