from __future__ import annotations
import json
from typing import Any, Iterable, Iterator, List, Optional, Sequence
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag
from pricematch.schemas import CandidateItem, CandidateSource
from pricematch.competitors.registry import SelectorCascade
from pricematch.utils.logger import get_logger

logger = get_logger(__name__)


def first_text(el: Tag, cascade: Sequence[str]) -> str:
    """Text of the first selector in `cascade` that yields non-empty text."""
    for sel in cascade:
        try:
            found = el.select_one(sel)
        except Exception as e:
            logger.debug("Bad selector '%s': %s", sel, e)
            continue
        if found is None:
            continue
        text = found.get_text(" ", strip=True)
        if text:
            return text
    return ""


def first_href(el: Tag, cascade: Sequence[str], base_url: str) -> str:
    for sel in cascade:
        try:
            found = el.select_one(sel)
        except Exception as e:
            logger.debug("Bad selector '%s': %s", sel, e)
            continue
        if found is not None and found.get("href"):
            return urljoin(base_url, found["href"].strip())
    return ""


def extract_cards(
    soup: BeautifulSoup,
    container_sel: Optional[str],
    cascade: SelectorCascade,
    base_url: str,
    limit: int,
) -> List[CandidateItem]:
    if not container_sel:
        return []
    try:
        cards = soup.select(container_sel)
    except Exception as e:
        # Playwright-only syntax (:has-text, >> chains) that soupsieve rejects
        logger.warning("Container selector '%s' not parsable here: %s", container_sel, e)
        return []
    items: List[CandidateItem] = []
    for el in cards[:limit]:
        name = first_text(el, cascade.name)
        if not name:
            continue
        items.append(CandidateItem(
            raw_name=name,
            raw_price_text=first_text(el, cascade.price),
            url=first_href(el, cascade.link, base_url),
            source=CandidateSource.DOM,
        ))
    return items


# ── JSON-LD fallback ──────────────────────────────────────────────────────────


def _nodes(data: Any) -> Iterator[dict]:
    """Flatten top-level arrays and @graph containers into plain nodes."""
    if isinstance(data, list):
        for d in data:
            yield from _nodes(d)
    elif isinstance(data, dict):
        if isinstance(data.get("@graph"), list):
            yield from _nodes(data["@graph"])
        else:
            yield data


def _is_product(node: dict) -> bool:
    t = node.get("@type")
    if isinstance(t, list):
        return "Product" in t
    return t == "Product"


def _offer_price(item: dict) -> str:
    offers = item.get("offers")
    if isinstance(offers, list):
        offers = offers[0] if offers else None
    if not isinstance(offers, dict):
        return ""
    price = offers.get("price", offers.get("lowPrice"))
    return "" if price is None else str(price)


def _products(node: dict) -> Iterable[dict]:
    entries = node.get("itemListElement")
    if isinstance(entries, list):
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            item = entry.get("item", entry)
            if isinstance(item, dict):
                yield item
    elif _is_product(node):
        yield node


def extract_structured_data(
    soup: BeautifulSoup, base_url: str, limit: int,
) -> List[CandidateItem]:
    items: List[CandidateItem] = []
    for script in soup.select('script[type="application/ld+json"]'):
        raw = script.string or script.get_text()
        try:
            data = json.loads(raw)
        except (TypeError, ValueError):
            logger.debug("Skipping unparsable JSON-LD block")
            continue
        for node in _nodes(data):
            for item in _products(node):
                name = item.get("name")
                if not isinstance(name, str) or not name.strip():
                    continue
                url = item.get("url")
                items.append(CandidateItem(
                    raw_name=name.strip(),
                    raw_price_text=_offer_price(item),
                    url=urljoin(base_url, url) if isinstance(url, str) and url else "",
                    source=CandidateSource.STRUCTURED_DATA,
                ))
    return items[:limit]
