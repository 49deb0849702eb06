from __future__ import annotations
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Tuple
from urllib.parse import quote
import yaml
from pricematch.utils.logger import get_logger

logger = get_logger(__name__)

CONFIGS_DIR = Path(__file__).parent / "configs"


@dataclass(frozen=True)
class SelectorCascade:
    item:  Tuple[str, ...]
    name:  Tuple[str, ...]
    price: Tuple[str, ...]
    link:  Tuple[str, ...] = ("a[href]",)


@dataclass(frozen=True)
class CompetitorConfig:
    key:                str
    name:               str
    search_url_pattern: str
    selectors:          SelectorCascade
    no_result_phrases:  FrozenSet[str] = field(default_factory=frozenset)

    def search_url(self, query: str) -> str:
        return self.search_url_pattern.format(query=quote(query, safe=""))


def _cascade(data: dict, key: str) -> Tuple[str, ...]:
    v = data.get(key) or []
    if isinstance(v, str):
        # "a, b, c" shorthand
        v = v.split(",")
    return tuple(s.strip() for s in v if s and s.strip())


def _phrases(raw: dict) -> FrozenSet[str]:
    v = raw.get("no_result_phrases") or []
    if isinstance(v, str):
        v = [v]
    return frozenset(p.strip().lower() for p in v if isinstance(p, str) and p.strip())


def _load(raw: dict) -> CompetitorConfig:
    s = raw.get("selectors", {}) or {}
    sels = SelectorCascade(
        item=_cascade(s, "item"),
        name=_cascade(s, "name"),
        price=_cascade(s, "price"),
        link=_cascade(s, "link") or ("a[href]",),
    )
    if not sels.item or not sels.name:
        raise ValueError("selectors.item and selectors.name are required")
    return CompetitorConfig(
        key=raw["key"],
        name=raw.get("name", raw["key"]),
        search_url_pattern=raw["search_url_pattern"],
        selectors=sels,
        no_result_phrases=_phrases(raw),
    )


class CompetitorRegistry:
    def __init__(self, configs_dir: Path = CONFIGS_DIR):
        self._dir = configs_dir
        self._configs: Dict[str, CompetitorConfig] = {}
        self._load_all()

    def _load_all(self):
        if not os.path.isdir(self._dir):
            logger.warning(f"Configs dir not found: {self._dir}")
            return
        for fname in sorted(os.listdir(self._dir)):
            if not fname.endswith(".yaml"):
                continue
            path = os.path.join(self._dir, fname)
            try:
                with open(path, encoding="utf-8") as f:
                    raw = yaml.safe_load(f)
                if raw and raw.get("key"):
                    cfg = _load(raw)
                    self._configs[cfg.key] = cfg
                    logger.debug(f"Loaded competitor: {cfg.key} ({cfg.name})")
            except Exception as e:
                logger.error(f"Failed to load {fname}: {e}")
        logger.info(f"Registry: {len(self._configs)} competitors loaded")

    def lookup(self, key: str) -> Optional[CompetitorConfig]:
        return self._configs.get(key)

    def keys(self) -> List[str]:
        return list(self._configs)

    def all(self) -> List[CompetitorConfig]:
        return list(self._configs.values())


competitor_registry = CompetitorRegistry()
