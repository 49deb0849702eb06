from pricematch.competitors.registry import (
    CompetitorConfig, CompetitorRegistry, SelectorCascade, competitor_registry,
)

__all__ = [
    "CompetitorConfig", "CompetitorRegistry", "SelectorCascade",
    "competitor_registry",
]
