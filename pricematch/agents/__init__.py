from pricematch.agents.matcher import normalize, similarity, select_best
from pricematch.agents.price_parser import parse_price

__all__ = ["normalize", "similarity", "select_best", "parse_price"]
