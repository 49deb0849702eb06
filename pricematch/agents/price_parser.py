# -*- coding: utf-8 -*-
from __future__ import annotations
import math
import re
from typing import Optional

# Handles: $1,234.50 MXN | $ 89.00 | 1234 | Precio: 45.5
_PRICE_RE = re.compile(r"\d+\.?\d*")


def parse_price(text: Optional[str]) -> Optional[float]:
    if not text:
        return None
    m = _PRICE_RE.search(text.replace(",", ""))
    if not m:
        return None
    try:
        val = float(m.group())
    except ValueError:
        return None
    return val if math.isfinite(val) else None
