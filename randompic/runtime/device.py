# randompic/runtime/device.py
from __future__ import annotations
import re

MOBILE_UA = re.compile(r"android|ipad|iphone|ipod|windows phone|iemobile|blackberry|mobile", re.IGNORECASE)

# 모바일은 세로(v), 데스크톱은 가로(h)
CATEGORY_BY_DEVICE = {"mobile": "v", "desktop": "h"}

def device_type(user_agent: str | None) -> str:
    return "mobile" if MOBILE_UA.search(user_agent or "") else "desktop"

def category_for(user_agent: str | None) -> str:
    return CATEGORY_BY_DEVICE[device_type(user_agent)]
