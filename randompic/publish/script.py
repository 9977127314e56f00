# -*- coding: utf-8 -*-
"""
randompic/publish/script.py
- 빌드 결과(카테고리별 장수)와 도메인을 박아 넣은 브라우저용 random.js 생성
- counts 는 randomizer 결과를 그대로 사용 (가공 금지)
- base_url 은 항상 끝의 '/' 가 제거된 상태
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping

from randompic.publish.render import render
from randompic.utils.config import normalize_base_url

log = logging.getLogger("script")

SCRIPT_NAME = "random.js"


@dataclass(frozen=True)
class RuntimeConfig:
    counts: Dict[str, int] = field(default_factory=dict)
    base_url: str = ""

    def as_dict(self) -> Dict[str, object]:
        return {"counts": dict(self.counts), "baseUrl": self.base_url}


def runtime_config(counts: Mapping[str, int], domain: str) -> RuntimeConfig:
    return RuntimeConfig(counts=dict(counts), base_url=normalize_base_url(domain))


def render_script(config: RuntimeConfig) -> str:
    return render("random.js.j2", config=config.as_dict()).strip() + "\n"


def write_script(config: RuntimeConfig, dist: Path | str) -> Path:
    out = Path(dist) / SCRIPT_NAME
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(render_script(config), encoding="utf-8")
    log.info(f"Created {SCRIPT_NAME} (counts={config.counts}, base={config.base_url!r})")
    return out
