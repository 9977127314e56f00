# randompic/utils/config.py
# -*- coding: utf-8 -*-
"""
빌드 설정 로딩
- 우선순위: CLI 인자 > 환경변수(.env 포함) > config.json > 기본값
- 환경변수:
  DOMAIN                : 이미지 URL 앞에 붙는 도메인 (예: https://pic.example.com)
  RANDOMPIC_SRC_DIR     : 원본 이미지 폴더 (기본: <root>/ri)
  RANDOMPIC_DIST_DIR    : 출력 폴더 (기본: <root>/dist)
  RANDOMPIC_FETCH_LIBS  : gallery 라이브러리를 CDN에서 받을지 여부
  RANDOMPIC_LIB_CDN     : 라이브러리 다운로드 베이스 URL
"""

from __future__ import annotations
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Tuple

log = logging.getLogger("config")

CONFIG_FILE = "config.json"
CATEGORIES: Tuple[str, ...] = ("h", "v")
DEFAULT_LIB_CDN = "https://unpkg.com"


def _env_str(environ: Mapping[str, str], k: str, d: str) -> str:
    v = environ.get(k)
    return v.strip() if v and v.strip() != "" else d

def _env_bool(environ: Mapping[str, str], k: str, d: bool) -> bool:
    v = environ.get(k)
    if v is None:
        return d
    return v.strip().lower() in {"1", "true", "yes", "y", "on"}


def normalize_base_url(domain: Optional[str]) -> str:
    """끝의 '/'를 제거. 'https://example.com/' -> 'https://example.com'"""
    return (domain or "").strip().rstrip("/")


def _read_config_domain(path: Path) -> str:
    if not path.exists():
        return ""
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        log.warning(f"Failed to parse {path.name}, using default settings ({e})")
        return ""
    if not isinstance(data, dict):
        log.warning(f"{path.name} is not a JSON object, using default settings")
        return ""
    domain = data.get("domain") or ""
    if not isinstance(domain, str):
        log.warning(f"{path.name}: 'domain' must be a string, ignoring")
        return ""
    if domain:
        log.info(f"Loaded domain from {path.name}.")
    return domain


def load_domain(root: Path | str, environ: Optional[Mapping[str, str]] = None) -> str:
    """
    도메인 결정 (정규화 포함).
    1) DOMAIN 환경변수  2) config.json 의 domain  3) "" (상대 URL)
    """
    environ = os.environ if environ is None else environ
    env_domain = environ.get("DOMAIN", "").strip()
    if env_domain:
        log.info("Loaded domain from environment variable.")
        return normalize_base_url(env_domain)
    return normalize_base_url(_read_config_domain(Path(root) / CONFIG_FILE))


@dataclass
class BuildConfig:
    root: Path
    src_dir: Path
    dist_dir: Path
    domain: str = ""
    categories: Tuple[str, ...] = field(default_factory=lambda: CATEGORIES)
    fetch_libs: bool = False
    lib_cdn: str = DEFAULT_LIB_CDN

    @property
    def assets_dir(self) -> Path:
        return self.dist_dir / "ri"

    @staticmethod
    def from_env(root: Path | str, environ: Optional[Mapping[str, str]] = None) -> "BuildConfig":
        environ = os.environ if environ is None else environ
        root = Path(root).resolve()
        return BuildConfig(
            root=root,
            src_dir=Path(_env_str(environ, "RANDOMPIC_SRC_DIR", str(root / "ri"))),
            dist_dir=Path(_env_str(environ, "RANDOMPIC_DIST_DIR", str(root / "dist"))),
            domain=load_domain(root, environ),
            fetch_libs=_env_bool(environ, "RANDOMPIC_FETCH_LIBS", False),
            lib_cdn=normalize_base_url(_env_str(environ, "RANDOMPIC_LIB_CDN", DEFAULT_LIB_CDN)),
        )
