# -*- coding: utf-8 -*-
r"""
randompic/publish/pages.py
- dist 에 index.html / gallery.html 과 gallery 용 라이브러리(lib/*.js)를 배치
- index.html: 프로젝트 루트의 index.html 이 있고 비어있지 않으면 그대로 복사, 아니면 데모 페이지 생성
- lib: node_modules 에서 복사. 없고 fetch=True 이면 CDN 에서 다운로드 (requests)
  실패해도 빌드는 계속 (경고만)
- 콘솔 인코딩 이슈 방지: ASCII 로그만 사용
"""

from __future__ import annotations
import logging
import shutil
from pathlib import Path
from typing import Dict, List, Mapping, NamedTuple

import requests

from randompic.publish.render import render
from randompic.publish.script import SCRIPT_NAME

log = logging.getLogger("pages")


class GalleryLib(NamedTuple):
    name: str
    node_path: str
    cdn_path: str


GALLERY_LIBS = (
    GalleryLib("masonry.pkgd.min.js", "masonry-layout/dist/masonry.pkgd.min.js",
               "masonry-layout@4/dist/masonry.pkgd.min.js"),
    GalleryLib("imagesloaded.pkgd.min.js", "imagesloaded/imagesloaded.pkgd.min.js",
               "imagesloaded@5/imagesloaded.pkgd.min.js"),
    GalleryLib("lozad.min.js", "lozad/dist/lozad.min.js",
               "lozad@1/dist/lozad.min.js"),
)


def publish_index(root: Path | str, dist: Path | str) -> Path:
    src = Path(root) / "index.html"
    out = Path(dist) / "index.html"
    out.parent.mkdir(parents=True, exist_ok=True)
    if src.exists() and src.stat().st_size > 0:
        shutil.copyfile(src, out)
        log.info("Copied index.html to dist")
        return out
    if src.exists():
        log.info("index.html is empty, creating a demo page in dist")
    out.write_text(render("index.html.j2", script=SCRIPT_NAME), encoding="utf-8")
    log.info("Created demo index.html in dist")
    return out


def _download(url: str, out: Path) -> None:
    r = requests.get(url, timeout=30)
    r.raise_for_status()
    out.write_bytes(r.content)


def prepare_libs(root: Path | str, dist: Path | str, *, fetch: bool = False,
                 cdn: str = "https://unpkg.com") -> List[str]:
    """gallery 라이브러리 준비. 반환: dist/lib 에 놓인 파일명 목록."""
    lib_dir = Path(dist) / "lib"
    lib_dir.mkdir(parents=True, exist_ok=True)
    node_modules = Path(root) / "node_modules"

    ready: List[str] = []
    for lib in GALLERY_LIBS:
        out = lib_dir / lib.name
        src = node_modules / lib.node_path
        try:
            if src.exists():
                shutil.copyfile(src, out)
            elif fetch:
                _download(f"{cdn.rstrip('/')}/{lib.cdn_path}", out)
                log.info(f"Downloaded {lib.name}")
            else:
                log.warning(f"{lib.name} not found in node_modules (run npm install or set RANDOMPIC_FETCH_LIBS=1)")
                continue
        except (OSError, requests.RequestException) as e:
            log.warning(f"Could not prepare {lib.name}: {e}")
            continue
        ready.append(lib.name)
    return ready


def gallery_sections(counts: Mapping[str, int], domain: str) -> List[Dict[str, object]]:
    sections = []
    for category, count in counts.items():
        if not count:
            continue
        prefix = f"{domain}/ri/{category}" if domain else f"./ri/{category}"
        sections.append({
            "category": category,
            "items": [{"url": f"{prefix}/{i}.webp", "alt": f"{category}-{i}"} for i in range(1, count + 1)],
        })
    return sections


def publish_gallery(counts: Mapping[str, int], domain: str, dist: Path | str) -> Path:
    out = Path(dist) / "gallery.html"
    out.parent.mkdir(parents=True, exist_ok=True)
    html = render(
        "gallery.html.j2",
        sections=gallery_sections(counts, domain),
        libs=[lib.name for lib in GALLERY_LIBS],
    )
    out.write_text(html, encoding="utf-8")
    log.info("Created gallery.html in dist")
    return out
