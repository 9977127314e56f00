# /randompic/media/randomizer.py
# -*- coding: utf-8 -*-
"""
원본 이미지(ri/h, ri/v)를 섞어서 dist/ri/<category>/1.webp, 2.webp ... 로 복사.

- 확장자는 항상 .webp 로 통일한다. 변환(transcode)은 하지 않으므로
  jpg/png/gif 원본은 바이트 그대로 .webp 이름만 갖게 된다.
  이런 파일은 Pillow 로 포맷을 확인해서 경고 + 결과(flagged)에 기록한다.
- 출력 폴더(dest_root)는 매번 삭제 후 다시 만든다. (파괴적 동작)
- 원본 폴더가 없으면 해당 카테고리는 0장으로 처리하고 계속 진행.
- 복사 실패(권한, 디스크 부족 등)는 BuildError 로 전체 빌드를 중단한다.
  번호가 1..N 으로 빈틈없이 이어져야 하기 때문.
"""

from __future__ import annotations
import logging
import random
import re
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, MutableSequence, Optional, TypeVar

from PIL import Image, UnidentifiedImageError

from randompic.utils.files import collect_images, reset_dir

log = logging.getLogger("randomizer")

T = TypeVar("T")

OUTPUT_EXT = ".webp"
_INDEXED_NAME = re.compile(r"^[1-9]\d*\.webp$")


class BuildError(Exception):
    pass


@dataclass
class RandomizeResult:
    counts: Dict[str, int] = field(default_factory=dict)
    # category -> 원본 파일명 (WebP 가 아닌데 .webp 로 저장된 것)
    flagged: Dict[str, List[str]] = field(default_factory=dict)


def shuffle(items: MutableSequence[T], rng: Optional[random.Random] = None) -> MutableSequence[T]:
    """Fisher–Yates (in place)."""
    rng = rng or random.Random()
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


def sniff_format(path: Path) -> Optional[str]:
    """
    헤더만 읽어서 이미지 포맷 이름 반환 (예: 'WEBP', 'JPEG'). 판별 불가면 None.
    픽셀을 디코딩하지 않으므로 크기 제한(MAX_IMAGE_PIXELS)은 잠시 끈다.
    """
    limit = Image.MAX_IMAGE_PIXELS
    Image.MAX_IMAGE_PIXELS = None
    try:
        with Image.open(path) as im:
            return im.format
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError):
        return None
    finally:
        Image.MAX_IMAGE_PIXELS = limit


def randomize_category(src: Path, dest: Path, rng: Optional[random.Random] = None) -> tuple[int, List[str]]:
    """
    src 의 이미지를 섞어서 dest/1.webp ... dest/N.webp 로 복사.
    returns: (N, flagged_names)
    """
    files = shuffle(collect_images(src), rng)
    dest.mkdir(parents=True, exist_ok=True)

    flagged: List[str] = []
    for index, f in enumerate(files, start=1):
        target = dest / f"{index}{OUTPUT_EXT}"
        try:
            shutil.copyfile(f, target)
        except OSError as e:
            raise BuildError(f"copy failed: {f} -> {target} ({e})") from e
        fmt = sniff_format(f)
        if fmt != "WEBP":
            flagged.append(f.name)
            log.warning(f"{f.name} is {fmt or 'unknown'} data, saved as {target.name} without conversion")
    return len(files), flagged


def randomize_assets(
    src_root: Path | str,
    dest_root: Path | str,
    categories: Iterable[str],
    rng: Optional[random.Random] = None,
) -> RandomizeResult:
    """카테고리별로 randomize_category 실행. dest_root 는 먼저 비워진다."""
    src_root, dest_root = Path(src_root), Path(dest_root)
    try:
        reset_dir(dest_root)
    except OSError as e:
        raise BuildError(f"cannot recreate output folder {dest_root}: {e}") from e

    result = RandomizeResult()
    for category in categories:
        src = src_root / category
        if not src.is_dir():
            log.warning(f"Source folder not found: {src}")
            result.counts[category] = 0
            continue
        count, flagged = randomize_category(src, dest_root / category, rng)
        result.counts[category] = count
        if flagged:
            result.flagged[category] = flagged
        log.info(f"Processed {category}: {count} images.")
    return result


def scan_counts(dest_root: Path | str, categories: Iterable[str]) -> Dict[str, int]:
    """
    이미 만들어진 dist/ri 에서 카테고리별 장수를 센다.
    1.webp 부터 빈틈없이 이어지는 구간만 센다. 번호가 끊기면 그 뒤 파일은 무시 (경고).
    """
    counts: Dict[str, int] = {}
    for category in categories:
        folder = Path(dest_root) / category
        if not folder.is_dir():
            counts[category] = 0
            continue
        indexed = {f.name for f in folder.iterdir() if f.is_file() and _INDEXED_NAME.match(f.name)}
        n = 0
        while f"{n + 1}{OUTPUT_EXT}" in indexed:
            n += 1
        if len(indexed) > n:
            log.warning(f"{folder}: numbering has a gap after {n}{OUTPUT_EXT}, {len(indexed) - n} file(s) ignored")
        counts[category] = n
    return counts
