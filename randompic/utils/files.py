# randompic/utils/files.py
from pathlib import Path
from typing import List
import shutil

IMAGE_EXTS = {".webp", ".jpg", ".jpeg", ".png", ".gif"}

def reset_dir(path: Path | str) -> Path:
    """폴더를 통째로 지우고 다시 만든다 (기존 내용 삭제됨)."""
    p = Path(path)
    if p.exists():
        shutil.rmtree(p)
    p.mkdir(parents=True, exist_ok=True)
    return p

def collect_images(folder: Path | str) -> List[Path]:
    """folder 바로 아래의 이미지 파일 목록 (확장자 대소문자 무시, 이름순)."""
    p = Path(folder)
    if not p.is_dir():
        return []
    return sorted(f for f in p.iterdir() if f.is_file() and f.suffix.lower() in IMAGE_EXTS)
