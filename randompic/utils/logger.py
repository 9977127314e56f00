import json
import logging
from datetime import datetime
from pathlib import Path

log = logging.getLogger("build")

def log_build(summary: dict, log_dir: Path | str = "output/logs") -> Path:
    """빌드 결과를 output/logs 폴더에 저장"""
    d = Path(log_dir)
    d.mkdir(parents=True, exist_ok=True)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_path = d / f"build_{ts}.json"
    data = {"timestamp": ts, **summary}
    with log_path.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    log.info(f"Build log saved: {log_path}")
    return log_path
