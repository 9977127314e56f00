from __future__ import annotations
from pathlib import Path
from dotenv import load_dotenv; load_dotenv()
import argparse, logging, os, random, sys
from typing import List, Optional

from randompic.media.randomizer import BuildError, randomize_assets, scan_counts
from randompic.publish.pages import prepare_libs, publish_gallery, publish_index
from randompic.publish.script import runtime_config, write_script
from randompic.runtime.dom import Document
from randompic.runtime.runtime import RandomPicRuntime
from randompic.utils.config import BuildConfig, normalize_base_url
from randompic.utils.files import reset_dir
from randompic.utils.logger import log_build

# ─────────────────────────────────────────────────────────────
# 로거
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(message)s")
log = logging.getLogger("build")

ROOT = Path(__file__).resolve().parent

# ─────────────────────────────────────────────────────────────
def _config_from_args(args: argparse.Namespace) -> BuildConfig:
    root = Path(args.root).resolve()
    load_dotenv(dotenv_path=root / ".env")
    cfg = BuildConfig.from_env(root)
    if args.src:
        cfg.src_dir = Path(args.src)
    if getattr(args, "dist", None):
        cfg.dist_dir = Path(args.dist)
    if getattr(args, "domain", None) is not None:
        cfg.domain = normalize_base_url(args.domain)
    if getattr(args, "fetch_libs", False):
        cfg.fetch_libs = True
    return cfg

def run_build(cfg: BuildConfig, seed: Optional[int] = None, log_dir: Optional[Path] = None) -> dict:
    """
    1) dist 초기화 + 이미지 섞기/번호 매기기   (dist 기존 내용은 삭제됨)
    2) random.js 생성
    3) index.html (복사 또는 데모)
    4) gallery.html + lib
    5) 빌드 로그 저장
    """
    log.info("Starting build...")
    log.info(f'Using domain prefix: "{cfg.domain}"')

    root, dist, src = cfg.root.resolve(), cfg.dist_dir.resolve(), cfg.src_dir.resolve()
    if dist == root or dist in root.parents or dist == src or dist in src.parents:
        raise BuildError(f"refusing to wipe {dist}: it contains the project or source images")
    try:
        reset_dir(dist)
    except OSError as e:
        raise BuildError(f"cannot recreate {dist}: {e}") from e

    rng = random.Random(seed)
    result = randomize_assets(cfg.src_dir, cfg.assets_dir, cfg.categories, rng)

    try:
        script_path = write_script(runtime_config(result.counts, cfg.domain), cfg.dist_dir)
        index_path = publish_index(cfg.root, cfg.dist_dir)
        libs = prepare_libs(cfg.root, cfg.dist_dir, fetch=cfg.fetch_libs, cdn=cfg.lib_cdn)
        gallery_path = publish_gallery(result.counts, cfg.domain, cfg.dist_dir)
    except OSError as e:
        raise BuildError(f"failed to write output: {e}") from e

    summary = {
        "domain": cfg.domain,
        "counts": result.counts,
        "flagged": result.flagged,
        "dist": str(cfg.dist_dir),
        "script": str(script_path),
        "index": str(index_path),
        "gallery": str(gallery_path),
        "libs": libs,
        "seed": seed,
    }
    try:
        log_build(summary, log_dir or (cfg.root / "output" / "logs"))
    except OSError as e:
        raise BuildError(f"failed to write build log: {e}") from e

    log.info("Build complete.")
    for category, count in result.counts.items():
        log.info(f" - {category}: {count} images")
    if result.flagged:
        log.info(f" - non-WebP sources kept as .webp: {sum(len(v) for v in result.flagged.values())}")
    log.info(f" - output: {cfg.dist_dir}")
    return summary

def run_pick(cfg: BuildConfig, category: Optional[str], user_agent: str) -> str:
    """이미 빌드된 dist 를 기준으로 random.js 가 고를 URL 하나를 미리보기."""
    counts = scan_counts(cfg.assets_dir, cfg.categories)
    runtime = RandomPicRuntime(runtime_config(counts, cfg.domain), Document(), user_agent=user_agent)
    return runtime.pick(category) if category else runtime.pick_by_device()

# ─────────────────────────────────────────────────────────────
def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Static random picture API builder")
    ap.add_argument("--root", default=str(ROOT), help="Project root (config.json, index.html, node_modules)")
    ap.add_argument("--src", default=None, help="Source image folder containing h/ and v/ (default: <root>/ri)")
    ap.add_argument("--dist", default=None, help="Output folder, removed and recreated by build (default: <root>/dist)")
    ap.add_argument("--domain", default=None, help="Domain prefix for image URLs (overrides DOMAIN/config.json)")
    sub = ap.add_subparsers(dest="command")

    b = sub.add_parser("build", help="Shuffle images and generate random.js / index.html / gallery.html")
    b.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible shuffle")
    b.add_argument("--fetch-libs", action="store_true", help="Download gallery libraries when node_modules is missing")

    p = sub.add_parser("pick", help="Preview a random picture URL from an existing build")
    g = p.add_mutually_exclusive_group()
    g.add_argument("--category", default=None, help="Category to pick from (h or v)")
    g.add_argument("--user-agent", default="", help="Pick by device type using this User-Agent")
    return ap

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = _config_from_args(args)
    command = args.command or "build"

    if command == "pick":
        url = run_pick(cfg, args.category, args.user_agent)
        if not url:
            log.warning("No image available for this category")
            return 1
        print(url)
        return 0

    try:
        run_build(cfg, seed=getattr(args, "seed", None))
    except BuildError as e:
        log.error(f"Build failed: {e}")
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
