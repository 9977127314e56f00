# -*- coding: utf-8 -*-
"""
randompic/runtime/runtime.py
- 생성되는 random.js 와 같은 동작을 하는 파이썬 모델
- 브라우저 전역 상태(counts, domain, 세션 캐시, 비활성화 플래그)를 RandomPicRuntime 인스턴스 하나가 소유
- 외부 요소는 주입:
  document      : randompic.runtime.dom.Document
  storage       : localStorage 대용 (get_item / set_item)
  probe         : 이미지 선로딩 (url, on_load, on_error), 완료는 나중에 콜백으로
  hook_provider : swup 같은 페이지 전환 라이브러리 (없으면 None 반환)
"""

from __future__ import annotations
import logging
import random
from enum import Enum
from typing import Callable, Dict, List, Optional, Protocol, Tuple

from randompic.publish.script import RuntimeConfig
from randompic.runtime.device import category_for
from randompic.runtime.dom import LOADING, Document, Element

log = logging.getLogger("runtime")

STORAGE_KEY = "theme-bg-disabled"
BG_BOX_ID = "bg-box"
THEME_CLASS = "wp-theme-zibll"
BG_ATTR = "data-random-bg"
LOADED_CLASS = "loaded"

DOM_CONTENT_LOADED = "DOMContentLoaded"
SWUP_ENABLE = "swup:enable"
SWUP_CONTENT_REPLACED = "swup:contentReplaced"  # legacy swup
HOOK_CONTENT_REPLACE = "content:replace"

Callback = Callable[[str], None]


class InitState(Enum):
    UNINITIALIZED = "uninitialized"
    WAITING_FOR_READY = "waiting_for_ready"
    READY = "ready"


class Storage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...
    def set_item(self, key: str, value: str) -> None: ...


class ImageProbe(Protocol):
    def __call__(self, url: str, on_load: Callback, on_error: Callback) -> None: ...


class MemoryStorage:
    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.data[key] = value


class DeferredProbe:
    """요청만 쌓아 두고 complete() 때 한꺼번에 load/error 콜백 실행."""

    def __init__(self):
        self.requested: List[str] = []
        self._pending: List[Tuple[str, Callback, Callback]] = []

    def __call__(self, url: str, on_load: Callback, on_error: Callback) -> None:
        self.requested.append(url)
        self._pending.append((url, on_load, on_error))

    def complete(self, ok: bool = True) -> int:
        batch, self._pending = self._pending, []
        for url, on_load, on_error in batch:
            (on_load if ok else on_error)(url)
        return len(batch)


class RandomPicRuntime:
    def __init__(
        self,
        config: RuntimeConfig,
        document: Document,
        *,
        user_agent: str = "",
        storage: Optional[Storage] = None,
        probe: Optional[ImageProbe] = None,
        hook_provider: Optional[Callable[[], object]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config
        self.document = document
        self.user_agent = user_agent
        self.storage = storage or MemoryStorage()
        self.probe = probe or DeferredProbe()
        self.hook_provider = hook_provider or (lambda: None)
        self.rng = rng or random.Random()

        self.state = InitState.UNINITIALIZED
        self.hooks_registered = False
        self.generation = 0
        self.current_background_url: Optional[str] = None
        self._session: Dict[str, str] = {}
        self.disabled = self.storage.get_item(STORAGE_KEY) == "true"

    # ── selection
    def selection(self, category: str) -> Optional[str]:
        return self._session.get(category)

    def pick(self, category: str) -> str:
        count = self.config.counts.get(category) or 0
        if count <= 0:
            return ""
        cached = self._session.get(category)
        if cached:
            return cached
        n = self.rng.randint(1, count)
        url = f"{self.config.base_url}/ri/{category}/{n}.webp"
        self._session[category] = url
        return url

    def pick_by_device(self) -> str:
        return self.pick(category_for(self.user_agent))

    def exposed(self) -> Dict[str, Callable]:
        """random.js 가 window 에 올리는 함수와 같은 이름."""
        return {
            "getRandomPicH": lambda: self.pick("h"),
            "getRandomPicV": lambda: self.pick("v"),
            "getRandomPic": self.pick_by_device,
            "setBackgroundDisabled": self.set_disabled,
            "refreshRandomBackground": self.refresh,
        }

    # ── background
    def _first_load_url(self) -> str:
        if not self.current_background_url:
            self.current_background_url = self.pick_by_device()
        return self.current_background_url

    def _probe(self, url: str, apply: Callback, label: str) -> None:
        gen = self.generation

        def on_load(loaded: str) -> None:
            if gen != self.generation:
                log.debug(f"stale background discarded ({label}): {loaded}")
                return
            apply(loaded)
            log.info(f"background loaded ({label}): {loaded}")

        def on_error(failed: str) -> None:
            log.error(f"background failed to load ({label}): {failed}")

        self.probe(url, on_load, on_error)

    def _clear_backgrounds(self) -> None:
        box = self.document.get_element_by_id(BG_BOX_ID)
        if box is not None:
            box.style["background-image"] = "none"
            box.classes.discard(LOADED_CLASS)
        body = self.document.body
        if THEME_CLASS in body.classes:
            body.style["background-image"] = "none"
            body.classes.discard(LOADED_CLASS)

    def apply_background(self) -> None:
        if self.disabled:
            self.generation += 1
            self._clear_backgrounds()
            log.info("background disabled")
            return

        box = self.document.get_element_by_id(BG_BOX_ID)
        body = self.document.body
        if box is not None:
            url = self._first_load_url()
            if url:
                self._probe(url, lambda u: self._style_box(box, u), f"#{BG_BOX_ID}")
        elif THEME_CLASS in body.classes:
            url = self._first_load_url()
            if url:
                self._probe(url, lambda u: self._style_body(body, u), f"body.{THEME_CLASS}")
        else:
            self._apply_generic()

    def _style_box(self, box: Element, url: str) -> None:
        box.style["background-image"] = f'url("{url}")'
        box.classes.add(LOADED_CLASS)
        self.document.root.style["--card-bg"] = "var(--card-bg-transparent)"
        self.document.root.style["--float-panel-bg"] = "var(--float-panel-bg-transparent)"

    @staticmethod
    def _style_body(body: Element, url: str) -> None:
        body.style.update({
            "background-image": f'url("{url}")',
            "background-position": "center top",
            "background-repeat": "no-repeat",
            "background-attachment": "fixed",
            "background-size": "cover",
        })
        body.classes.add(LOADED_CLASS)

    def _apply_generic(self) -> None:
        for el in self.document.query_attr(BG_ATTR):
            if el.id == BG_BOX_ID:
                continue
            category = el.get_attribute(BG_ATTR)
            if category not in self.config.counts:
                continue
            url = self.pick(category)
            if not url:
                continue
            self._probe(url, lambda u, el=el: self._style_element(el, u), f"[{BG_ATTR}={category}]")

    @staticmethod
    def _style_element(el: Element, url: str) -> None:
        el.style["background-image"] = f'url("{url}")'
        el.classes.add(LOADED_CLASS)

    # ── <img>
    def apply_image_tags(self) -> int:
        changed = 0
        for img in self.document.images():
            alt = img.get_attribute("alt")
            src = img.get_attribute("src") or ""
            for category in sorted(self.config.counts):
                if alt == f"random:{category}" or f"/random/{category}" in src:
                    img.set_attribute("src", self.pick(category))
                    changed += 1
                    break
        return changed

    # ── controls
    def refresh(self) -> bool:
        """세션 선택을 비우고, 비활성화가 아니면 새로 적용. 적용했으면 True."""
        self._session.clear()
        self.current_background_url = None
        self.generation += 1
        if self.disabled:
            log.info("selection cleared, background is disabled")
            return False
        self.apply_background()
        log.info("background refreshed")
        return True

    def set_disabled(self, flag: bool) -> None:
        self.disabled = bool(flag)
        self.storage.set_item(STORAGE_KEY, "true" if self.disabled else "false")
        self.apply_background()

    # ── lifecycle
    def init(self) -> None:
        self.apply_background()
        self.apply_image_tags()

    def start(self) -> InitState:
        if self.state is not InitState.UNINITIALIZED:
            return self.state
        if self.document.ready_state == LOADING:
            self.state = InitState.WAITING_FOR_READY
        else:
            self.state = InitState.READY
            self.init()
        self._setup_hooks()
        return self.state

    def dispatch(self, event: str) -> None:
        if event == DOM_CONTENT_LOADED:
            if self.state is InitState.WAITING_FOR_READY:
                self.state = InitState.READY
                self.init()
        elif event == SWUP_CONTENT_REPLACED:
            if self.state is not InitState.UNINITIALIZED:
                self.init()
        elif event == SWUP_ENABLE:
            self._setup_hooks()

    def _setup_hooks(self) -> bool:
        if self.hooks_registered:
            return True
        host = self.hook_provider()
        hooks = getattr(host, "hooks", None) if host is not None else None
        if hooks is None:
            return False
        hooks.on(HOOK_CONTENT_REPLACE, self.init)
        self.hooks_registered = True
        log.info("registered page-transition hooks")
        return True
