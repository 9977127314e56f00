# randompic/runtime/dom.py
"""
브라우저 DOM 의 아주 작은 부분만 흉내 낸 문서 모델.
RandomPicRuntime 이 읽고/쓰는 것만 있다: id, class, style, attribute, <img>.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set

LOADING = "loading"
COMPLETE = "complete"


@dataclass
class Element:
    tag: str = "div"
    id: str | None = None
    classes: Set[str] = field(default_factory=set)
    attrs: Dict[str, str] = field(default_factory=dict)
    style: Dict[str, str] = field(default_factory=dict)
    children: List["Element"] = field(default_factory=list)

    def add(self, child: "Element") -> "Element":
        self.children.append(child)
        return self  # 체이닝

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attrs.get(name)

    def set_attribute(self, name: str, value: str) -> None:
        self.attrs[name] = value

    def walk(self) -> Iterator["Element"]:
        yield self
        for c in self.children:
            yield from c.walk()


@dataclass
class Document:
    body: Element = field(default_factory=lambda: Element("body"))
    root: Element = field(default_factory=lambda: Element("html"))
    ready_state: str = COMPLETE

    def get_element_by_id(self, element_id: str) -> Optional[Element]:
        return next((e for e in self.body.walk() if e.id == element_id), None)

    def query_attr(self, name: str) -> List[Element]:
        return [e for e in self.body.walk() if name in e.attrs]

    def images(self) -> List[Element]:
        return [e for e in self.body.walk() if e.tag == "img"]

    def replace_content(self, *children: Element) -> None:
        """swup 이 페이지 본문을 갈아 끼우는 것과 같은 효과."""
        self.body.children = list(children)
