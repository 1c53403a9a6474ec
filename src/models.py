"""Data models for the terminal order tracker.

Orders are immutable; every change produces a new Order so that each
committed list is a snapshot nothing else can mutate afterwards.
"""
from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping

@dataclass(frozen=True)
class Order:
    """A single order.

    Fields:
        id: Positive integer, unique within the order list.
        text: Short, single-line text of the order.
        complete: True once the order has been served.
    """
    id: int
    text: str
    complete: bool = False

    def with_text(self, text: str) -> Order:
        return replace(self, text=text)

    def toggled(self) -> Order:
        return replace(self, complete=not self.complete)

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'text': self.text, 'complete': self.complete}

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Order:
        """Build an Order from its persisted mapping.

        Raises ValueError when the mapping does not describe a valid order.
        """
        oid = raw.get('id')
        # bool is an int subclass; reject it explicitly
        if not isinstance(oid, int) or isinstance(oid, bool) or oid < 1:
            raise ValueError(f'invalid order id: {oid!r}')
        text = raw.get('text')
        if not isinstance(text, str):
            raise ValueError(f'invalid order text for id {oid}')
        complete = raw.get('complete', False)
        if not isinstance(complete, bool):
            raise ValueError(f'invalid complete flag for id {oid}: {complete!r}')
        return cls(id=oid, text=text, complete=complete)

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"Order(id={self.id}, text={self.text!r}, complete={self.complete})"
