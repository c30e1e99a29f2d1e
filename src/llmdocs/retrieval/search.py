"""Heuristic substring search over the chunk corpus."""

from __future__ import annotations

import bisect
import itertools
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional, Tuple

from llmdocs.models import ChunkRecord, SearchHit
from llmdocs.retrieval.store import VersionStore
from llmdocs.utils.text import count_occurrences, make_snippet, parse_csv

ID_SCORE = 20
NAME_SCORE = 10
MEMBER_SCORE = 8
OCCURRENCE_CAP = 20
OCCURRENCE_SCORE = 2


def _normalized(values: Iterable[str]) -> FrozenSet[str]:
    return frozenset(value.strip().lower() for value in values if value.strip())


@dataclass(slots=True, frozen=True)
class SearchFilters:
    """Case-insensitive set filters; an empty set lets everything through."""

    stages: FrozenSet[str] = field(default_factory=frozenset)
    kinds: FrozenSet[str] = field(default_factory=frozenset)
    names: FrozenSet[str] = field(default_factory=frozenset)
    members: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_csv(
        cls,
        *,
        stage: Optional[str] = None,
        kind: Optional[str] = None,
        name: Optional[str] = None,
        member: Optional[str] = None,
    ) -> "SearchFilters":
        return cls(
            stages=_normalized(parse_csv(stage)),
            kinds=_normalized(parse_csv(kind)),
            names=_normalized(parse_csv(name)),
            members=_normalized(parse_csv(member)),
        )

    def accepts(self, record: ChunkRecord) -> bool:
        if self.stages and record.stage.lower() not in self.stages:
            return False
        if self.kinds and record.kind.lower() not in self.kinds:
            return False
        if self.names and record.name.lower() not in self.names:
            return False
        if self.members and (record.member or "").lower() not in self.members:
            return False
        return True


def score_record(record: ChunkRecord, query_lower: str) -> int:
    score = 0
    if query_lower in record.id.lower():
        score += ID_SCORE
    if query_lower in record.name.lower():
        score += NAME_SCORE
    if record.member and query_lower in record.member.lower():
        score += MEMBER_SCORE
    occurrences = count_occurrences(record.text.lower(), query_lower)
    score += min(OCCURRENCE_CAP, occurrences) * OCCURRENCE_SCORE
    return score


class TopHits:
    """Bounded buffer of the best hits: score descending, then id ascending."""

    def __init__(self, limit: int) -> None:
        if limit <= 0:
            raise ValueError("limit must be positive")
        self.limit = limit
        self._items: List[Tuple[int, str, int, SearchHit]] = []
        self._sequence = itertools.count()

    def __len__(self) -> int:
        return len(self._items)

    def would_accept(self, score: int, chunk_id: str) -> bool:
        if len(self._items) < self.limit:
            return True
        worst = self._items[-1]
        return (-score, chunk_id) < (worst[0], worst[1])

    def push(self, hit: SearchHit) -> None:
        bisect.insort(self._items, (-hit.score, hit.id, next(self._sequence), hit))
        if len(self._items) > self.limit:
            self._items.pop()

    def hits(self) -> List[SearchHit]:
        return [item[3] for item in self._items]


class Searcher:
    """Streams a version's chunks once and keeps the top ``limit`` matches."""

    def __init__(self, store: VersionStore) -> None:
        self.store = store

    def search(self, query: str, *, filters: Optional[SearchFilters] = None, limit: int = 10) -> List[SearchHit]:
        query_lower = query.strip().lower()
        if not query_lower:
            raise ValueError("Empty query")
        filters = filters or SearchFilters()
        top = TopHits(limit)

        for record in self.store.iter_chunks():
            if not filters.accepts(record):
                continue
            score = score_record(record, query_lower)
            if score <= 0 or not top.would_accept(score, record.id):
                continue
            top.push(
                SearchHit(
                    score=score,
                    id=record.id,
                    stage=record.stage,
                    kind=record.kind,
                    name=record.name,
                    snippet=make_snippet(record.text, query_lower),
                    member=record.member,
                    rel_path=record.rel_path,
                    anchor=record.anchor,
                )
            )
        return top.hits()
