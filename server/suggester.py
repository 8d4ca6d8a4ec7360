# Query engine: filters the current snapshot by id, ranks by cost and
# reshapes the matches into positioned suggestions.

from typing import List

from schemas import Suggestion
from store import SnapshotStore


class QueryEngine:
    def __init__(self, store: SnapshotStore):
        self.store = store

    def suggest(self, identifier: str) -> List[Suggestion]:
        snapshot = self.store.read()
        matches = [rec for rec in snapshot.records if rec.id == identifier]
        # sorted() is stable, so equal costs keep snapshot order
        matches = sorted(matches, key=lambda rec: rec.cost)
        return [Suggestion(text=rec.name, position=i) for i, rec in enumerate(matches)]
