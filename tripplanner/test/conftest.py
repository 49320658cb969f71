from types import SimpleNamespace

import pytest
from bson import ObjectId
from pymongo.errors import PyMongoError

from tripplanner.utils.itinerary_store import ItineraryStore


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    def sort(self, key, direction):
        self._docs = sorted(self._docs, key=lambda d: d[key], reverse=direction == -1)
        return self

    def limit(self, n):
        self._docs = self._docs[:n]
        return self

    def __aiter__(self):
        self._it = iter(self._docs)
        return self

    async def __anext__(self):
        try:
            return next(self._it)
        except StopIteration:
            raise StopAsyncIteration


class FakeCollection:
    """Just enough of a Motor collection for ItineraryStore."""

    def __init__(self):
        self.docs = []

    @classmethod
    def _matches(cls, doc, query):
        for key, value in query.items():
            if key == "$or":
                if not any(cls._matches(doc, sub) for sub in value):
                    return False
            elif doc.get(key) != value:
                return False
        return True

    async def insert_one(self, doc):
        stored = dict(doc)
        stored["_id"] = ObjectId()
        self.docs.append(stored)
        return SimpleNamespace(inserted_id=stored["_id"])

    def find(self, query):
        return FakeCursor([dict(d) for d in self.docs if self._matches(d, query)])

    async def find_one(self, query):
        for d in self.docs:
            if self._matches(d, query):
                return dict(d)
        return None

    async def delete_many(self, query):
        before = len(self.docs)
        self.docs = [d for d in self.docs if not self._matches(d, query)]
        return SimpleNamespace(deleted_count=before - len(self.docs))

    async def delete_one(self, query):
        for i, d in enumerate(self.docs):
            if self._matches(d, query):
                del self.docs[i]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


class BrokenCollection(FakeCollection):
    async def insert_one(self, doc):
        raise PyMongoError("connection refused")

    async def delete_many(self, query):
        raise PyMongoError("connection refused")


class FakeGenerator:
    def __init__(self, text="Day 1: Arrive and explore.", error=None):
        self.text = text
        self.error = error
        self.prompts = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def collection():
    return FakeCollection()


@pytest.fixture
def store(collection):
    return ItineraryStore(collection)


@pytest.fixture
def generator():
    return FakeGenerator()
