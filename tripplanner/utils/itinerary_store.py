import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import PyMongoError

from tripplanner.agents.trip_planner.errors import PersistenceError
from tripplanner.schemas.trip_schemas import TripRequest

logger = logging.getLogger(__name__)


def _to_document(user_id: str, request: TripRequest, itinerary_text: str) -> Dict[str, Any]:
    # dates go to Mongo as ISO strings, like created_at
    doc = request.model_dump(mode="json")
    doc.update({
        "user_id": user_id,
        "itinerary": itinerary_text,
        "created_at": datetime.now(timezone.utc).isoformat(),
    })
    return doc


def _with_string_id(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Converts MongoDB's ObjectId to string 'id' for JSON serialization."""
    if doc and doc.get("_id") is not None:
        doc["id"] = str(doc.pop("_id"))
    return doc


class ItineraryStore:
    """Saved trips, one document per generated itinerary, keyed by owner."""

    def __init__(self, collection):
        self.collection = collection

    async def save(self, user_id: str, request: TripRequest, itinerary_text: str) -> Dict[str, Any]:
        doc = _to_document(user_id, request, itinerary_text)
        try:
            res = await self.collection.insert_one(doc)
        except PyMongoError as exc:
            logger.error("save itinerary failed for user %s: %s", user_id, exc)
            raise PersistenceError(str(exc)) from exc
        doc["_id"] = res.inserted_id
        logger.info("save itinerary: inserted id=%s", res.inserted_id)
        return _with_string_id(doc)

    async def list_for_user(self, user_id: str, limit: int = 50) -> List[Dict[str, Any]]:
        cursor = self.collection.find({"user_id": user_id}).sort("created_at", -1).limit(limit)
        results = []
        try:
            async for doc in cursor:
                results.append(_with_string_id(doc))
        except PyMongoError as exc:
            raise PersistenceError(str(exc)) from exc
        return results

    async def get_for_user(self, user_id: str, itinerary_id: str) -> Optional[Dict[str, Any]]:
        try:
            object_id = ObjectId(itinerary_id)
        except (InvalidId, TypeError):
            return None
        try:
            doc = await self.collection.find_one({"_id": object_id, "user_id": user_id})
        except PyMongoError as exc:
            raise PersistenceError(str(exc)) from exc
        if not doc:
            return None
        return _with_string_id(doc)

    async def delete_all_for_user(self, user_id: str) -> int:
        try:
            res = await self.collection.delete_many({"user_id": user_id})
        except PyMongoError as exc:
            raise PersistenceError(str(exc)) from exc
        return res.deleted_count
