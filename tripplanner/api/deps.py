from functools import lru_cache

from tripplanner.agents.trip_planner.gemini_client import GeminiItineraryGenerator
from tripplanner.utils.config import ITINERARIES_COLLECTION
from tripplanner.utils.db import get_db
from tripplanner.utils.itinerary_store import ItineraryStore


def get_itinerary_store() -> ItineraryStore:
    return ItineraryStore(get_db()[ITINERARIES_COLLECTION])


@lru_cache(maxsize=1)
def get_generator() -> GeminiItineraryGenerator:
    return GeminiItineraryGenerator()
