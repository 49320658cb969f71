# tripplanner/api/trips.py

import logging
from typing import Dict, List, Set

from fastapi import APIRouter, Depends, HTTPException, status

from tripplanner.agents.trip_planner.dates import reconcile_dates
from tripplanner.agents.trip_planner.errors import (
    ConfigurationError,
    GenerationError,
    PersistenceError,
    TripPlannerError,
    TripValidationError,
)
from tripplanner.agents.trip_planner.form import plan_trip
from tripplanner.agents.trip_planner.gemini_client import GeminiItineraryGenerator
from tripplanner.agents.trip_planner.prompt import build_prompt
from tripplanner.api.auth import get_current_user
from tripplanner.api.deps import get_generator, get_itinerary_store
from tripplanner.schemas.trip_schemas import (
    DateEditRequest,
    DateFields,
    ItineraryOut,
    PromptOut,
    TripOptions,
    TripRequest,
)
from tripplanner.utils.config import SAVED_TRIPS_LIMIT
from tripplanner.utils.itinerary_store import ItineraryStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["trips"])

# users with a submission currently being generated/saved
_in_flight: Set[str] = set()


def _status_for(exc: TripPlannerError) -> int:
    if isinstance(exc, TripValidationError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(exc, ConfigurationError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    if isinstance(exc, GenerationError):
        return status.HTTP_429_TOO_MANY_REQUESTS if exc.is_quota else status.HTTP_502_BAD_GATEWAY
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _reconciled(payload: TripRequest) -> TripRequest:
    fields = reconcile_dates(payload.start_date, payload.number_of_days, payload.end_date)
    return payload.model_copy(update=fields.model_dump())


@router.get("/options", response_model=TripOptions)
async def trip_options():
    """The fixed choices offered by the trip planner form."""
    return TripOptions()


@router.post("/dates", response_model=DateFields)
async def reconcile_trip_dates(payload: DateEditRequest):
    """
    Re-derives the missing one of number_of_days / end_date after the user edits
    one of the date fields.
    """
    return reconcile_dates(payload.start_date, payload.number_of_days, payload.end_date,
                           edited=payload.edited)


@router.post("/prompt", response_model=PromptOut)
async def preview_prompt(payload: TripRequest, current_user: Dict = Depends(get_current_user)):
    return PromptOut(prompt=build_prompt(_reconciled(payload)))


@router.post("", response_model=ItineraryOut, status_code=status.HTTP_201_CREATED)
async def submit_trip(
        payload: TripRequest,
        current_user: Dict = Depends(get_current_user),
        generator: GeminiItineraryGenerator = Depends(get_generator),
        store: ItineraryStore = Depends(get_itinerary_store),
):
    """
    Generates an itinerary for the submitted form and saves it to the user's trips.
    A second submission from the same user is refused while the first is running.
    """
    user_id = current_user["id"]
    if user_id in _in_flight:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT,
                            detail="An itinerary is already being generated. Please wait.")

    _in_flight.add(user_id)
    try:
        return await plan_trip(_reconciled(payload), user_id, generator, store)
    except TripPlannerError as exc:
        logger.error("Trip submission failed for user %s: %s", user_id, exc)
        raise HTTPException(status_code=_status_for(exc), detail=exc.user_message)
    finally:
        _in_flight.discard(user_id)


@router.get("", response_model=List[ItineraryOut])
async def list_trips(current_user: Dict = Depends(get_current_user),
                     store: ItineraryStore = Depends(get_itinerary_store)):
    """Saved trips of the authenticated user, newest first."""
    try:
        return await store.list_for_user(current_user["id"], limit=SAVED_TRIPS_LIMIT)
    except PersistenceError as exc:
        logger.error("Failed to fetch itineraries: %s", exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            detail="Failed to fetch itineraries")


@router.get("/{itinerary_id}", response_model=ItineraryOut)
async def get_trip(itinerary_id: str, current_user: Dict = Depends(get_current_user),
                   store: ItineraryStore = Depends(get_itinerary_store)):
    try:
        trip = await store.get_for_user(current_user["id"], itinerary_id)
    except PersistenceError as exc:
        logger.error("Failed to fetch itinerary %s: %s", itinerary_id, exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            detail="Failed to fetch itinerary")
    if not trip:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found")
    return trip
