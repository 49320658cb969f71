# tripplanner/agents/trip_planner/form.py

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Protocol

from pydantic import ValidationError

from tripplanner.agents.trip_planner.dates import reconcile_dates
from tripplanner.agents.trip_planner.errors import TripValidationError, describe_error
from tripplanner.agents.trip_planner.prompt import build_prompt
from tripplanner.schemas.trip_schemas import (
    ACCOMMODATION_PREFERENCES,
    DateFields,
    INTERESTS,
    PACES,
    TRANSPORTATION_PREFERENCES,
    TRAVEL_STYLES,
    TripRequest,
)

logger = logging.getLogger(__name__)

DATE_FIELDS = ("start_date", "number_of_days", "end_date")
REQUIRED_ON_SUBMIT = ("destination", "budget")


class ItineraryGenerator(Protocol):
    async def generate(self, prompt: str) -> str: ...


class ItineraryRecorder(Protocol):
    async def save(self, user_id: str, request: TripRequest, itinerary_text: str) -> Dict[str, Any]: ...


def check_required(request: TripRequest) -> None:
    """Raise TripValidationError unless every field needed for a submission is filled in."""
    missing = [name for name in REQUIRED_ON_SUBMIT if not getattr(request, name)]
    if missing:
        raise TripValidationError(missing)


async def plan_trip(request: TripRequest, user_id: str,
                    generator: ItineraryGenerator, store: ItineraryRecorder) -> Dict[str, Any]:
    """
    One submission: validate, build the prompt, generate, then persist.
    Nothing is saved unless generation succeeded; any failure propagates.
    """
    check_required(request)
    prompt = build_prompt(request)
    logger.info("Generating itinerary for user %s (destination=%s)", user_id, request.destination)
    text = await generator.generate(prompt)
    return await store.save(user_id, request, text)


class TripPlannerForm:
    """
    Server-side model of one user's trip planner form.

    Date fields are reconciled on every edit, and ``loading`` guards against a
    second submission while one is still outstanding.
    """

    def __init__(self, **values: Any):
        self.starting_location: Optional[str] = None
        self.destination: str = ""
        self.start_date: Optional[date] = None
        self.number_of_days: Optional[int] = None
        self.end_date: Optional[date] = None
        self.travelers: int = 1
        self.budget: str = ""
        self.interests: List[str] = []
        self.pace: str = PACES[0]
        self.travel_style: str = TRAVEL_STYLES[0]
        self.accommodation_preference: str = ACCOMMODATION_PREFERENCES[0]
        self.transportation_preference: str = TRANSPORTATION_PREFERENCES[0]
        self.dietary_restrictions: Optional[str] = None

        self.loading = False
        self.error = ""
        self.itinerary: Optional[str] = None
        self.saved: Optional[Dict[str, Any]] = None

        for name, value in values.items():
            self.set_field(name, value)

    def set_field(self, name: str, value: Any) -> None:
        if name == "interests":
            self.interests = []
            for interest in value or []:
                if interest not in self.interests:
                    self.toggle_interest(interest)
            return
        if name not in TripRequest.model_fields:
            raise AttributeError(f"Unknown trip planner field: {name}")
        if name in DATE_FIELDS:
            self._set_date_field(name, value)
            return
        setattr(self, name, value)

    def _set_date_field(self, name: str, value: Any) -> None:
        # nothing is assigned unless the edited triple parses and reconciles
        current = {field: getattr(self, field) for field in DATE_FIELDS}
        current[name] = None if value == "" else value
        try:
            checked = DateFields(**current)
        except ValidationError as exc:
            raise TripValidationError([name], f"Invalid value for {name}: {value!r}") from exc
        fields = reconcile_dates(checked.start_date, checked.number_of_days, checked.end_date, edited=name)
        self.start_date = fields.start_date
        self.number_of_days = fields.number_of_days
        self.end_date = fields.end_date

    def toggle_interest(self, interest: str) -> None:
        if interest not in INTERESTS:
            raise TripValidationError(["interests"], f"Unknown interest: {interest}")
        if interest in self.interests:
            self.interests = [i for i in self.interests if i != interest]
        else:
            self.interests = self.interests + [interest]

    def values(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in TripRequest.model_fields}

    def to_request(self) -> TripRequest:
        missing = [name for name in REQUIRED_ON_SUBMIT if not str(getattr(self, name) or "").strip()]
        if missing:
            raise TripValidationError(missing)
        try:
            request = TripRequest(**self.values())
        except ValidationError as exc:
            fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
            raise TripValidationError(fields) from exc
        return request

    async def submit(self, user_id: str, generator: ItineraryGenerator,
                     store: ItineraryRecorder) -> Optional[Dict[str, Any]]:
        """Returns the saved record, or None when a submission is already in flight."""
        if self.loading:
            logger.warning("Ignoring duplicate submission for user %s", user_id)
            return None

        self.error = ""
        self.loading = True
        try:
            request = self.to_request()
            saved = await plan_trip(request, user_id, generator, store)
        except Exception as exc:
            self.error = describe_error(exc)
            logger.error("Trip submission failed for user %s: %s", user_id, exc)
            raise
        finally:
            self.loading = False

        self.itinerary = saved.get("itinerary")
        self.saved = saved
        return saved
