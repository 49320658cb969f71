from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

# --- Fixed option lists shown by the trip planner form (display order matters) ---

INTERESTS = [
    "Culture & History",
    "Food & Dining",
    "Nature & Outdoors",
    "Shopping",
    "Nightlife",
    "Art & Museums",
    "Adventure",
    "Relaxation",
    "Family Activities",
    "Local Experiences",
]

PACES = ["Relaxed", "Moderate", "Fast-paced"]

TRAVEL_STYLES = ["Budget", "Mid-range", "Luxury", "Backpacking", "Family-friendly"]

ACCOMMODATION_PREFERENCES = [
    "Hotel",
    "Hostel",
    "Vacation Rental",
    "Resort",
    "Bed & Breakfast",
    "Camping",
]

TRANSPORTATION_PREFERENCES = [
    "Public Transit",
    "Train",
    "Rental Car",
    "Walking",
    "Taxi/Rideshare",
    "Domestic Flights",
]

DateField = Literal["start_date", "number_of_days", "end_date"]


def _check_choice(value: str, choices: List[str], label: str) -> str:
    if value not in choices:
        raise ValueError(f"{label} must be one of: {', '.join(choices)}")
    return value


class DateFields(BaseModel):
    """The start date / day count / end date triple kept consistent by the form."""
    start_date: Optional[date] = None
    number_of_days: Optional[int] = Field(None, ge=1)
    end_date: Optional[date] = None


class DateEditRequest(DateFields):
    # None means "just re-run the derivation"
    edited: Optional[DateField] = None


class TripRequest(BaseModel):
    """Everything the user filled in on the trip planner form."""
    starting_location: Optional[str] = Field(None, description="Where the trip starts (free text).")
    destination: str = Field(..., min_length=1, description="Where the user wants to go.")
    start_date: Optional[date] = None
    number_of_days: Optional[int] = Field(None, ge=1)
    end_date: Optional[date] = None
    travelers: int = Field(1, ge=1)
    # required on submit, optional for previews
    budget: Optional[str] = Field(None, description="Free-form budget, e.g. '$1000'.")
    interests: List[str] = Field(default_factory=list)
    pace: str = PACES[0]
    travel_style: str = TRAVEL_STYLES[0]
    accommodation_preference: str = ACCOMMODATION_PREFERENCES[0]
    transportation_preference: str = TRANSPORTATION_PREFERENCES[0]
    dietary_restrictions: Optional[str] = None

    @field_validator("destination", mode="before")
    @classmethod
    def _strip_required(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("starting_location", "budget", "dietary_restrictions", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("interests")
    @classmethod
    def _known_interests(cls, v: List[str]) -> List[str]:
        selected: List[str] = []
        for interest in v:
            _check_choice(interest, INTERESTS, "interests")
            if interest not in selected:
                selected.append(interest)
        return selected

    @field_validator("pace")
    @classmethod
    def _known_pace(cls, v: str) -> str:
        return _check_choice(v, PACES, "pace")

    @field_validator("travel_style")
    @classmethod
    def _known_style(cls, v: str) -> str:
        return _check_choice(v, TRAVEL_STYLES, "travel_style")

    @field_validator("accommodation_preference")
    @classmethod
    def _known_accommodation(cls, v: str) -> str:
        return _check_choice(v, ACCOMMODATION_PREFERENCES, "accommodation_preference")

    @field_validator("transportation_preference")
    @classmethod
    def _known_transportation(cls, v: str) -> str:
        return _check_choice(v, TRANSPORTATION_PREFERENCES, "transportation_preference")


class ItineraryOut(TripRequest):
    """A saved trip: the request, its generated plan and the owner."""
    id: str
    user_id: str
    itinerary: str
    created_at: str


class TripOptions(BaseModel):
    interests: List[str] = Field(default_factory=lambda: list(INTERESTS))
    paces: List[str] = Field(default_factory=lambda: list(PACES))
    travel_styles: List[str] = Field(default_factory=lambda: list(TRAVEL_STYLES))
    accommodation_preferences: List[str] = Field(default_factory=lambda: list(ACCOMMODATION_PREFERENCES))
    transportation_preferences: List[str] = Field(default_factory=lambda: list(TRANSPORTATION_PREFERENCES))


class PromptOut(BaseModel):
    prompt: str
