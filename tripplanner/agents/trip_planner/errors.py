from typing import Iterable, List


QUOTA_EXCEEDED_MESSAGE = "The AI service quota has been exceeded. Please wait a few minutes and try again."
MISSING_API_KEY_MESSAGE = "Error: Gemini API Key not configured."


class TripPlannerError(Exception):
    """Base class for failures surfaced to the person filling out the form."""

    @property
    def user_message(self) -> str:
        return str(self)


class TripValidationError(TripPlannerError):
    """Required form fields are missing or invalid. Raised before any external call."""

    def __init__(self, fields: Iterable[str], message: str | None = None):
        self.fields: List[str] = list(fields)
        super().__init__(message or f"Please fill in the required fields: {', '.join(self.fields)}")


class ConfigurationError(TripPlannerError):
    """A required secret (e.g. GEMINI_API_KEY) is not configured."""

    def __init__(self, message: str = MISSING_API_KEY_MESSAGE):
        super().__init__(message)


class GenerationError(TripPlannerError):
    """The text-generation service failed or returned nothing usable."""

    def __init__(self, message: str):
        super().__init__(message)
        self.is_quota = is_quota_error(message)

    @property
    def user_message(self) -> str:
        if self.is_quota:
            return QUOTA_EXCEEDED_MESSAGE
        return f"Failed to generate itinerary: {self}"


class PersistenceError(TripPlannerError):
    """Saving or loading itineraries from the document store failed."""

    @property
    def user_message(self) -> str:
        return f"Failed to save itinerary: {self}"


def is_quota_error(message: str) -> bool:
    """Rate-limit / quota failures are only recognisable from the provider's error text."""
    text = (message or "").lower()
    return "429" in text or "quota" in text


def describe_error(exc: Exception) -> str:
    """User-facing text for any failure raised while submitting a trip."""
    if isinstance(exc, TripPlannerError):
        return exc.user_message
    return f"Something went wrong while planning your trip: {exc}"
