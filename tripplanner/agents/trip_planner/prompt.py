# tripplanner/agents/trip_planner/prompt.py

from tripplanner.schemas.trip_schemas import TripRequest

CLOSING_INSTRUCTION = " Include daily activities, recommended restaurants, estimated costs, and practical tips."
MISSING_DATES_CLAUSE = ". Please specify dates or number of days."


def _date_clause(request: TripRequest) -> str:
    if request.start_date and request.end_date:
        return f" from {request.start_date.isoformat()} to {request.end_date.isoformat()}"
    if request.start_date and request.number_of_days:
        return f" for {request.number_of_days} days starting on {request.start_date.isoformat()}"
    return MISSING_DATES_CLAUSE


def build_prompt(request: TripRequest) -> str:
    """
    Serialize a trip request into the instruction sent to the text-generation model.
    Clause order is fixed; the same request always yields the same string.
    """
    parts = [f"Create a detailed travel itinerary for {request.destination}"]

    if request.starting_location:
        parts.append(f" starting from {request.starting_location}")

    parts.append(_date_clause(request))
    parts.append(f" for {request.travelers} person(s).")

    if request.budget:
        parts.append(f" with a budget of {request.budget}.")
    if request.interests:
        parts.append(f" The traveler(s) are interested in: {', '.join(request.interests)}.")

    parts.append(f" Preferred pace: {request.pace}.")
    parts.append(f" Travel style: {request.travel_style}.")
    parts.append(f" Accommodation preference: {request.accommodation_preference}.")
    parts.append(f" Transportation preference: {request.transportation_preference}.")

    if request.dietary_restrictions:
        parts.append(f" Dietary restrictions: {request.dietary_restrictions}.")

    parts.append(CLOSING_INSTRUCTION)
    return "".join(parts)
