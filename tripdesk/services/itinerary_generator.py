"""
Itinerary Generator.
Builds the prompt for a trip request, calls the chat model sized for the
user's tier and normalises the JSON reply into the stored itinerary shape.
"""
import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Optional

from .llm_client import get_llm_client

logger = logging.getLogger(__name__)

STANDARD = "standard"
PREMIUM = "premium"

MODELS = {
    STANDARD: "gpt-3.5-turbo-0125",
    PREMIUM: "gpt-4-turbo",
}

MAX_TOKENS = {
    STANDARD: 2000,
    PREMIUM: 4000,
}

# USD per million tokens
COSTS = {
    "gpt-3.5-turbo-0125": {"input": 0.50, "output": 1.50},
    "gpt-4-turbo": {"input": 10.00, "output": 30.00},
}

PREMIUM_ROLES = {"SUPER_ADMIN", "AGENCY_ADMIN", "DMC", "DMC_ADMIN"}

PLACEHOLDER_HOTEL_IMAGE = "/placeholder-hotel.jpg"

COUNTRY_KEYWORDS = [
    ("Ireland", ("ireland", "dublin", "cork")),
    ("India", ("india", "kashmir", "kerala", "rajasthan")),
    ("Thailand", ("thailand", "bangkok", "phuket")),
    ("Spain", ("spain", "barcelona", "madrid")),
    ("France", ("france", "paris", "nice")),
]

SYSTEM_PROMPT = """You are an expert travel planner specializing in creating detailed, realistic itineraries. Create comprehensive travel itineraries that consider:
- Budget constraints and local costs
- Travel time between locations
- Logical daily flow and pacing
- Local customs and best practices
- Weather and seasonal considerations
- Age-appropriate activities for children
- Dietary restrictions and preferences

IMPORTANT: Use these exact dates for each day:
{day_lines}

For every activity that involves a specific place, include a "location" field with the full address: city, state/region and country (e.g. "Jaipur, Rajasthan, India", not just "Jaipur").

Always respond with valid JSON matching this exact schema:

{{
  "dailyItinerary": [
    {{
      "day": number (starting from 1),
      "date": "string (DD Mon YY, e.g. '15 Mar 25') - MUST match the dates above",
      "title": "string (e.g. 'Day 1 - Arrival and Exploration')",
      "activities": [
        {{
          "time": "string (e.g. '8:00 AM')",
          "title": "string",
          "type": "SIGHTSEEING|ACTIVITY|MEAL|TRANSPORT|REST|ADVENTURE|HOTEL_CHECKIN|HOTEL_CHECKOUT",
          "description": "string",
          "location": "string (City, State/Region, Country)"
        }}
      ]
    }}
  ],
  "accommodation": [
    {{
      "name": "string",
      "rating": number (1-5),
      "nights": number,
      "image": "string",
      "location": "string (full address with city, region and country)"
    }}
  ],
  "budgetEstimation": {{
    "amount": number,
    "currency": "string",
    "costTourist": number
  }}
}}

LOCATION RULES:
1. Always include the country
2. Include the state/region/province when applicable
3. Give airports and stations their full location
4. Generic activities without a specific place may omit the location
5. Use the destination country from the request as the primary geographic context

Keep descriptions concise. Make activities realistic, allow for travel time between places and include breakfast, lunch and dinner."""

USER_PROMPT = """Create a {days}-day itinerary for {destinations}.
PRIMARY GEOGRAPHIC CONTEXT: All locations should be in {country}. Always write locations as "City, State/Region, {country}".

TRAVELER PROFILE:
- Group: {adults} adults, {children} children ({under6} under 6, {from7to12} aged 7-12)
- Travel Type: {travel_type}
- Budget: {budget} {currency}
- Start Date: {start_date}
- End Date: {end_date}

PREFERENCES:
- Activities: {activity_preferences}
- Hotel: {hotel_preferences}
- Meals: {meal_preference}
- Dietary: {dietary_preference}
- Transport: {transport_preferences}
- Flights Required: {flights_required}
- Traveling with Pets: {traveling_with_pets}

SPECIAL REQUIREMENTS:
{special}

Create a realistic, detailed itinerary that fits the budget and the travel style, with activities from morning to evening and proper meal times."""


@dataclass
class TripRequest:
    """What the traveller asked for."""
    destinations: str
    start_date: str
    end_date: str
    travel_type: str = ""
    adults: int = 0
    children: int = 0
    under6: int = 0
    from7to12: int = 0
    budget: float = 0
    currency: str = "USD"
    activity_preferences: str = ""
    hotel_preferences: str = ""
    meal_preference: str = ""
    dietary_preference: str = ""
    transport_preferences: str = ""
    traveling_with_pets: str = "no"
    flights_required: str = "no"
    additional_requests: Optional[str] = None
    more_details: Optional[str] = None
    must_see_spots: Optional[str] = None
    pickup_location: Optional[str] = None
    drop_location: Optional[str] = None


@dataclass
class GeneratedItinerary:
    daily_itinerary: list[dict]
    accommodation: list[dict]
    budget_estimation: dict
    model_used: str
    cost: float = 0.0
    usage: dict = field(default_factory=dict)


def parse_date(value: str) -> date:
    """Accept YYYY-MM-DD or a full ISO timestamp."""
    value = (value or "").strip()
    if not value:
        raise ValueError("Date is required")
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()


def format_day_date(day: date) -> str:
    """Render a date as 'DD Mon YY', e.g. '05 Mar 25'."""
    return day.strftime("%d %b %y")


def trip_days(start_date: str, end_date: str) -> int:
    """Inclusive number of days between two dates."""
    start = parse_date(start_date)
    end = parse_date(end_date)
    if end < start:
        raise ValueError("End date must not be before start date")
    return math.ceil((end - start) / timedelta(days=1)) + 1


def day_dates(start_date: str, days: int) -> list[str]:
    start = parse_date(start_date)
    return [format_day_date(start + timedelta(days=i)) for i in range(days)]


def user_tier(role: Optional[str], user_type: Optional[str] = None) -> str:
    """Admins of agencies/DMCs and super admins get the premium model."""
    for value in (role, user_type):
        if value and str(value).upper() in PREMIUM_ROLES:
            return PREMIUM
    return STANDARD


def calculate_cost(usage: dict, model: str) -> float:
    prices = COSTS.get(model)
    if not prices:
        return 0.0
    input_cost = usage.get("prompt_tokens", 0) / 1_000_000 * prices["input"]
    output_cost = usage.get("completion_tokens", 0) / 1_000_000 * prices["output"]
    return round(input_cost + output_cost, 6)


def country_context(destinations: str) -> str:
    """Best-guess country for the destinations, used to anchor locations."""
    lower = destinations.lower()
    for country, keywords in COUNTRY_KEYWORDS:
        if any(k in lower for k in keywords):
            return country
    last = destinations.split(",")[-1].strip()
    return last or "the destination country"


def build_prompt(request: TripRequest) -> list[dict]:
    days = trip_days(request.start_date, request.end_date)
    dates = day_dates(request.start_date, days)
    day_lines = "\n".join(f"Day {i + 1}: {d}" for i, d in enumerate(dates))

    special = [
        ("Must-see spots", request.must_see_spots),
        ("Additional requests", request.additional_requests),
        ("More details", request.more_details),
        ("Pickup", request.pickup_location),
        ("Drop", request.drop_location),
    ]
    special_lines = "\n".join(f"- {label}: {value}" for label, value in special if value) or "- None"

    user = USER_PROMPT.format(
        days=days,
        destinations=request.destinations,
        country=country_context(request.destinations),
        adults=request.adults,
        children=request.children,
        under6=request.under6,
        from7to12=request.from7to12,
        travel_type=request.travel_type or "Not specified",
        budget=request.budget,
        currency=request.currency,
        start_date=request.start_date,
        end_date=request.end_date,
        activity_preferences=request.activity_preferences or "None specified",
        hotel_preferences=request.hotel_preferences or "No preference",
        meal_preference=request.meal_preference or "No preference",
        dietary_preference=request.dietary_preference or "No restrictions",
        transport_preferences=request.transport_preferences or "No preference",
        flights_required=request.flights_required or "no",
        traveling_with_pets=request.traveling_with_pets or "no",
        special=special_lines,
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT.format(day_lines=day_lines)},
        {"role": "user", "content": user},
    ]


def normalize_itinerary(data: dict, request: TripRequest) -> tuple[list[dict], list[dict], dict]:
    """Fill the gaps a model reply may leave in the itinerary shape."""
    days = trip_days(request.start_date, request.end_date)
    dates = day_dates(request.start_date, max(days, len(data.get("dailyItinerary") or [])))
    default_nights = max(1, days - 1)

    daily = []
    for index, day in enumerate(data.get("dailyItinerary") or []):
        number = day.get("day") or index + 1
        daily.append({
            "day": number,
            "date": day.get("date") or dates[index],
            "title": day.get("title") or f"Day {number}",
            "activities": [
                {
                    "time": act.get("time") or "",
                    "title": act.get("title") or "",
                    "type": act.get("type") or "ACTIVITY",
                    "description": act.get("description") or act.get("title") or "",
                    "location": act.get("location") or None,
                }
                for act in day.get("activities") or []
            ],
        })

    accommodation = [
        {
            "name": acc.get("name") or "Hotel",
            "rating": acc.get("rating") or 3,
            "nights": acc.get("nights") or default_nights,
            "image": acc.get("image") or PLACEHOLDER_HOTEL_IMAGE,
            "location": acc.get("location") or None,
        }
        for acc in data.get("accommodation") or []
    ]
    if not accommodation:
        accommodation.append({
            "name": "Selected Hotel",
            "rating": 3,
            "nights": default_nights,
            "image": PLACEHOLDER_HOTEL_IMAGE,
        })

    budget = data.get("budgetEstimation") or {
        "amount": request.budget,
        "currency": request.currency,
        "costTourist": request.budget,
    }
    return daily, accommodation, budget


def _is_rate_limit(error: Exception) -> bool:
    return error.__class__.__name__ == "RateLimitError" or "rate_limit" in str(error)


async def generate_itinerary(request: TripRequest, tier: str = STANDARD) -> GeneratedItinerary:
    """
    Generate a day-by-day itinerary with one chat completion.

    A premium request that hits a rate limit is retried once on the standard
    model; every other failure propagates to the caller.
    """
    model = MODELS.get(tier, MODELS[STANDARD])
    max_tokens = MAX_TOKENS.get(tier, MAX_TOKENS[STANDARD])
    messages = build_prompt(request)

    logger.info(f"Generating itinerary with {model} for {tier} tier")
    try:
        data, completion = await get_llm_client().chat_json(messages, model=model, max_tokens=max_tokens)
    except Exception as e:
        if tier == PREMIUM and _is_rate_limit(e):
            logger.warning("Premium model rate limited, falling back to standard")
            return await generate_itinerary(request, STANDARD)
        raise

    daily, accommodation, budget = normalize_itinerary(data, request)
    cost = calculate_cost(completion.usage, model)
    logger.info(f"Itinerary generated: {len(daily)} days, {len(accommodation)} hotels, cost ${cost:.6f}")

    return GeneratedItinerary(
        daily_itinerary=daily,
        accommodation=accommodation,
        budget_estimation=budget,
        model_used=model,
        cost=cost,
        usage=completion.usage,
    )
