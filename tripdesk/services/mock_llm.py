"""
Mock LLM Client - offline itinerary generator.
Builds a deterministic plan from the day/date lines in the system prompt so
development and tests run without an API key.
"""
import json
import logging
import re

logger = logging.getLogger(__name__)

DAY_LINE = re.compile(r"^Day (\d+): (\d{2} \w{3} \d{2})$", re.MULTILINE)
DESTINATION_LINE = re.compile(r"itinerary for (.+?)\.\n")
BUDGET_LINE = re.compile(r"- Budget: ([\d.]+) (\w+)")

DAY_TEMPLATE = [
    ("8:00 AM", "Breakfast at the hotel", "MEAL"),
    ("10:00 AM", "Explore {place}", "SIGHTSEEING"),
    ("1:00 PM", "Lunch at a local restaurant", "MEAL"),
    ("3:00 PM", "Guided walk around {place}", "ACTIVITY"),
    ("7:30 PM", "Dinner", "MEAL"),
]


class MockLLMClient:
    """Deterministic stand-in for the chat completion API."""

    def __init__(self):
        self.model = "mock-demo"

    async def complete(
        self,
        messages: list[dict],
        model: str,
        max_tokens: int,
        json_mode: bool = False
    ):
        from .llm_client import Completion

        system_msg = next((m["content"] for m in messages if m["role"] == "system"), "")
        user_msg = next((m["content"] for m in reversed(messages) if m["role"] == "user"), "")

        content = json.dumps(self._generate_itinerary(system_msg, user_msg))
        prompt_tokens = (len(system_msg) + len(user_msg)) // 4
        completion_tokens = len(content) // 4
        usage = {
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": prompt_tokens + completion_tokens,
        }
        logger.debug(f"Mock completion for {model}: {usage['total_tokens']} tokens")
        return Completion(content=content, model=model, usage=usage)

    def _generate_itinerary(self, system_msg: str, user_msg: str) -> dict:
        days = DAY_LINE.findall(system_msg)
        match = DESTINATION_LINE.search(user_msg)
        destinations = match.group(1) if match else "the destination"
        places = [p.strip() for p in destinations.split(",") if p.strip()] or [destinations]

        daily = []
        for number, date in days:
            place = places[(int(number) - 1) % len(places)]
            daily.append({
                "day": int(number),
                "date": date,
                "title": f"Day {number} - {place}",
                "activities": [
                    {
                        "time": time,
                        "title": title.format(place=place),
                        "type": kind,
                        "description": title.format(place=place),
                        "location": place,
                    }
                    for time, title, kind in DAY_TEMPLATE
                ],
            })

        result = {
            "dailyItinerary": daily,
            "accommodation": [
                {"name": f"{places[0]} Central Hotel", "rating": 4, "location": places[0]},
            ],
        }

        budget = BUDGET_LINE.search(user_msg)
        if budget:
            amount = float(budget.group(1))
            result["budgetEstimation"] = {
                "amount": amount,
                "currency": budget.group(2),
                "costTourist": amount,
            }
        return result
