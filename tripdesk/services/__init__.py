"""Services for TripDesk."""
from .llm_client import LLMClient, get_llm_client
from .itinerary_generator import TripRequest, generate_itinerary

__all__ = [
    "LLMClient",
    "get_llm_client",
    "TripRequest",
    "generate_itinerary",
]
