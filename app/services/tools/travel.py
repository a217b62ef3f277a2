"""Simulated travel agency backend tools.

Each tool waits a random, bounded amount of time and returns randomized but
well-formed data. Pass a seeded ``random.Random`` and a ``(0, 0)`` latency to
get reproducible, instant results.
"""
import asyncio
import logging
import random
import time
from typing import Any, Dict, Optional, Tuple

from app.services.tools.base import Tool, ToolResult

logger = logging.getLogger(__name__)

AIRLINES = ["United Airlines", "Delta", "American", "Southwest", "JetBlue", "Alaska", "Spirit"]
CARRIER_CODES = ["UA", "DL", "AA", "WN", "B6", "AS", "NK"]
DEPARTURE_MINUTES = ["00", "15", "30", "45"]
HOTEL_CHAINS = ["Hilton", "Marriott", "Holiday Inn", "Hyatt", "Best Western", "Comfort Inn", "Four Seasons"]
AMENITIES = ["WiFi", "Pool", "Gym", "Breakfast"]


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class SimulatedTool(Tool):
    """Tool with an artificial latency drawn from ``latency`` (seconds)."""

    latency: Tuple[float, float] = (0.0, 0.0)

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        latency: Optional[Tuple[float, float]] = None,
    ):
        self.rng = rng or random.Random()
        if latency is not None:
            self.latency = latency

    async def _simulate_latency(self) -> None:
        low, high = self.latency
        await asyncio.sleep(self.rng.uniform(low, high) if high > low else low)


class CheckFlightPrices(SimulatedTool):
    name = "checkFlightPrices"
    params_hint = "{origin, destination, date}"
    latency = (0.2, 0.7)

    async def invoke(self, params: Dict[str, Any]) -> ToolResult:
        logger.info(
            f"[TOOL] Searching flights: {params.get('origin') or 'ANY'} -> "
            f"{params.get('destination') or 'ANY'}"
        )
        await self._simulate_latency()

        rng = self.rng
        flights = [
            {
                "airline": rng.choice(AIRLINES),
                "price": rng.randint(250, 649),
                "time": f"{rng.randint(0, 23):02d}:{rng.choice(DEPARTURE_MINUTES)}",
                "flightNumber": f"{rng.choice(CARRIER_CODES)}{rng.randint(1000, 9999)}",
            }
            for _ in range(rng.randint(3, 6))
        ]
        flights.sort(key=lambda flight: flight["price"])

        logger.info(f"[TOOL] Found {len(flights)} flights")
        return ToolResult(
            success=True,
            data={
                "flights": flights,
                "searchId": f"SRCH{_epoch_ms()}",
                "cached": False,
            },
        )


class CheckHotelAvailability(SimulatedTool):
    name = "checkHotelAvailability"
    params_hint = "{location, checkIn, checkOut, guests}"
    latency = (0.3, 0.9)

    async def invoke(self, params: Dict[str, Any]) -> ToolResult:
        logger.info(
            f"[TOOL] Checking hotels - Location: {params.get('location')}, "
            f"Guests: {params.get('guests') or 1}"
        )
        await self._simulate_latency()

        rng = self.rng
        hotels = [
            {
                "name": rng.choice(HOTEL_CHAINS),
                "price": rng.randint(80, 279),
                "rating": f"{rng.uniform(3.5, 5.0):.1f}",
                "availability": rng.randint(1, 10),
                "amenities": [amenity for amenity in AMENITIES if rng.random() > 0.5],
            }
            for _ in range(rng.randint(3, 5))
        ]
        hotels.sort(key=lambda hotel: float(hotel["rating"]), reverse=True)

        return ToolResult(
            success=True,
            data={
                "hotels": hotels,
                "location": params.get("location") or "General Area",
                "checkIn": params.get("checkIn") or "flexible",
                "checkOut": params.get("checkOut") or "flexible",
            },
        )


class MakeBooking(SimulatedTool):
    name = "makeBooking"
    params_hint = "{type, details, customerInfo}"
    latency = (0.4, 1.2)

    async def invoke(self, params: Dict[str, Any]) -> ToolResult:
        logger.info(f"[TOOL] Processing booking type: {params.get('type') or 'general'}")
        await self._simulate_latency()

        booking_id = f"BK{_epoch_ms()}{self.rng.randint(0, 999)}"
        logger.info(f"[TOOL] Reserved under ID: {booking_id}")

        return ToolResult(
            success=True,
            data={
                "bookingId": booking_id,
                "status": "confirmed",
                "details": params.get("details") or {},
                "confirmationSent": True,
                "processingTime": f"{self.rng.randint(200, 699)}ms",
            },
        )


class EndCall(SimulatedTool):
    name = "endCall"
    params_hint = "{summary}"

    async def invoke(self, params: Dict[str, Any]) -> ToolResult:
        logger.info(f"[TOOL] Call termination requested for {params.get('callId') or 'unknown'}")
        return ToolResult(
            success=True,
            data={
                "callEnded": True,
                "summary": params.get("summary") or "Call completed successfully",
            },
        )
