from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from rythu_weather.schemas import WeatherReading
from rythu_weather.services.telugu import NO_SPECIAL_ADVICE


logger = logging.getLogger(__name__)

HEAT_THRESHOLD_C = 35.0
COLD_THRESHOLD_C = 10.0
DISEASE_HUMIDITY_PCT = 80.0
DRY_HUMIDITY_PCT = 30.0
STRONG_WIND_KMH = 30.0

RAIN_CATEGORY_MARKERS = ("rain", "drizzle", "shower", "thunderstorm")


@dataclass(frozen=True)
class AdvisoryRule:
    name: str
    applies: Callable[[WeatherReading], bool]
    message: str


def is_rain_category(description: str) -> bool:
    normalized = description.strip().lower()
    return any(marker in normalized for marker in RAIN_CATEGORY_MARKERS)


def is_thunderstorm(description: str) -> bool:
    return "thunderstorm" in description.strip().lower()


ADVISORY_RULES: tuple[AdvisoryRule, ...] = (
    AdvisoryRule(
        name="thunderstorm",
        applies=lambda reading: is_thunderstorm(reading.weather_desc),
        message="ఉరుములు మెరుపులు ఉన్నాయి. పొలం పనులు ఆపి సురక్షిత ప్రదేశంలో ఉండండి.",
    ),
    AdvisoryRule(
        name="disease_risk",
        applies=lambda reading: is_rain_category(reading.weather_desc)
        and reading.humidity >= DISEASE_HUMIDITY_PCT,
        message="అధిక తేమ మరియు వర్షం వల్ల పంటలకు తెగుళ్ల ప్రమాదం ఉంది. శిలీంద్ర నాశినులు సిద్ధంగా ఉంచుకోండి.",
    ),
    AdvisoryRule(
        name="rain",
        applies=lambda reading: is_rain_category(reading.weather_desc),
        message="వర్షం కారణంగా పురుగు మందులు, ఎరువుల పిచికారీ వాయిదా వేయండి.",
    ),
    AdvisoryRule(
        name="heat",
        applies=lambda reading: reading.temperature >= HEAT_THRESHOLD_C,
        message="ఎండ తీవ్రంగా ఉంది. పంటలకు సాయంత్రం వేళ నీరు పెట్టండి.",
    ),
    AdvisoryRule(
        name="cold",
        applies=lambda reading: reading.temperature <= COLD_THRESHOLD_C,
        message="చలి ఎక్కువగా ఉంది. నారుమడులను, పశువులను చలి నుండి కాపాడండి.",
    ),
    AdvisoryRule(
        name="strong_wind",
        applies=lambda reading: reading.wind_speed >= STRONG_WIND_KMH,
        message="గాలి వేగం ఎక్కువగా ఉంది. పిచికారీ చేయకండి, పొడవైన పంటలకు ఆసరా ఇవ్వండి.",
    ),
    AdvisoryRule(
        name="dry_air",
        applies=lambda reading: reading.humidity <= DRY_HUMIDITY_PCT
        and not is_rain_category(reading.weather_desc),
        message="గాలిలో తేమ తక్కువగా ఉంది. నేలలో తేమ నిలవడానికి మల్చింగ్ చేయండి.",
    ),
)


def matching_rules(reading: WeatherReading) -> list[str]:
    return [rule.name for rule in ADVISORY_RULES if rule.applies(reading)]


def build_advisory(reading: WeatherReading) -> str:
    messages = [rule.message for rule in ADVISORY_RULES if rule.applies(reading)]
    advisory = " ".join(messages) if messages else NO_SPECIAL_ADVICE
    logger.debug("Advisory for %s: %s", reading.location, advisory)
    return advisory
