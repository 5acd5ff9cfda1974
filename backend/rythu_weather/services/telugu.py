"""Telugu text for the farmer-facing weather report.

Number words, weather description translations, the fixed user-facing
messages and the spoken report template all live here so the controller and
the HTTP routes produce identical wording.
"""

from __future__ import annotations

import logging

from rythu_weather.schemas import WeatherReading


logger = logging.getLogger(__name__)

LOCATION_NOT_FOUND_MESSAGE = "స్థలం కనబడలేదు. దయచేసి మళ్లీ ప్రయత్నించండి."
VOICE_INPUT_UNSUPPORTED_MESSAGE = "మీ బ్రౌజర్ వాయిస్ ఇన్పుట్‌ను సపోర్ట్ చేయదు."
VOICE_OUTPUT_UNSUPPORTED_MESSAGE = "మీ బ్రౌజర్ వాయిస్ అవుట్‌పుట్‌ను సపోర్ట్ చేయదు."
VOICE_OUTPUT_FAILED_MESSAGE = "వాయిస్ అవుట్‌పుట్‌లో సమస్య. దయచేసి మళ్లీ ప్రయత్నించండి."
NO_SPECIAL_ADVICE = "రైతులకు ప్రత్యేక సూచనలు లేవు."
NO_ADVICE = "రైతులకు సూచనలు లేవు."
TRANSCRIPT_PREFIX = "మీరు చెప్పింది:"

WEATHER_DESCRIPTIONS_TELUGU = {
    "clear sky": "పారదర్శక ఆకాశం",
    "few clouds": "కొన్ని మేఘాలు",
    "scattered clouds": "చిన్న చిన్న మేఘాలు",
    "broken clouds": "పగిలిన మేఘాలు",
    "shower rain": "తీవ్ర వర్షం",
    "rain": "వర్షం",
    "thunderstorm": "ఇరుపులు మేఘాలు",
    "snow": "మంచు",
    "mist": "మబ్బు",
    # Extra OpenWeather descriptions seen for Indian locations.
    "overcast clouds": "మేఘావృత ఆకాశం",
    "light rain": "తేలికపాటి వర్షం",
    "moderate rain": "మోస్తరు వర్షం",
    "heavy intensity rain": "భారీ వర్షం",
    "drizzle": "చినుకులు",
    "haze": "పొగమంచు",
    "fog": "పొగమంచు",
}

_UNITS = (
    "సున్నా",
    "ఒకటి",
    "రెండు",
    "మూడు",
    "నాలుగు",
    "ఐదు",
    "ఆరు",
    "ఏడు",
    "ఎనిమిది",
    "తొమ్మిది",
    "పది",
    "పదకొండు",
    "పన్నెండు",
    "పదమూడు",
    "పద్నాలుగు",
    "పదిహేను",
    "పదహారు",
    "పదిహేడు",
    "పద్దెనిమిది",
    "పందొమ్మిది",
)

_TENS = {
    2: "ఇరవై",
    3: "ముప్పై",
    4: "నలభై",
    5: "యాభై",
    6: "అరవై",
    7: "డెబ్బై",
    8: "ఎనభై",
    9: "తొంభై",
}

# Multiplier words used in front of "hundreds" and "thousands".
_HUNDRED_PREFIX = {
    2: "రెండు",
    3: "మూడు",
    4: "నాలుగు",
    5: "ఐదు",
    6: "ఆరు",
    7: "ఏడు",
    8: "ఎనిమిది",
    9: "తొమ్మిది",
}

MAX_SPOKEN_NUMBER = 99_999


def number_to_telugu(value: int) -> str:
    """Spell out an integer in Telugu words.

    Handles 0..99 999 and their negatives. Anything larger is returned as
    plain digits, which speech engines read out on their own.
    """
    if value < 0:
        return f"మైనస్ {number_to_telugu(-value)}"
    if value > MAX_SPOKEN_NUMBER:
        return str(value)
    return _spell(value)


def _spell(value: int) -> str:
    if value < 20:
        return _UNITS[value]
    if value < 100:
        tens, rest = divmod(value, 10)
        if rest == 0:
            return _TENS[tens]
        return f"{_TENS[tens]} {_UNITS[rest]}"
    if value < 1000:
        hundreds, rest = divmod(value, 100)
        if rest == 0:
            return "వంద" if hundreds == 1 else f"{_HUNDRED_PREFIX[hundreds]} వందలు"
        head = "నూట" if hundreds == 1 else f"{_HUNDRED_PREFIX[hundreds]} వందల"
        return f"{head} {_spell(rest)}"

    thousands, rest = divmod(value, 1000)
    if rest == 0:
        return "వెయ్యి" if thousands == 1 else f"{_spell(thousands)} వేలు"
    head = "వెయ్యి" if thousands == 1 else f"{_spell(thousands)} వేల"
    return f"{head} {_spell(rest)}"


def describe_weather(description: str) -> str:
    """Telugu name of a weather category; unknown categories pass through unchanged."""
    return WEATHER_DESCRIPTIONS_TELUGU.get(description.strip().lower(), description)


def build_speech_text(reading: WeatherReading, advisory: str) -> str:
    location_text = f"{reading.location} వాతావరణ వివరాలు." if reading.location else ""
    temperature = number_to_telugu(round(reading.temperature))
    humidity = number_to_telugu(round(reading.humidity))
    wind_speed = number_to_telugu(round(reading.wind_speed))

    lines = [
        location_text,
        f"ఉష్ణోగ్రత {temperature} డిగ్రీల సెల్సియస్.",
        f"వాతావరణం {describe_weather(reading.weather_desc)}.",
        f"తేమ {humidity} శాతం.",
        f"గాలి వేగం {wind_speed} కిలోమీటర్లు పర్ గంట.",
        "రైతు సోదరులకు సూచనలు:",
        advisory,
    ]
    text = "\n".join(line for line in lines if line)
    logger.debug("Speech text built for %s: %s", reading.location, text)
    return text


def build_display(reading: WeatherReading, advisory: str | None) -> dict:
    return {
        "heading": f"{reading.location} వాతావరణం",
        "temperature": f"{round(reading.temperature)}°C",
        "description": describe_weather(reading.weather_desc),
        "humidity": f"{_fmt_number(reading.humidity)}%",
        "wind_speed": f"{_fmt_number(reading.wind_speed)} km/h",
        "advisory": advisory,
    }


def format_transcript(transcript: str) -> str:
    if not transcript:
        return ""
    return f"{TRANSCRIPT_PREFIX} {transcript}"


def _fmt_number(value: float) -> str:
    rounded = round(value, 1)
    if rounded.is_integer():
        return str(int(rounded))
    return f"{rounded:.1f}"
