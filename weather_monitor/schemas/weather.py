"""
Weather lookup schemas.

The provider's response is mapped onto this fixed shape. Every field is
always present; absent provider values become the documented defaults.
"""

from typing import List, Optional, Union

from pydantic import Field

from weather_monitor.schemas.base import BaseSchema


class WeatherLocation(BaseSchema):
    """Where the observation was made."""
    name: str
    country: str = ""
    region: str = ""
    localtime: str
    lat: Union[str, float] = ""
    lon: Union[str, float] = ""


class WeatherCurrent(BaseSchema):
    """Current conditions."""
    temperature: Optional[float] = None
    feelslike: Optional[float] = None
    humidity: Optional[float] = None
    wind_speed: Optional[float] = None
    wind_dir: str = ""
    pressure: Optional[float] = None
    visibility: Optional[float] = None
    uv_index: Optional[float] = None
    cloudcover: Optional[float] = None
    weather_descriptions: List[str] = Field(default_factory=lambda: ["N/A"])
    weather_icons: List[str] = Field(default_factory=list)
    is_day: str = "yes"
    observation_time: str = ""

    @property
    def condition(self) -> str:
        """Primary weather description."""
        return self.weather_descriptions[0] if self.weather_descriptions else "N/A"


class WeatherReport(BaseSchema):
    """Normalized weather lookup result."""
    location: WeatherLocation
    current: WeatherCurrent
