"""
Configuration management using Pydantic models loaded from YAML.
"""

from datetime import time
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import Resource, ServiceOffering
from .domain.time_grid import TimeGrid
from .domain.view_axis import WeekStart


def _coerce_time(value):
    """
    Accept ``"HH:MM"`` strings, ``time`` objects or minutes past midnight.

    PyYAML reads an unquoted ``20:00`` as the sexagesimal integer 1200,
    which is exactly the number of minutes past midnight.
    """
    if isinstance(value, time):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        if not 0 <= value < 24 * 60:
            raise ValueError(f"Minutes past midnight must be between 0 and 1439, got {value}")
        return time(hour=value // 60, minute=value % 60)
    if isinstance(value, str):
        try:
            hour, minute = (int(part) for part in value.strip().split(":"))
            return time(hour=hour, minute=minute)
        except ValueError as exc:
            raise ValueError(f"Time must be in HH:MM format, got {value!r}") from exc
    raise ValueError(f"Unsupported time value: {value!r}")


class GridConfig(BaseModel):
    """Business-day grid settings."""
    open_time: time = time(7, 30)
    close_time: time = time(20, 0)
    granularity_minutes: int = 15
    row_height_px: int = 48

    @field_validator("open_time", "close_time", mode="before")
    @classmethod
    def parse_time(cls, value):
        return _coerce_time(value)

    @field_validator("granularity_minutes")
    @classmethod
    def validate_granularity(cls, value: int) -> int:
        """Granularity must split an hour evenly."""
        if value <= 0 or 60 % value:
            raise ValueError(f"granularity_minutes must be a positive divisor of 60, got {value}")
        return value

    @field_validator("row_height_px")
    @classmethod
    def validate_row_height(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("row_height_px must be greater than zero")
        return value

    @model_validator(mode="after")
    def validate_window(self) -> "GridConfig":
        """Ensure the grid opens before it closes."""
        if self.close_time <= self.open_time:
            raise ValueError("close_time must be later than open_time")
        return self

    def to_time_grid(self) -> TimeGrid:
        return TimeGrid(
            open_time=self.open_time,
            close_time=self.close_time,
            granularity_minutes=self.granularity_minutes,
        )


class ResourceConfig(BaseModel):
    """A stylist or chair shown as a column."""
    id: str
    name: str

    def to_resource(self) -> Resource:
        return Resource(id=self.id, name=self.name)


class ServiceConfig(BaseModel):
    """A bookable service."""
    name: str
    price: float
    duration_minutes: int

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("duration_minutes must be greater than zero")
        return value

    def to_offering(self) -> ServiceOffering:
        return ServiceOffering(name=self.name, price=self.price, duration_minutes=self.duration_minutes)


def _default_services() -> List[ServiceConfig]:
    return [
        ServiceConfig(name="Haircut", price=65, duration_minutes=45),
        ServiceConfig(name="Color", price=120, duration_minutes=90),
        ServiceConfig(name="Blowout", price=45, duration_minutes=30),
        ServiceConfig(name="Highlights", price=150, duration_minutes=120),
        ServiceConfig(name="Balayage", price=180, duration_minutes=150),
        ServiceConfig(name="Beard Trim", price=30, duration_minutes=15),
    ]


class BoardConfig(BaseModel):
    """Application configuration."""
    grid: GridConfig = Field(default_factory=GridConfig)
    resources: List[ResourceConfig] = Field(
        default_factory=lambda: [ResourceConfig(id="1", name="Owner")]
    )
    my_resource_id: str = "1"
    week_start: WeekStart = WeekStart.ROLLING
    timezone: str = "America/New_York"
    services: List[ServiceConfig] = Field(default_factory=_default_services)
    appointments_file: Optional[Path] = None

    @field_validator("week_start", mode="before")
    @classmethod
    def normalize_week_start(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("resources")
    @classmethod
    def validate_resources(cls, value: List[ResourceConfig]) -> List[ResourceConfig]:
        """Ensure resource ids are unique."""
        seen: set[str] = set()
        for resource in value:
            if resource.id in seen:
                raise ValueError(f"Duplicate resource id detected: {resource.id}")
            seen.add(resource.id)
        return value

    @model_validator(mode="after")
    def validate_my_resource(self) -> "BoardConfig":
        if self.find_resource(self.my_resource_id) is None:
            raise ValueError(f"my_resource_id {self.my_resource_id!r} is not a configured resource")
        return self

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "BoardConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            BoardConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)

        # Relative seed files are resolved against the config file's folder
        if config.appointments_file and not config.appointments_file.is_absolute():
            config.appointments_file = config_path.parent / config.appointments_file

        return config

    def find_resource(self, resource_id: str) -> ResourceConfig | None:
        """Find a resource by id."""
        for resource in self.resources:
            if resource.id == resource_id:
                return resource
        return None

    def resolve_resource(self, identifier: str) -> str:
        """
        Resolve a resource identifier (id or case-insensitive name) to an id.

        Raises:
            ValueError: If identifier cannot be resolved
        """
        if self.find_resource(identifier):
            return identifier

        for resource in self.resources:
            if resource.name.lower() == identifier.lower():
                return resource.id

        raise ValueError(
            f"Unknown resource identifier: '{identifier}'. "
            f"Use a configured resource id or name."
        )

    def to_resources(self) -> List[Resource]:
        return [resource.to_resource() for resource in self.resources]

    def to_services(self) -> List[ServiceOffering]:
        return [service.to_offering() for service in self.services]


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
