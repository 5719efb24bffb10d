"""
Configuration management for FM Dashboard
Handles loading and saving display settings and the urgency weight table
"""

import json
import logging
from dataclasses import dataclass, field, fields
from datetime import timezone, tzinfo
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fm_dashboard.core.errors import FMDashboardError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UrgencyWeights:
    """
    Tunable policy table for the urgency heuristic.

    Attributes:
        priority: Base points per priority level (read-only mapping)
        default_priority: Base points for unrecognized priorities
        overdue: Bonus when the due date has passed
        due_today: Bonus when due within the current day
        due_tomorrow: Bonus when due in one day
        due_soon: Bonus when due in two or three days
        due_soon_days: Upper bound (inclusive) of the "due soon" window
        property_impact: Bonus for property-impacting work
        on_hold: Penalty points for stalled work
        ceiling: Maximum score
    """
    priority: Mapping[str, int] = field(default_factory=lambda: {
        "Critical": 4,
        "High": 3,
        "Medium": 2,
        "Low": 1,
    }, hash=False)
    default_priority: int = 1
    overdue: int = 6
    due_today: int = 5
    due_tomorrow: int = 3
    due_soon: int = 2
    due_soon_days: int = 3
    property_impact: int = 2
    on_hold: int = 1
    ceiling: int = 10

    def __post_init__(self):
        object.__setattr__(self, "priority", MappingProxyType(dict(self.priority)))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'UrgencyWeights':
        """
        Build weights from a dict, falling back to defaults for missing keys

        Raises:
            FMDashboardError: If a weight is not an integer, or the priority
                table is not a mapping of integers
        """
        if not isinstance(data, Mapping):
            raise FMDashboardError(f"Weights must be an object, got {type(data).__name__}")

        defaults = cls()
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning("Ignoring unknown weight keys: %s", sorted(unknown))

        values = {key: value for key, value in data.items() if key in known}
        for key, value in values.items():
            if key != "priority" and not _is_int(value):
                raise FMDashboardError(f"Weight {key!r} must be an integer, got {value!r}")

        if "priority" in values:
            table = values["priority"]
            if not isinstance(table, Mapping):
                raise FMDashboardError(f"Weight 'priority' must be an object, got {table!r}")
            for level, points in table.items():
                if not _is_int(points):
                    raise FMDashboardError(
                        f"Priority weight {level!r} must be an integer, got {points!r}"
                    )
            values["priority"] = {**defaults.priority, **table}
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["priority"] = dict(self.priority)
        return data


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class Config:
    """Configuration manager for the dashboard"""

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize configuration manager

        Args:
            config_dir: Path to configuration directory. When omitted, defaults
                are used in memory and nothing is written to disk.
        """
        self.config_dir = Path(config_dir) if config_dir is not None else None

        if self.config_dir is not None:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            self.settings_file = self.config_dir / "settings.json"
            self.weights_file = self.config_dir / "weights.json"
            self.settings = self._load_json(self.settings_file, self._default_settings())
            self.weights = self._load_json(self.weights_file, UrgencyWeights().to_dict())
        else:
            self.settings_file = None
            self.weights_file = None
            self.settings = self._default_settings()
            self.weights = UrgencyWeights().to_dict()

    def _load_json(self, file_path: Path, default: Dict[str, Any]) -> Dict[str, Any]:
        """Load JSON file or return default if file doesn't exist"""
        if file_path.exists():
            try:
                with open(file_path, 'r', encoding='utf-8') as f:
                    loaded = json.load(f)
            except json.JSONDecodeError as exc:
                raise FMDashboardError(f"Malformed config file {file_path}: {exc}") from exc
            if not isinstance(loaded, dict):
                raise FMDashboardError(
                    f"Config file {file_path} must hold a JSON object, got {type(loaded).__name__}"
                )
            logger.debug("Loaded config from %s", file_path)
            return {**default, **loaded}
        else:
            # Create file with defaults
            self._save_json(file_path, default)
            return default

    def _save_json(self, file_path: Path, data: Dict[str, Any]) -> None:
        """Save data to JSON file"""
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)

    def _default_settings(self) -> Dict[str, Any]:
        """Default display settings"""
        return {
            "timezone": "UTC",
            "date_format": None,  # None = US short date (M/D/YYYY)
            "inbox_top_n": 5,
        }

    def get(self, key: str, section: str = "settings", default: Any = None) -> Any:
        """
        Get configuration value

        Args:
            key: Configuration key
            section: Configuration section ('settings', 'weights')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        section_map = {
            "settings": self.settings,
            "weights": self.weights,
        }

        return section_map.get(section, {}).get(key, default)

    def set(self, key: str, value: Any, section: str = "settings") -> None:
        """
        Set configuration value and save to disk (if backed by a directory)

        Args:
            key: Configuration key
            value: Value to set
            section: Configuration section ('settings', 'weights')
        """
        section_map = {
            "settings": (self.settings, self.settings_file),
            "weights": (self.weights, self.weights_file),
        }

        if section in section_map:
            config_dict, file_path = section_map[section]
            config_dict[key] = value
            if file_path is not None:
                self._save_json(file_path, config_dict)

    def get_urgency_weights(self) -> UrgencyWeights:
        """Build the urgency weight table from the 'weights' section"""
        return UrgencyWeights.from_dict(self.weights)

    def get_inbox_top_n(self) -> int:
        """Number of inbox rows to show by default"""
        value = self.get("inbox_top_n", default=5)
        if not _is_int(value) or value < 0:
            raise FMDashboardError(f"Setting 'inbox_top_n' must be a non-negative integer, got {value!r}")
        return value

    def get_timezone(self) -> tzinfo:
        """Timezone applied to naive timestamps in record files"""
        name = self.get("timezone", default="UTC")
        if name in (None, "", "UTC"):
            return timezone.utc
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise FMDashboardError(f"Unknown timezone {name!r}") from exc
