import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional
import re


class SharedConfigLoader:
    """Loader for shared configuration files"""

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize shared config loader"""
        if config_dir is None:
            config_dir = Path(__file__).parent

        self.config_dir = Path(config_dir)
        self.shared_dir = self.config_dir / "shared"

        # Validate shared directory exists
        if not self.shared_dir.exists():
            raise FileNotFoundError(
                f"Shared config directory not found: {self.shared_dir}"
            )

        self._defaults = self._load_yaml("defaults.yaml")
        self._photography = self._load_yaml("photography.yaml")

        # Unified dictionary used for ${shared.path} resolution
        self._shared_config = {
            "defaults": self._defaults,
            "photography": self._photography,
        }

    def _load_yaml(self, filename: str) -> Dict[str, Any]:
        """Load a YAML file from shared directory"""
        filepath = self.shared_dir / filename

        if not filepath.exists():
            raise FileNotFoundError(f"Shared config file not found: {filepath}")

        try:
            with open(filepath, 'r') as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {filename}: {e}")

    @property
    def defaults(self) -> Dict[str, Any]:
        """Get system defaults"""
        return self._defaults

    @property
    def photography(self) -> Dict[str, Any]:
        """Get standard camera increments and light bands"""
        return self._photography

    @property
    def all_shared(self) -> Dict[str, Any]:
        """Get all shared configs as unified dictionary"""
        return self._shared_config

    def get_standard_shutters(self) -> List[int]:
        """Get shutter denominators (1/N seconds)"""
        return self._photography["standard_shutters"]

    def get_standard_apertures(self) -> List[float]:
        """Get full-stop f-numbers"""
        return self._photography["standard_apertures"]

    def get_frame_counts(self, film_format: str) -> List[int]:
        """Get frame counts offered for a film format"""
        return self._photography["frame_counts"][film_format]

    def get_light_bands(self) -> Dict[str, Dict[str, int]]:
        """Get ISO need per light condition"""
        return self._photography["light_bands"]

    # =========================================================================
    # Reference Resolution
    # =========================================================================

    def resolve_reference(self, reference: str) -> Any:
        """Resolve a reference like 'photography.light_bands.harsh' to its value"""
        parts = reference.split('.')
        value = self._shared_config

        try:
            for part in parts:
                value = value[part]
            return value
        except (KeyError, TypeError) as e:
            raise KeyError(f"Invalid reference path: {reference}") from e

    def resolve_references_in_config(self, config: Any) -> Any:
        """Recursively resolve all ${shared.path} references in a config dictionary"""
        if isinstance(config, dict):
            return {
                key: self.resolve_references_in_config(value)
                for key, value in config.items()
            }
        elif isinstance(config, list):
            return [self.resolve_references_in_config(item) for item in config]
        elif isinstance(config, str):
            match = re.fullmatch(r'\$\{shared\.(.+)\}', config)
            if match:
                return self.resolve_reference(match.group(1))
            return config
        else:
            return config

    def validate_shared_configs(self) -> bool:
        """Validate that all shared configs have required keys"""
        if "system" not in self._defaults:
            raise ValueError("Missing system in defaults.yaml")

        required_photography = [
            "standard_shutters",
            "standard_apertures",
            "default_shutter",
            "frame_counts",
            "light_bands",
        ]
        for key in required_photography:
            if key not in self._photography:
                raise ValueError(f"Missing {key} in photography.yaml")

        for film_format in ("35mm", "120"):
            if film_format not in self._photography["frame_counts"]:
                raise ValueError(f"Missing frame_counts for {film_format}")

        return True

    def get_config_summary(self) -> str:
        """Get a summary of loaded shared configurations"""
        return f"""
Shared Configuration Summary:
============================
System:
  - Name: {self._defaults['system']['name']}
  - Version: {self._defaults['system']['version']}
  - Environment: {self._defaults['system']['environment']}

Photography:
  - Shutter speeds: {len(self.get_standard_shutters())}
  - Apertures: {len(self.get_standard_apertures())}
  - Light bands: {list(self.get_light_bands().keys())}
"""


_shared_loader_instance: Optional[SharedConfigLoader] = None


def get_shared_loader(config_dir: Optional[Path] = None) -> SharedConfigLoader:
    """Get or create the shared config loader singleton"""
    global _shared_loader_instance

    if _shared_loader_instance is None:
        _shared_loader_instance = SharedConfigLoader(config_dir)

    return _shared_loader_instance


def reset_shared_loader():
    """Reset the shared loader singleton"""
    global _shared_loader_instance
    _shared_loader_instance = None


def resolve_reference(reference: str) -> Any:
    """Resolve a shared config reference"""
    return get_shared_loader().resolve_reference(reference)
