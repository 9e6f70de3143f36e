import yaml
from pathlib import Path
from typing import Dict, Any, Optional

from config.shared_loader import SharedConfigLoader
from config.validators import validate_all_domains, validate_domain_consistency


DOMAINS = ("catalog", "algorithms", "services", "system")


class DomainConfigLoader:
    """Loader for domain-specific configuration files"""

    def __init__(self, config_dir: Optional[Path] = None):

        if config_dir is None:
            config_dir = Path(__file__).parent

        self.config_dir = Path(config_dir)

        # Initialize shared config loader first
        self.shared_loader = SharedConfigLoader(config_dir)

        self._catalog = self._load_domain("catalog")
        self._algorithms = self._load_domain("algorithms")
        self._services = self._load_domain("services")
        self._system = self._load_domain("system")

        self._resolve_all_references()

    def _load_domain(self, domain_name: str) -> Dict[str, Any]:
        """load all YAML files in a domain directory"""
        domain_dir = self.config_dir / domain_name

        if not domain_dir.exists():
            raise FileNotFoundError(f"Domain directory not found: {domain_dir}")

        configs = {}

        # sorted so nested keys are built in a stable order
        for yaml_file in sorted(domain_dir.rglob("*.yaml")):
            rel_path = yaml_file.relative_to(domain_dir)

            # e.g., algorithms/scoring.yaml -> configs['scoring']
            key_parts = list(rel_path.parts[:-1]) + [rel_path.stem]

            try:
                with open(yaml_file, 'r') as f:
                    config_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {yaml_file}: {e}")

            current = configs
            for part in key_parts[:-1]:
                current = current.setdefault(part, {})
            current[key_parts[-1]] = config_data

        return configs

    def _resolve_all_references(self):
        """resolve all ${shared.path} references in domain configs"""
        self._catalog = self.shared_loader.resolve_references_in_config(self._catalog)
        self._algorithms = self.shared_loader.resolve_references_in_config(self._algorithms)
        self._services = self.shared_loader.resolve_references_in_config(self._services)
        self._system = self.shared_loader.resolve_references_in_config(self._system)

    def get_catalog_config(self) -> Dict[str, Any]:
        """Get catalog domain configuration"""
        return self._catalog

    def get_algorithms_config(self) -> Dict[str, Any]:
        """Get algorithms domain configuration"""
        return self._algorithms

    def get_services_config(self) -> Dict[str, Any]:
        """Get services domain configuration"""
        return self._services

    def get_system_config(self) -> Dict[str, Any]:
        """Get system domain configuration"""
        return self._system

    def get_shared_config(self) -> Dict[str, Any]:
        """Get shared configuration"""
        return self.shared_loader.all_shared

    def get_films_config(self) -> Dict[str, Any]:
        """Get film stock entries from catalog domain"""
        return self._catalog.get("films", {})

    def get_scoring_config(self) -> Dict[str, Any]:
        """Get scoring weight table from algorithms domain"""
        return self._algorithms.get("scoring", {})

    def get_exposure_config(self) -> Dict[str, Any]:
        """Get exposure tables from algorithms domain"""
        return self._algorithms.get("exposure", {})

    def get_metering_config(self) -> Dict[str, Any]:
        """Get metering tips from algorithms domain"""
        return self._algorithms.get("metering", {})

    def get_weather_config(self) -> Dict[str, Any]:
        """Get weather service configuration from services domain"""
        return self._services.get("weather", {})

    def get_logging_config(self) -> Dict[str, Any]:
        """Get logging configuration from system domain"""
        return self._system.get("logging", {})

    def validate_all_configs(self, check_consistency: bool = True) -> bool:
        """validate all loaded configurations"""
        self.shared_loader.validate_shared_configs()

        required = {
            "catalog": (self._catalog, ["films"]),
            "algorithms": (self._algorithms, ["scoring", "exposure", "metering"]),
            "services": (self._services, ["weather"]),
            "system": (self._system, ["logging"]),
        }
        for domain, (config, keys) in required.items():
            for key in keys:
                if key not in config:
                    raise ValueError(f"Missing required {domain} config: {key}")

        try:
            catalog, algorithms, services, system = validate_all_domains(
                self._catalog,
                self._algorithms,
                self._services,
                self._system
            )
            if check_consistency:
                validate_domain_consistency(catalog, algorithms, services, system)
        except Exception as e:
            raise ValueError(f"Configuration validation failed: {e}") from e

        return True

    def get_config_summary(self) -> str:
        """Get a summary of all loaded configurations"""
        return f"""
    Domain Configuration Summary:
    =============================

    Catalog Domain:
      Film stocks: {len(self.get_films_config())}

    Algorithms Domain:
      Configs loaded: {list(self._algorithms.keys())}

    Services Domain:
      Configs loaded: {list(self._services.keys())}

    System Domain:
      Configs loaded: {list(self._system.keys())}

    Shared Configurations:
      {self.shared_loader.get_config_summary()}
    """


_domain_loader_instance: Optional[DomainConfigLoader] = None


def get_domain_loader(config_dir: Optional[Path] = None) -> DomainConfigLoader:
    """get or create the domain config loader singleton"""
    global _domain_loader_instance

    if _domain_loader_instance is None:
        _domain_loader_instance = DomainConfigLoader(config_dir)

    return _domain_loader_instance


def reset_domain_loader():
    """reset the domain loader"""
    global _domain_loader_instance
    _domain_loader_instance = None
