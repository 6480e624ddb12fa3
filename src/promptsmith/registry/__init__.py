from promptsmith.registry.models import ModelRegistry, RegistryStatus, parse_config

__all__ = ["ModelRegistry", "RegistryStatus", "parse_config"]
