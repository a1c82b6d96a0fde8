from .settings import AppConfig, DatabaseConfig, HashingConfig, load_config

__all__ = ["AppConfig", "DatabaseConfig", "HashingConfig", "load_config"]
