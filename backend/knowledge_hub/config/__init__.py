from .settings import settings, Settings, validate_settings

__all__ = ["settings", "Settings", "validate_settings"]
