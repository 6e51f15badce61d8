from .settings import ClosetSettings, get_settings

__all__ = ["ClosetSettings", "get_settings"]
