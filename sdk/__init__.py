from .config import SDK_CONFIG, AppConfig, PersistOptions, TimerOptions

__all__ = ["SDK_CONFIG", "AppConfig", "PersistOptions", "TimerOptions"]
