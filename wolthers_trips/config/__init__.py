from wolthers_trips.config.settings import settings, Settings

__all__ = ["settings", "Settings"]
