"""schedule_platform - a social scheduling REST API and its client.

Example:
    >>> from schedule_platform import Settings, create_app
    >>> app = create_app(Settings(jwt_secret="change-me", database_url="sqlite:///schedule.db"))
"""

from schedule_platform.config import Settings, get_settings
from schedule_platform.main import create_app

__version__ = "0.1.0"

__all__ = ["Settings", "get_settings", "create_app"]
