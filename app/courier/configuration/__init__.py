"""Engine configuration.

Settings are loaded from the environment (and an optional ``.env`` file)
with pydantic-settings and passed explicitly into the engine.
"""

from courier.configuration.channels import ChannelSettings
from courier.configuration.dispatch import DispatchSettings
from courier.configuration.settings import Settings

__all__ = [
    "Settings",
    "DispatchSettings",
    "ChannelSettings",
]
