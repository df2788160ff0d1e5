"""Engine configuration settings - main aggregator."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from courier.configuration.channels import ChannelSettings
from courier.configuration.dispatch import DispatchSettings


class Settings(BaseSettings):
    """Engine configuration settings - main aggregator.

    Aggregates the settings sections into a single configuration object
    that is passed explicitly to build_engine() and from there into each
    component. There is no module-level instance.

    Environment Variables:
        ENVIRONMENT: production, staging, development or test. The test
            environment swaps the HTTP transport for a stub.
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        APP_VERSION: Version string added to log entries

    Example:
        ```python
        from courier.configuration import Settings

        settings = Settings()
        policy = settings.dispatch.retry_policy()
        if settings.channels.slack_webhook_url:
            ...
        ```
    """

    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    APP_VERSION: str = "unknown"

    dispatch: DispatchSettings
    channels: ChannelSettings

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def is_test(self) -> bool:
        return self.ENVIRONMENT.lower() == "test"

    def __init__(self, **kwargs):
        """Initialize Settings with automatic subsettings instantiation.

        Args:
            **kwargs: Optional overrides for specific settings sections.
        """
        settings_map = {
            "dispatch": DispatchSettings,
            "channels": ChannelSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )
