"""Per-channel endpoint and credential settings."""

from typing import Optional

from pydantic import Field

from courier.configuration.base import CourierSettings


class ChannelSettings(CourierSettings):
    """Base URLs and credentials for every channel.

    A channel is available only when its endpoint is configured; the
    engine does not register adapters for unconfigured channels.

    Environment Variables:
        SLACK_WEBHOOK_URL: Slack incoming webhook URL
        JIRA_BASE_URL, JIRA_USER_EMAIL, JIRA_API_TOKEN: Jira REST access
        JIRA_PROJECT_KEY: Default project when the payload omits one
        EMAIL_API_URL, EMAIL_API_KEY, EMAIL_FROM_ADDRESS: Email delivery API
        WEBHOOK_URL, WEBHOOK_SECRET: Generic webhook target and HMAC secret
        S3_BUCKET_URL, S3_ACCESS_TOKEN: Bucket endpoint and bearer token
        SERVICENOW_INSTANCE_URL, SERVICENOW_USERNAME, SERVICENOW_PASSWORD:
            ServiceNow table API access
    """

    slack_webhook_url: Optional[str] = Field(default=None, alias="SLACK_WEBHOOK_URL")

    jira_base_url: Optional[str] = Field(default=None, alias="JIRA_BASE_URL")
    jira_user_email: Optional[str] = Field(default=None, alias="JIRA_USER_EMAIL")
    jira_api_token: Optional[str] = Field(default=None, alias="JIRA_API_TOKEN")
    jira_project_key: Optional[str] = Field(default=None, alias="JIRA_PROJECT_KEY")

    email_api_url: Optional[str] = Field(default=None, alias="EMAIL_API_URL")
    email_api_key: Optional[str] = Field(default=None, alias="EMAIL_API_KEY")
    email_from_address: str = Field(
        default="notifications@example.com", alias="EMAIL_FROM_ADDRESS"
    )

    webhook_url: Optional[str] = Field(default=None, alias="WEBHOOK_URL")
    webhook_secret: Optional[str] = Field(default=None, alias="WEBHOOK_SECRET")

    s3_bucket_url: Optional[str] = Field(default=None, alias="S3_BUCKET_URL")
    s3_access_token: Optional[str] = Field(default=None, alias="S3_ACCESS_TOKEN")

    servicenow_instance_url: Optional[str] = Field(
        default=None, alias="SERVICENOW_INSTANCE_URL"
    )
    servicenow_username: Optional[str] = Field(
        default=None, alias="SERVICENOW_USERNAME"
    )
    servicenow_password: Optional[str] = Field(
        default=None, alias="SERVICENOW_PASSWORD"
    )
