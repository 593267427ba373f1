"""Configuration management for todotasks."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Table, topic and bucket identifiers are supplied by the deployment and read
    once at process start.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # AWS Configuration
    aws_region: str = Field(default="us-east-1", description="AWS region for all service clients")
    task_ddb: str | None = Field(default=None, description="DynamoDB table holding todo tasks")
    event_ddb: str | None = Field(default=None, description="DynamoDB table holding task event audit rows")
    sns_topic_arn: str | None = Field(default=None, description="SNS topic receiving task events")
    bucket_name: str | None = Field(default=None, description="S3 bucket receiving batch import files")

    # Mail Configuration
    mail_source: str = Field(default="no-reply@todotasks.local", description="SES sender address")
    mail_reply_to: str | None = Field(default=None, description="Reply-To address (defaults to sender)")

    # Upload Configuration
    upload_url_expires_seconds: int = Field(default=300, description="Lifetime of pre-signed upload URLs")

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")
    environment: str = Field(default="production", description="Deployment environment name")

    def require_setting(self, field_name: str, resource_name: str) -> str:
        """Validate that a required setting is present, raising a clear error if missing.

        Args:
            field_name: Name of the field to check
            resource_name: Human-readable resource name for error message

        Returns:
            The setting value

        Raises:
            ValueError: If the setting is None or empty
        """
        value = getattr(self, field_name)
        if not value:
            raise ValueError(
                f"{resource_name} not configured. Set {field_name.upper()} environment variable or add to .env file."
            )
        return value


# Application Constants
class Constants:
    """Application-wide constants."""

    # HTTP Status Codes
    HTTP_OK: int = 200
    HTTP_CREATED: int = 201
    HTTP_NO_CONTENT: int = 204
    HTTP_BAD_REQUEST: int = 400
    HTTP_FORBIDDEN: int = 403
    HTTP_NOT_FOUND: int = 404
    HTTP_SERVER_ERROR: int = 500

    # DynamoDB BatchWriteItem accepts at most 25 put requests
    BATCH_WRITE_LIMIT: int = 25

    # Task ids are TID-{millis}-{0..9999}
    TASK_ID_PREFIX: str = "TID"
    TASK_ID_RANDOM_BOUND: int = 10000

    # Event audit rows expire after 5 minutes (DynamoDB TTL is epoch seconds)
    EVENT_TTL_SECONDS: int = 300

    # Batch import file layout
    IMPORT_FILE_FIELDS: int = 6
    IMPORT_FILE_HEADER_ROWS: int = 1

    # Notify queue batch size (deployed with a 60s batching window and 3 receives before dead-lettering)
    NOTIFY_BATCH_SIZE: int = 8

    # Mail
    MAIL_CHARSET: str = "UTF-8"
    MAIL_SUBJECT_PREFIX: str = "Task activity"

    # Admin scopes start with this prefix
    ADMIN_SCOPE_PREFIX: str = "admin"


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
