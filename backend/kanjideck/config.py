"""Application configuration loaded from environment variables.

Provides type-safe access to configuration with sensible defaults.
"""

import os


def get_cors_origins() -> list[str]:
    """Get allowed CORS origins from environment.

    Environment variable: CORS_ORIGINS (comma-separated)
    Default: Expo web and local dev servers
    """
    default_origins = "http://localhost:3000,http://localhost:19006"
    origins_str = os.getenv("CORS_ORIGINS", default_origins)
    return [origin.strip() for origin in origins_str.split(",") if origin.strip()]


def get_cors_allow_credentials() -> bool:
    """Get CORS allow_credentials setting.

    Environment variable: CORS_ALLOW_CREDENTIALS
    Default: true for development
    """
    return os.getenv("CORS_ALLOW_CREDENTIALS", "true").lower() == "true"


# Restricted HTTP methods - only what the API actually uses
CORS_ALLOWED_METHODS = ["GET", "POST", "PUT", "OPTIONS"]

# Restricted headers - only what's needed for the API
CORS_ALLOWED_HEADERS = [
    "Accept",
    "Accept-Language",
    "Content-Type",
    "Authorization",
    "X-Requested-With",
]


def get_review_adapter_type() -> str:
    """Get review adapter type from environment.

    Environment variable: REVIEW_ADAPTER
    Options:
        - 'wanikani': Real WaniKani API (default, needs WK_API_KEY)
        - 'demo': Embedded demo deck, no network
    """
    return os.getenv("REVIEW_ADAPTER", "wanikani").lower()


def get_wanikani_api_url() -> str:
    """Get WaniKani API base URL.

    Environment variable: WANIKANI_API_URL
    """
    return os.getenv("WANIKANI_API_URL", "https://api.wanikani.com/v2/")


def get_http_timeout() -> float:
    """Get HTTP request timeout in seconds.

    Environment variable: HTTP_TIMEOUT_SECONDS
    Default: 10
    """
    return float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))


def get_rate_limit_max_attempts() -> int:
    """Get attempts per remote call while the server rate limits us.

    Environment variable: RATE_LIMIT_MAX_ATTEMPTS
    Default: 3
    """
    return max(1, int(os.getenv("RATE_LIMIT_MAX_ATTEMPTS", "3")))


def get_requeue_incorrect() -> bool:
    """Whether wrongly answered cards are asked again in the same session.

    Environment variable: REQUEUE_INCORRECT
    Default: false (re-asking is left to the client)
    """
    return os.getenv("REQUEUE_INCORRECT", "false").lower() == "true"
