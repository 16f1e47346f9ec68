from pydantic import BaseModel
import os


class Settings(BaseModel):
    bot_token: str = ""
    github_api_url: str = "https://api.github.com"

    # Empty secret disables signature checks on incoming deliveries
    webhook_secret: str = ""

    log_level: str = "INFO"
    request_timeout: float = 30.0


def load_settings() -> Settings:
    return Settings(
        bot_token=os.environ.get("BOT_TOKEN", ""),
        github_api_url=os.environ.get("GITHUB_API_URL", "https://api.github.com"),
        webhook_secret=os.environ.get("WEBHOOK_SECRET", ""),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        request_timeout=float(os.environ.get("REQUEST_TIMEOUT", "30")),
    )
