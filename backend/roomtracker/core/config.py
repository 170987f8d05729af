# backend/roomtracker/core/config.py
import os
from dotenv import load_dotenv

class Settings:
    """
    Setup environment variables.
        - DATA_FILE the JSON file rooms, memberships and sessions are persisted to
        - SECRET_KEY / ALGORITHM used to sign session tokens
        - SESSION_MAX_AGE lifetime of a session cookie, in seconds
        - LOGIN_PATH where pages redirect unauthenticated visitors
    """

    # Load environment variables from the .env file
    load_dotenv()

    APP_NAME: str = os.getenv("APP_NAME", "Grind Rooms")

    DATA_FILE: str = os.getenv("DATA_FILE", "data.json")

    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret-change-me")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    SESSION_MAX_AGE: int = int(os.getenv("SESSION_MAX_AGE", str(60 * 60 * 24 * 7)))

    COOKIE_NAME: str = os.getenv("COOKIE_NAME", "session_token")
    COOKIE_SECURE: bool = os.getenv("COOKIE_SECURE", "false").lower() == "true"
    COOKIE_DOMAIN = os.getenv("COOKIE_DOMAIN", None)

    LOGIN_PATH: str = os.getenv("LOGIN_PATH", "/dev-login")

    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

settings = Settings()
