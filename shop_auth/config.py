from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # Server
    host: str = "0.0.0.0"
    port: int = 5000
    log_level: str = "info"
    public_base_url: str = "http://localhost:5000"

    # JWT
    jwt_secret: str = "change-me-to-a-random-secret-at-least-32-chars"
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 7 * 24 * 60

    # OTP
    otp_provider: str = "console"
    otp_length: int = 6
    otp_expire_minutes: int = 5
    otp_max_attempts: int = 5          # 0 = unlimited
    otp_debug_echo: bool = False       # never enable in production
    otp_sweep_interval_seconds: int = 60  # 0 = no background sweep

    # Twilio SMS
    twilio_account_sid: str = ""
    twilio_auth_token: str = ""
    twilio_from_number: str = ""
    twilio_timeout_seconds: float = 10.0

    # Admin seed
    admin_email: str = ""
    admin_password: str = ""
    admin_phone: str = ""

    # CORS
    cors_origins: List[str] = ["http://localhost:5173"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
