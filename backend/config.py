# backend/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    DATABASE_URL: str = "sqlite:///./database_storefront.db"

    FRONTEND_URL: str = "http://localhost:3000"

    # Razorpay gateway credentials
    RAZORPAY_API_URL: str = "https://api.razorpay.com"
    RAZORPAY_KEY_ID: str = "rzp_test_key"
    RAZORPAY_KEY_SECRET: str = "rzp_test_secret"
    PAYMENT_CURRENCY: str = "INR"

    # Seeded administrator account
    ADMIN_EMAIL: str = "admin@umang.com"
    ADMIN_PASSWORD: str = "admin123"

    # Support chat and OTP state kept in the key/value table
    ADMIN_PRESENCE_TTL_SECONDS: int = 120
    OTP_TTL_SECONDS: int = 600
    OTP_MOCK: bool = True
    CHAT_BOT_REPLY_DELAY_SECONDS: float = 1.0

    # Seller identity printed on invoices
    STORE_NAME: str = "UMANG HARDWARE"
    STORE_GSTIN: str = "10AAAAA0000A1Z5"
    STORE_ADDRESS: str = "Patna, Bihar, India - 800020"
    STORE_CONTACT: str = "+91 98765 43210"

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=str(env_path), extra="ignore")

settings = Settings()
