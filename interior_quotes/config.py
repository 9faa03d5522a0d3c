from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./quotes.db"
    LOG_LEVEL: str = "INFO"

    # Company block printed on every document
    COMPANY_NAME: str = "Interior Design Studio"
    COMPANY_TAGLINE: str = "Luxury Interiors | Architecture | Build"
    COMPANY_ADDRESS: str = ""
    COMPANY_EMAIL: str = ""
    COMPANY_PHONE: str = ""
    COMPANY_WEBSITE: str = ""

    # Quotations
    QUOTE_ID_PREFIX: str = "QT"
    QUOTE_VALIDITY_DAYS: int = 30

    class Config:
        env_file = ".env"


settings = Settings()
