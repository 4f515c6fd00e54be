from pydantic_settings import BaseSettings, SettingsConfigDict
class Settings(BaseSettings):
    APP_ENV: str = "dev"
    APP_SECRET: str
    DB_URL: str = "sqlite:///./storefront.db"
    JWT_ISS: str = "storefront-pricing"
    JWT_EXP_MIN: int = 12*60
    SHOP_TZ: str = "Europe/Dublin"  # shop clock for "today" in the basket preview
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
settings = Settings()
