from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./stairworks.db"
    COMPANY_NAME: str = "Stairworks Estimating"
    LOG_LEVEL: str = "INFO"

    # Course selection — accepted mortar joint per step, in cm
    MORTAR_MIN_CM: float = 0.5
    MORTAR_MAX_CM: float = 3.0
    MORTAR_KG_PER_UNIT: float = 0.5

    # Slab defaults when a request leaves them out
    DEFAULT_SLAB_SIZE: str = "90x60"
    DEFAULT_SLAB_GAP_MM: float = 2.0

    class Config:
        env_file = ".env"


settings = Settings()
