import os


def _csv(value: str) -> list:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings:
    HOST = os.environ.get("SYMSOLVER_HOST", "0.0.0.0")
    PORT = int(os.environ.get("PORT", 5000))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    ALLOWED_ORIGINS = _csv(os.environ.get("ALLOWED_ORIGINS", "*"))

    # Request limits enforced by the pydantic models
    MAX_DATASET_SIZE = int(os.environ.get("MAX_DATASET_SIZE", 1000))
    MAX_EXPRESSION_LENGTH = int(os.environ.get("MAX_EXPRESSION_LENGTH", 200))


settings = Settings()
