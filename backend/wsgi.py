import os

from marketplace import create_app
from marketplace.config import DevConfig, ProdConfig


def _running_in_production() -> bool:
    return os.getenv("APP_ENV", "").lower() in ("prod", "production") or any(
        os.getenv(k)
        for k in (
            "RAILWAY_PROJECT_ID",
            "RAILWAY_SERVICE_ID",
            "RAILWAY_ENVIRONMENT_ID",
            "RAILWAY_ENVIRONMENT",
        )
    )


config = ProdConfig if _running_in_production() else DevConfig
app = create_app(config)

if __name__ == "__main__":
    app.run()
