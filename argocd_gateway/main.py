import uvicorn

from . import create_app
from .general.utils import basicSettings, logger_config

app = create_app()


def run() -> None:
    uvicorn.run(
        app,
        host=basicSettings.HOST,
        port=basicSettings.PORT,
        log_config=logger_config.dict_config,
    )


if __name__ == "__main__":
    run()
