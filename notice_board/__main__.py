import logging

import uvicorn

from notice_board.api.main import create_app
from notice_board.config import get_settings

logger = logging.getLogger("notice_board")


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app(settings=settings)
    logger.info("Starting notice board on %s:%s (store=%s)", settings.host, settings.port, app.state.store.name)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
