import inspect
import logging
import sys

from loguru import logger

from app.core.config import Settings, settings as default_settings

# stdlib loggers that should end up in loguru
INTERCEPTED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "sqlalchemy.engine")


class InterceptHandler(logging.Handler):
    """
    Forward records emitted through the standard logging module to loguru.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the caller that originated the logged message
        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(config: Settings = default_settings) -> None:
    """
    Configure the process-wide loguru logger.

    Removes the default sink, installs a stderr sink at ``LOG_LEVEL`` and
    routes stdlib logging into loguru.
    """
    logger.remove()
    logger.configure(extra={"component": "app"})
    logger.add(
        sys.stderr,
        level=config.LOG_LEVEL.upper(),
        serialize=config.LOG_JSON,
        backtrace=not config.is_production,
        diagnose=not config.is_production,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{extra[component]}</cyan> | {message}"
        ),
    )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in INTERCEPTED_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False
