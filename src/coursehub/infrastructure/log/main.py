import logging.config
from typing import Literal

import structlog
from structlog.processors import CallsiteParameter, CallsiteParameterAdder

logger = logging.getLogger(__name__)


LoggingLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Chatty driver loggers that drown application output at DEBUG
QUIET_LOGGERS = ("pymongo", "httpx", "httpcore")


def configure_logging(
    level: LoggingLevel = "INFO",
    json_format: bool = False,
) -> None:
    common_processors = (
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S.%f", utc=True),
        structlog.contextvars.merge_contextvars,
        CallsiteParameterAdder(
            (
                CallsiteParameter.FUNC_NAME,
                CallsiteParameter.LINENO,
            ),
        ),
    )
    structlog_processors = (
        structlog.processors.StackInfoRenderer(),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.UnicodeDecoder(),  # convert bytes to str
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    )

    renderer: structlog.types.Processor
    if json_format:
        renderer = structlog.processors.JSONRenderer()
        exception_processors: tuple[structlog.types.Processor, ...] = (
            structlog.processors.format_exc_info,
        )
    else:
        renderer = structlog.dev.ConsoleRenderer()
        exception_processors = ()

    handler = logging.StreamHandler()
    handler.set_name("default")
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=common_processors,
            processors=(
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *exception_processors,
                renderer,
            ),
        ),
    )

    logging.basicConfig(handlers=[handler], level=level, force=True)
    quiet_level = max(logging.getLevelName(level), logging.INFO)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)

    structlog.configure(
        processors=common_processors + structlog_processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logger.info("Logger successfully setup")
