import logging

from dishka import AsyncContainer, Provider, make_async_container
from dishka.integrations.fastapi import FastapiProvider

from coursehub.bootstrap.configs import Config
from coursehub.bootstrap.ioc.application import ApplicationProvider
from coursehub.bootstrap.ioc.config import AppConfigProvider
from coursehub.bootstrap.ioc.infrastructure import InfrastructureProvider

logger = logging.getLogger(__name__)


def fastapi_container(
        config: Config,
        *providers: Provider,
) -> AsyncContainer:
    """Extra providers go last so they override the defaults"""
    logger.info("Fastapi DI setup")

    return make_async_container(
        AppConfigProvider(),
        InfrastructureProvider(),
        ApplicationProvider(),
        FastapiProvider(),
        *providers,
        context={
            Config: config,
        },
    )
