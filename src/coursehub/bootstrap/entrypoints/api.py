from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from dishka import Provider
from dishka.integrations.fastapi import setup_dishka
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.responses import ORJSONResponse

from coursehub.application.storage import Storage
from coursehub.bootstrap.configs import Config, load_settings
from coursehub.bootstrap.ioc.containers import fastapi_container
from coursehub.infrastructure.log.main import configure_logging
from coursehub.presentation.api.middlewares.setup import setup_middlewares
from coursehub.presentation.api.root import root_router
from coursehub.presentation.exceptions import setup_exception_handlers


def init_routers(app: FastAPI) -> None:
    app.include_router(root_router)
    setup_exception_handlers(app)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # Backend is chosen once, before the first request
    await app.state.dishka_container.get(Storage)
    yield
    await app.state.dishka_container.close()


def create_app(
    config: Config | None = None,
    *providers: Provider,
) -> FastAPI:
    if config is None:
        load_dotenv()
        config = load_settings()

    configure_logging(
        config.log_level,
        json_format=config.environment != "development",
    )
    app = FastAPI(
        title="CourseHub",
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
    )

    init_routers(app)
    setup_middlewares(app)
    container = fastapi_container(config, *providers)
    setup_dishka(container=container, app=app)

    return app
