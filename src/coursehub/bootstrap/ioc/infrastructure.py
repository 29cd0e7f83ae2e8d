import logging
from collections.abc import AsyncIterator
from datetime import timedelta

import httpx
from dishka import Provider, Scope, provide
from fastapi import Request

from coursehub.application.payments import PaymentGateway
from coursehub.application.security import (
    IdentityProvider,
    PasswordHasher,
    TokenProcessor,
)
from coursehub.application.storage import Storage
from coursehub.bootstrap.configs import AuthConfig, Config, PaymentConfig
from coursehub.infrastructure.auth.identity import TokenIdentityProvider
from coursehub.infrastructure.auth.password_hasher import Pbkdf2PasswordHasher
from coursehub.infrastructure.auth.token_processor import JwtTokenProcessor
from coursehub.infrastructure.db.connection import StorageHandle, open_storage
from coursehub.infrastructure.payments.stripe import StripePaymentGateway

logger = logging.getLogger(__name__)

PAYMENT_TIMEOUT_SECONDS = 10.0


class InfrastructureProvider(Provider):
    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    def get_password_hasher(self) -> PasswordHasher:
        return Pbkdf2PasswordHasher()

    @provide(scope=Scope.APP)
    async def get_storage_handle(
        self,
        config: Config,
        password_hasher: PasswordHasher,
    ) -> AsyncIterator[StorageHandle]:
        handle = await open_storage(config, password_hasher)
        yield handle
        handle.close()

    @provide(scope=Scope.APP)
    def get_storage(self, handle: StorageHandle) -> Storage:
        return handle.storage

    @provide(scope=Scope.APP)
    def get_token_processor(self, config: AuthConfig) -> TokenProcessor:
        return JwtTokenProcessor(
            secret_key=config.secret_key,
            expires_in=timedelta(days=config.expire_days),
        )

    @provide(scope=Scope.APP)
    async def get_http_client(
        self,
        config: PaymentConfig,
    ) -> AsyncIterator[httpx.AsyncClient]:
        async with httpx.AsyncClient(
            base_url=config.api_base,
            timeout=PAYMENT_TIMEOUT_SECONDS,
        ) as client:
            logger.debug("Payment HTTP client was initialized")
            yield client
        logger.debug("Payment HTTP client was closed")

    @provide(scope=Scope.APP)
    def get_payment_gateway(
        self,
        client: httpx.AsyncClient,
        config: PaymentConfig,
    ) -> PaymentGateway:
        if not config.secret_key:
            logger.warning("STRIPE_SECRET_KEY is not set, paid enrollment disabled")
        return StripePaymentGateway(client=client, secret_key=config.secret_key)

    @provide
    def get_identity_provider(
        self,
        request: Request,
        token_processor: TokenProcessor,
        storage: Storage,
        config: AuthConfig,
    ) -> IdentityProvider:
        return TokenIdentityProvider(
            request=request,
            token_processor=token_processor,
            storage=storage,
            cookie_name=config.cookie_name,
        )
