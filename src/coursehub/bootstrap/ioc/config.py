from dishka import Provider, Scope, from_context, provide

from coursehub.bootstrap.configs import AuthConfig, Config, PaymentConfig


class AppConfigProvider(Provider):
    scope = Scope.APP

    config = from_context(Config)

    @provide
    def get_auth_config(self, config: Config) -> AuthConfig:
        return config.auth

    @provide
    def get_payment_config(self, config: Config) -> PaymentConfig:
        return config.payments
