from django.apps import AppConfig


class ChannelRatesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'channel_rates'
    verbose_name = 'Channel Rates'

    def ready(self):
        """Import signals when app is ready."""
        import channel_rates.signals  # noqa
