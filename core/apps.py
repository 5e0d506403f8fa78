import logging
from django.apps import AppConfig

logger = logging.getLogger(__name__)


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'core'
    verbose_name = 'Core (ownership, dates)'

    def ready(self):
        from django.conf import settings
        logger.info(
            f"[settings] lesson_default_status={settings.LESSON_DEFAULT_STATUS} "
            f"report_rate_source={settings.REPORT_RATE_SOURCE} tz={settings.TIME_ZONE}"
        )
