from django.apps import AppConfig


class LootConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.loot'
    verbose_name = 'Loot'
