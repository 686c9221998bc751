from django.apps import AppConfig


class EventPlanConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'eventplan'
    verbose_name = 'Event planning'

    def ready(self):
        """Validate the schedule timezone setting."""
        from .schedule import schedule_timezone
        schedule_timezone()
