from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class ProjectsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "taskboard.projects"
    verbose_name = _("Projects")

    def ready(self):
        import taskboard.projects.signals  # noqa: F401, PLC0415
