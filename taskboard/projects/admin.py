from django.contrib import admin

from taskboard.projects import models


@admin.register(models.Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "owner", "is_public", "created_at"]
    search_fields = ["name", "description"]
    list_filter = ["is_public", "created_at"]
    filter_horizontal = ["members"]
