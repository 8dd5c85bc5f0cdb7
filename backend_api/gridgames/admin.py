from django.contrib import admin

from .models import BestScore


@admin.register(BestScore)
class BestScoreAdmin(admin.ModelAdmin):
    list_display = ("namespace", "size", "score", "updated_at")
    list_filter = ("namespace", "size")
    search_fields = ("namespace",)
    ordering = ("namespace", "size")
    readonly_fields = ("created_at", "updated_at")
