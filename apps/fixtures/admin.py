from django.contrib import admin
from .models import UpcomingFixture


@admin.register(UpcomingFixture)
class UpcomingFixtureAdmin(admin.ModelAdmin):
    list_display = ['name', 'sport', 'league', 'channel_name', 'starting_at']
    list_filter = ['channel_name', 'sport']
    search_fields = ['name', 'league', 'event_id']
    ordering = ['starting_at']
