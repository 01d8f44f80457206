from django.contrib import admin
from .models import EventPageView, EventSearch, EventFilterUsage, EventCtaClick, EventHomepageTile, AdminAudit


@admin.register(EventPageView)
class EventPageViewAdmin(admin.ModelAdmin):
    list_display = ['pub', 'area_slug', 'device', 'ref', 'ts']
    list_filter = ['device', 'ts']
    raw_id_fields = ['user', 'pub']


@admin.register(EventSearch)
class EventSearchAdmin(admin.ModelAdmin):
    list_display = ['query', 'city', 'borough', 'results_count', 'ts']
    search_fields = ['query']
    raw_id_fields = ['user']


@admin.register(EventFilterUsage)
class EventFilterUsageAdmin(admin.ModelAdmin):
    list_display = ['filter_key', 'city', 'borough', 'ts']
    list_filter = ['filter_key']


@admin.register(EventCtaClick)
class EventCtaClickAdmin(admin.ModelAdmin):
    list_display = ['type', 'pub', 'ts']
    list_filter = ['type']
    raw_id_fields = ['pub']


@admin.register(EventHomepageTile)
class EventHomepageTileAdmin(admin.ModelAdmin):
    list_display = ['type', 'slot_id', 'title', 'ts']
    list_filter = ['type']


@admin.register(AdminAudit)
class AdminAuditAdmin(admin.ModelAdmin):
    list_display = ['actor', 'action', 'entity', 'entity_id', 'created_at']
    list_filter = ['action', 'entity']
    search_fields = ['actor', 'entity_id']
    readonly_fields = ['actor', 'action', 'entity', 'entity_id', 'diff', 'created_at']
