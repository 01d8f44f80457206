from django.contrib import admin
from .models import HomepageSlot


@admin.register(HomepageSlot)
class HomepageSlotAdmin(admin.ModelAdmin):
    list_display = ['title', 'area_slug', 'amenity_slug', 'position', 'score', 'is_active', 'is_seasonal']
    list_filter = ['is_active', 'is_seasonal', 'amenity_slug']
    search_fields = ['title', 'area_slug', 'amenity_slug']
    ordering = ['position', '-score']
