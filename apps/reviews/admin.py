from django.contrib import admin
from apps.reviews.models import Review, Checkin, WishlistItem


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    """Admin interface for reviews; hide abusive reviews with is_visible."""

    list_display = ['pub', 'user', 'rating', 'title', 'is_visible', 'is_edited', 'created_at']
    list_filter = ['rating', 'is_visible', 'is_edited']
    search_fields = ['title', 'body', 'pub__name', 'user__email']
    readonly_fields = ['created_at', 'updated_at']

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        from apps.reviews.services import recompute_review_aggregates
        recompute_review_aggregates(pub_id=obj.pub_id)


@admin.register(Checkin)
class CheckinAdmin(admin.ModelAdmin):
    list_display = ['pub', 'user', 'visited_at']
    search_fields = ['pub__name', 'user__email']


@admin.register(WishlistItem)
class WishlistItemAdmin(admin.ModelAdmin):
    list_display = ['pub', 'user', 'created_at']
    search_fields = ['pub__name', 'user__email']
