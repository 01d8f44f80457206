from django.contrib import admin
from apps.pubs.models import City, Borough, Amenity, Pub, PubAmenity, PubPhoto, AreaFeaturedPub


class PubAmenityInline(admin.TabularInline):
    """Inline admin for pub amenities."""
    model = PubAmenity
    extra = 1
    fields = ['amenity', 'value']


class PubPhotoInline(admin.TabularInline):
    model = PubPhoto
    extra = 0
    fields = ['url', 'is_cover', 'uploaded_by', 'created_at']
    readonly_fields = ['created_at']


@admin.register(Pub)
class PubAdmin(admin.ModelAdmin):
    """Admin interface for pubs."""

    list_display = [
        'name',
        'borough',
        'type',
        'rating',
        'review_count',
        'manager_email',
        'last_updated',
    ]
    list_filter = ['type', 'borough', 'city']
    search_fields = ['name', 'address', 'postcode', 'place_id', 'manager_email']
    readonly_fields = [
        'slug',
        'manager_password',
        'user_review_count',
        'user_rating_avg',
        'checkin_count',
        'wishlist_count',
        'created_at',
        'updated_at',
    ]
    inlines = [PubAmenityInline, PubPhotoInline]


@admin.register(City)
class CityAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    search_fields = ['name']


@admin.register(Borough)
class BoroughAdmin(admin.ModelAdmin):
    list_display = ['name', 'city']
    list_filter = ['city']
    search_fields = ['name']


@admin.register(Amenity)
class AmenityAdmin(admin.ModelAdmin):
    list_display = ['label', 'key']
    search_fields = ['label', 'key']


@admin.register(AreaFeaturedPub)
class AreaFeaturedPubAdmin(admin.ModelAdmin):
    list_display = ['area_name', 'pub', 'created_at']
    list_filter = ['area_name']
