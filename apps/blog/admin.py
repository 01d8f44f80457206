from django.contrib import admin
from .models import BlogPost, BlogSubscription


@admin.register(BlogPost)
class BlogPostAdmin(admin.ModelAdmin):
    list_display = ['title', 'slug', 'author', 'published', 'published_at', 'updated_at']
    list_filter = ['published']
    search_fields = ['title', 'slug', 'excerpt']
    prepopulated_fields = {'slug': ('title',)}
    readonly_fields = ['created_at', 'updated_at']


@admin.register(BlogSubscription)
class BlogSubscriptionAdmin(admin.ModelAdmin):
    list_display = ['email', 'created_at']
    search_fields = ['email']
