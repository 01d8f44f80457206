from django.contrib import admin
from .models import Manager, PubManager, ManagerLogin, PubRequest, PubManagerConnectionRequest, PubManagerNewsletter


class PubManagerInline(admin.TabularInline):
    model = PubManager
    extra = 0
    raw_id_fields = ['pub']


@admin.register(Manager)
class ManagerAdmin(admin.ModelAdmin):
    list_display = ['email', 'name', 'created_at']
    search_fields = ['email', 'name']
    inlines = [PubManagerInline]


@admin.register(ManagerLogin)
class ManagerLoginAdmin(admin.ModelAdmin):
    list_display = ['email', 'pub', 'created_at']
    list_filter = ['created_at']
    raw_id_fields = ['manager', 'pub']


@admin.register(PubRequest)
class PubRequestAdmin(admin.ModelAdmin):
    list_display = ['pub_name', 'postcode', 'manager_name', 'contact_email', 'status', 'created_at']
    list_filter = ['status']
    search_fields = ['pub_name', 'contact_email', 'postcode']


@admin.register(PubManagerConnectionRequest)
class PubManagerConnectionRequestAdmin(admin.ModelAdmin):
    list_display = ['email', 'pub', 'status', 'created_at']
    list_filter = ['status']
    raw_id_fields = ['pub']


@admin.register(PubManagerNewsletter)
class PubManagerNewsletterAdmin(admin.ModelAdmin):
    list_display = ['pub_name', 'email', 'created_at']
