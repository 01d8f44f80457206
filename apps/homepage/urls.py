from django.urls import path
from . import views

app_name = 'homepage'

urlpatterns = [
    path('homepage/slots/', views.homepage_slots, name='slots'),
    path('admin/homepage-slots/', views.admin_homepage_slots, name='admin-slots'),
    path('admin/homepage-slots/candidates/', views.admin_slot_candidates, name='admin-candidates'),
    path('cron/regenerate-slots/', views.cron_regenerate_slots, name='cron-regenerate'),
]
