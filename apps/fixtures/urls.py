from django.urls import path
from . import views

app_name = 'fixtures'

urlpatterns = [
    path('cron/refresh-fixtures/', views.cron_refresh_fixtures, name='cron-refresh'),
    path('cron/clear-fixtures/', views.cron_clear_fixtures, name='cron-clear'),
    path('fixtures/upcoming/', views.upcoming, name='upcoming'),
    path('fixtures/livescores/', views.livescores, name='livescores'),
]
