from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'analytics'

router = SimpleRouter()
router.register(r'admin/audit', views.AdminAuditViewSet, basename='admin-audit')

urlpatterns = [
    # Event ingestion
    path('events/', views.track_events, name='events'),

    # Pub manager dashboard
    path('pub-manager/analytics/', views.pub_analytics, name='pub-analytics'),
    path('pub-manager/benchmark/', views.pub_benchmark, name='pub-benchmark'),

    # Admin
    path('admin/analytics/overview/', views.admin_analytics_overview, name='admin-overview'),

    path('', include(router.urls)),
]
