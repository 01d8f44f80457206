from django.urls import path
from . import views

app_name = 'managers'

urlpatterns = [
    # Portal
    path('pub-manager/login/', views.manager_login, name='login'),
    path('pub-manager/verify/', views.manager_verify, name='verify'),
    path('pub-manager/update/', views.manager_update_pub, name='update'),
    path('pub-manager/request/', views.manager_change_requests, name='change-requests'),
    path('pub-manager/connect/', views.manager_connect, name='connect'),
    path('pub-manager/pubs/search/', views.manager_pub_search, name='pub-search'),
    path('pub-manager/newsletter/', views.manager_newsletter, name='newsletter'),
    path('pub-manager/photos/', views.manager_photos, name='photos'),
    path('pub-manager/photos/<uuid:photo_id>/', views.manager_photo_detail, name='photo-detail'),

    # Public "list my pub" form
    path('pub-requests/', views.pub_request_submit, name='pub-request-submit'),

    # Admin
    path('admin/managers/', views.admin_manager_list, name='admin-managers'),
    path('admin/pubs/<str:identifier>/managers/', views.admin_pub_managers, name='admin-pub-managers'),
    path('admin/connection-requests/', views.admin_connection_requests, name='admin-connection-requests'),
    path('admin/pub-requests/', views.admin_pub_requests, name='admin-pub-requests'),
]
