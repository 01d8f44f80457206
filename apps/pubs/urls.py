from django.urls import path
from . import views

app_name = 'pubs'

urlpatterns = [
    # Directory
    path('pubs/search/', views.pub_search, name='pub-search'),
    path('pubs/<str:identifier>/', views.pub_detail, name='pub-detail'),
    path('random-pub/', views.random_pub, name='random-pub'),
    path('random-pub/candidates/', views.random_pub_candidates, name='random-pub-candidates'),
    path('search/suggestions/', views.search_suggestions, name='search-suggestions'),

    # Areas
    path('areas/', views.area_list, name='area-list'),
    path('areas/<slug:slug>/', views.area_detail, name='area-detail'),
    path('areas/<slug:slug>/pubs/', views.area_pubs, name='area-pubs'),
    path('areas/<slug:slug>/amenities/<slug:amenity_slug>/', views.area_amenity, name='area-amenity'),
    path('amenity-filters/', views.amenity_filter_list, name='amenity-filters'),

    # Photos
    path('photo/', views.photo_proxy, name='photo'),
    path('photo-by-place/', views.photo_by_place, name='photo-by-place'),

    # Admin
    path('admin/pubs/', views.admin_pub_list, name='admin-pub-list'),
    path('admin/pubs/upload/', views.admin_pub_upload, name='admin-pub-upload'),
    path('admin/pubs/upload-amenities/', views.admin_amenity_upload, name='admin-amenity-upload'),
    path('admin/pubs/<uuid:pub_id>/', views.admin_pub_detail, name='admin-pub-detail'),
    path('admin/area-featured-pubs/', views.admin_featured_pubs, name='admin-featured-pubs'),
    path('admin/area-featured-pubs/<uuid:featured_id>/', views.admin_featured_pub_detail, name='admin-featured-pub-detail'),
    path('admin/amenities/', views.admin_amenity_list, name='admin-amenities'),
    path('admin/cities/', views.admin_city_list, name='admin-cities'),
]
