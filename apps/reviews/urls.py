from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'reviews'

router = DefaultRouter()
router.register(r'reviews', views.ReviewViewSet, basename='review')

urlpatterns = [
    # Pub community data
    path('pubs/<str:identifier>/reviews/', views.pub_reviews, name='pub-reviews'),
    path('pubs/<str:identifier>/user-data/', views.pub_user_data, name='pub-user-data'),

    # Check-ins & wishlist
    path('checkins/', views.checkin_create, name='checkin-create'),
    path('checkins/<str:pub_id>/', views.checkin_delete, name='checkin-delete'),
    path('wishlist/', views.wishlist_add, name='wishlist-add'),
    path('wishlist/<str:pub_id>/', views.wishlist_remove, name='wishlist-remove'),

    # Current user
    path('users/me/reviews/', views.my_reviews, name='my-reviews'),
    path('users/me/checkins/', views.my_checkins, name='my-checkins'),
    path('users/me/wishlist/', views.my_wishlist, name='my-wishlist'),

    # POST   /api/reviews/        - Create review
    # GET    /api/reviews/{id}/   - Get review
    # PATCH  /api/reviews/{id}/   - Edit review
    # DELETE /api/reviews/{id}/   - Delete review
    path('', include(router.urls)),
]
