from django.urls import path
from . import views

app_name = 'blog'

urlpatterns = [
    # Public
    path('blog/', views.blog_list, name='post-list'),
    path('blog/rss/', views.blog_rss, name='rss'),
    path('blog/<slug:slug>/', views.blog_detail, name='post-detail'),
    path('subscribe/', views.subscribe, name='subscribe'),

    # Admin
    path('admin/blog/', views.admin_blog_posts, name='admin-posts'),
    path('admin/blog/options/', views.admin_blog_options, name='admin-options'),
    path('admin/blog/<uuid:post_id>/', views.admin_blog_post_detail, name='admin-post-detail'),
    path('admin/blog-subscriptions/', views.admin_blog_subscriptions, name='admin-subscriptions'),
]
