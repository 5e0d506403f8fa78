"""
Profile URLs (mounted at /api/profile/)
"""
from django.urls import path
from . import views

urlpatterns = [
    path('', views.profile_view, name='profile'),
    path('rate', views.hourly_rate_view, name='profile-rate'),
]
