"""URL configuration for the club reservations project.

The `urlpatterns` list routes URLs to views. It includes the Django admin
and the application-level routers provided by Django Rest Framework.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore

# API versioning. v1 is our initial version; future versions can be added here.

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/reservations/', include('apps.reservations.urls')),
]
