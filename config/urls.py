"""URL configuration: the portal core only exposes the admin console."""

from django.contrib import admin
from django.urls import path

urlpatterns = [
    path("admin/", admin.site.urls),
]
