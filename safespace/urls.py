"""
safespace URL Configuration

/api/    JSON API (community.urls)
/admin/  Django admin, used as the moderation console
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('community.urls')),
]
