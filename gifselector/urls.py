"""
URL configuration for the gifselector project.

Everything is mounted under GIFSELECTOR_BASE_PATH (default: /gifselector) so the
app can sit behind a reverse proxy next to other services.
"""

import re

from django.conf import settings
from django.contrib import admin
from django.urls import include, path, re_path

from gallery.views import frontend_asset_view, frontend_view

prefix = settings.GIFSELECTOR_BASE_PATH.strip('/')
prefix = f'{prefix}/' if prefix else ''

admin.site.site_header = 'gifselector administration'
admin.site.site_title = 'gifselector admin'

urlpatterns = [
    path(prefix, frontend_view, name='frontend'),
    path(f'{prefix}admin/', admin.site.urls),
    path(prefix, include('gallery.urls')),
    # Frontend build files; API and share routes never fall through to here
    re_path(
        rf'^{re.escape(prefix)}(?!api(?:/|$)|share(?:/|$)|admin(?:/|$))(?P<path>.+)$',
        frontend_asset_view,
        name='frontend_asset',
    ),
]
