from django.urls import path

from gallery.views import (
    categories_view,
    category_detail_view,
    gif_categories_view,
    gif_detail_view,
    gifs_view,
    import_view,
    login_view,
    logout_view,
    public_gifs_view,
    session_view,
    share_redirect_view,
    share_view,
    upload_view,
)

urlpatterns = [
    # Session
    path('api/login', login_view, name='login'),
    path('api/logout', logout_view, name='logout'),
    path('api/session', session_view, name='session'),
    # Gallery
    path('api/gifs', gifs_view, name='gifs'),
    path('api/public/gifs', public_gifs_view, name='public_gifs'),
    path('api/gifs/<str:slug>', gif_detail_view, name='gif_detail'),
    path('api/gifs/<str:slug>/categories', gif_categories_view, name='gif_categories'),
    path('api/categories', categories_view, name='categories'),
    path('api/categories/<str:category_id>', category_detail_view, name='category_detail'),
    path('api/upload', upload_view, name='upload'),
    path('api/import', import_view, name='import'),
    # Public share links
    path('share/<str:slug>.<str:ext>', share_view, name='share'),
    path('share/<str:slug>', share_redirect_view, name='share_redirect'),
]
