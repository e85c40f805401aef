import json
from functools import wraps

from django.contrib.auth import authenticate, login, logout
from django.http import FileResponse, Http404, HttpResponse, HttpResponsePermanentRedirect, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST
from django.views.static import serve

from gallery import storage
from gallery.logs import client_ip, write_log
from gallery.operations import (
    InvalidImportRequest,
    InvalidUpload,
    import_urls,
    store_upload,
)
from gallery.service.config import get_frontend_dist
from gallery.service.constants import EXTENSION_MIME_TYPES
from gallery.utils import build_share_url, serialize_category, serialize_gif


def api_login_required(view_func):
    """Like login_required, but answers 401 JSON instead of redirecting"""

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({'error': 'Unauthorized'}, status=401)
        return view_func(request, *args, **kwargs)

    return wrapper


def _json_body(request):
    """Decoded JSON object body, or {} if the body is empty or not an object"""
    try:
        data = json.loads(request.body or b'{}')
    except (ValueError, UnicodeDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def frontend_view(request):
    """Serve the built single-page frontend"""
    index_path = get_frontend_dist() / 'index.html'
    if not index_path.exists():
        return HttpResponse('Frontend build not found.', status=404, content_type='text/plain')
    return FileResponse(open(index_path, 'rb'), content_type='text/html')


def frontend_asset_view(request, path):
    """
    Serve a file from the frontend build (JS, CSS, images).

    Anything not in the build answers a plain-text 404.
    """
    try:
        return serve(request, path, document_root=get_frontend_dist())
    except Http404:
        return HttpResponse('Not Found', status=404, content_type='text/plain')


# --- Session ---


@csrf_exempt
@require_POST
def login_view(request):
    data = _json_body(request)
    username = data.get('username')
    password = data.get('password')
    if not username or not password:
        return JsonResponse({'error': 'Username and password are required.'}, status=400)

    user = authenticate(request, username=username, password=password)
    if user is None:
        return JsonResponse({'error': 'Invalid credentials.'}, status=401)

    login(request, user)
    return JsonResponse({'success': True})


@csrf_exempt
@require_POST
def logout_view(request):
    logout(request)
    return JsonResponse({'success': True})


@require_GET
def session_view(request):
    if not request.user.is_authenticated:
        return JsonResponse({'authenticated': False})
    return JsonResponse({'authenticated': True, 'username': request.user.get_username()})


# --- Gifs ---


@require_GET
@api_login_required
def gifs_view(request):
    gifs = storage.list_gifs()
    return JsonResponse(
        {'gifs': [serialize_gif(request, gif) for gif in gifs], 'total': len(gifs)}
    )


@require_GET
def public_gifs_view(request):
    """
    Public listing, optionally filtered by ?category=<id or name>.
    """
    category = request.GET.get('category')
    if category:
        gifs = storage.gifs_by_category(category)
    else:
        gifs = storage.list_gifs()
    return JsonResponse(
        {'gifs': [serialize_gif(request, gif) for gif in gifs], 'total': len(gifs)}
    )


@csrf_exempt
@require_http_methods(['DELETE'])
@api_login_required
def gif_detail_view(request, slug):
    if not storage.delete_gif_by_slug(slug):
        return JsonResponse({'error': 'GIF not found.'}, status=404)
    return JsonResponse({'success': True})


@csrf_exempt
@require_http_methods(['PUT'])
@api_login_required
def gif_categories_view(request, slug):
    data = _json_body(request)
    try:
        categories = storage.set_gif_categories(slug, data.get('categoryIds'))
    except storage.CategoryNotFound as e:
        return JsonResponse({'error': str(e)}, status=400)
    if categories is None:
        return JsonResponse({'error': 'GIF not found.'}, status=404)
    return JsonResponse({'categories': categories})


# --- Categories ---


@csrf_exempt
@require_http_methods(['GET', 'POST'])
@api_login_required
def categories_view(request):
    if request.method == 'GET':
        categories = storage.list_categories()
        return JsonResponse({'categories': [serialize_category(c) for c in categories]})

    data = _json_body(request)
    try:
        category = storage.add_category(data.get('name'))
    except storage.CategoryNameRequired as e:
        return JsonResponse({'error': str(e)}, status=400)
    except storage.CategoryNameDuplicate as e:
        return JsonResponse({'error': str(e)}, status=409)
    return JsonResponse({'category': serialize_category(category, gif_count=0)}, status=201)


@csrf_exempt
@require_http_methods(['DELETE'])
@api_login_required
def category_detail_view(request, category_id):
    if not category_id.isdecimal() or int(category_id) <= 0:
        return JsonResponse({'error': 'Invalid category id.'}, status=400)
    if not storage.delete_category(int(category_id)):
        return JsonResponse({'error': 'Category not found.'}, status=404)
    return JsonResponse({'success': True})


# --- Upload & import ---


@csrf_exempt
@require_POST
@api_login_required
def upload_view(request):
    """
    Store a GIF/WebP sent as multipart field 'gif'.

    Returns:
        201 {slug, shareUrl}, or 400 {error}
    """
    try:
        slug = store_upload(request.FILES.get('gif'), logger=write_log)
    except InvalidUpload as e:
        return JsonResponse({'error': str(e)}, status=400)

    gif = storage.find_gif_by_slug(slug)
    return JsonResponse({'slug': slug, 'shareUrl': build_share_url(request, gif)}, status=201)


@csrf_exempt
@require_POST
@api_login_required
def import_view(request):
    """
    Import media from remote URLs.

    Params (JSON body):
        urls (required): array of URL strings

    Returns:
        200 {results: [{url, success, slug?, error?}, ...]} regardless of
        individual failures, or 400 if urls is not an array of strings
    """
    data = _json_body(request)
    try:
        results = import_urls(data.get('urls'), logger=write_log)
    except InvalidImportRequest as e:
        return JsonResponse({'error': str(e)}, status=400)

    return JsonResponse({'results': [result.to_dict() for result in results]})


# --- Share links ---


@require_GET
def share_view(request, slug, ext):
    """
    Serve a stored file. A mismatched extension redirects to the canonical URL.
    """
    referer = request.META.get('HTTP_REFERER') or 'no-referer'
    write_log(f'[share-access] slug={slug} from {client_ip(request)} referer={referer}')

    gif = storage.find_gif_by_slug(slug)
    if gif is None:
        return JsonResponse({'error': 'GIF not found.'}, status=404)

    file_path = gif.get_absolute_file_path()
    if not file_path.exists():
        return JsonResponse({'error': 'GIF file missing.'}, status=404)

    if ext.lower() != gif.extension:
        return HttpResponsePermanentRedirect(build_share_url(request, gif))

    mime_type = gif.mime_type or EXTENSION_MIME_TYPES.get(file_path.suffix.lower(), 'image/gif')
    return FileResponse(open(file_path, 'rb'), content_type=mime_type)


@require_GET
def share_redirect_view(request, slug):
    gif = storage.find_gif_by_slug(slug)
    if gif is None:
        return JsonResponse({'error': 'GIF not found.'}, status=404)
    return HttpResponsePermanentRedirect(build_share_url(request, gif))
