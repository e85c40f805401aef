from django.conf import settings
from django.contrib import admin
from django.db.models import Count
from django.utils.html import format_html

from gallery.models import Category, Gif


@admin.register(Gif)
class GifAdmin(admin.ModelAdmin):
    list_display = [
        'original_name',
        'share_link',
        'mime_type',
        'file_size_display',
        'created_at',
    ]

    list_filter = [
        'mime_type',
        'categories',
        'created_at',
    ]

    search_fields = [
        'original_name',
        'slug',
        'filename',
    ]

    readonly_fields = ['slug', 'filename', 'mime_type', 'size_bytes', 'created_at', 'preview_display']

    filter_horizontal = ['categories']

    fieldsets = [
        ('File', {'fields': ['slug', 'original_name', 'filename', 'mime_type', 'size_bytes']}),
        ('Categories', {'fields': ['categories']}),
        ('Preview', {'fields': ['preview_display']}),
        ('Timestamps', {'fields': ['created_at']}),
    ]

    def _share_path(self, obj):
        base_path = settings.GIFSELECTOR_BASE_PATH.rstrip('/')
        return f'{base_path}/share/{obj.slug}.{obj.extension}'

    def file_size_display(self, obj):
        if obj.size_bytes:
            size_mb = obj.size_bytes / (1024 * 1024)
            return f'{size_mb:.2f} MB'
        return '-'

    file_size_display.short_description = 'File Size'

    def share_link(self, obj):
        return format_html('<a href="{}" target="_blank">{}</a>', self._share_path(obj), obj.slug)

    share_link.short_description = 'Share'

    def preview_display(self, obj):
        if not obj.pk:
            return '-'
        return format_html(
            '<img src="{}" style="max-width: 100%; max-height: 300px; border-radius: 4px;">',
            self._share_path(obj),
        )

    preview_display.short_description = 'Preview'


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'gif_count', 'created_at']
    search_fields = ['name']

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(gif_count=Count('gifs'))

    def gif_count(self, obj):
        return obj.gif_count

    gif_count.short_description = 'Gifs'
    gif_count.admin_order_field = 'gif_count'
