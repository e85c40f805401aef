"""
Tests for service/acquire.py
"""

import tempfile
from pathlib import Path
from unittest.mock import MagicMock, patch

import requests
from django.test import TestCase, override_settings
from yt_dlp.utils import DownloadError

from gallery.service.acquire import (
    MediaAcquirer,
    download_fallback,
    download_gallery_dl,
    download_ytdlp,
    extract_media_url,
    fetch_media,
    infer_extension,
)
from gallery.service.errors import (
    FallbackFetchFailed,
    MediaTooLarge,
    NoMediaFound,
    PrimaryAcquireFailed,
)
from gallery.service.process import ToolFailed

OG_VIDEO_PAGE = '''
<html><head>
<meta property="og:image" content="https://media.giphy.com/still.gif">
<meta property="og:video" content="https://media.giphy.com/clip.mp4?cid=1&amp;rid=2">
</head></html>
'''


def page_response(html, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.text = html
    return response


def media_response(chunks, headers=None, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.headers = headers or {}
    response.iter_content.return_value = chunks
    return response


class ExtractMediaUrlTest(TestCase):
    """Tests for meta tag scraping"""

    def test_og_video_preferred_over_og_image(self):
        """Test that og:video wins over og:image regardless of tag order"""
        self.assertEqual(
            extract_media_url(OG_VIDEO_PAGE),
            'https://media.giphy.com/clip.mp4?cid=1&rid=2',
        )

    def test_og_video_url(self):
        """Test og:video:url detection"""
        html = '<meta property="og:video:url" content="https://t.co/v.mp4" />'
        self.assertEqual(extract_media_url(html), 'https://t.co/v.mp4')

    def test_content_before_property(self):
        """Test meta tag with content before property"""
        html = "<meta content='https://i.imgur.com/a.gif' property='og:image'>"
        self.assertEqual(extract_media_url(html), 'https://i.imgur.com/a.gif')

    def test_twitter_image_by_name(self):
        """Test twitter:image given via name attribute"""
        html = '<META NAME="twitter:image" CONTENT="https://pbs.twimg.com/a.webp">'
        self.assertEqual(extract_media_url(html), 'https://pbs.twimg.com/a.webp')

    def test_no_meta_tags(self):
        """Test no meta tags"""
        self.assertIsNone(extract_media_url('<html><title>nothing</title></html>'))

    def test_empty_content_skipped_for_later_tag(self):
        """Test that an empty meta tag does not hide a later one with the same property"""
        html = (
            '<meta property="og:image" content="">'
            '<meta property="og:image" content="   ">'
            '<meta property="og:image" content="https://media.giphy.com/a.gif">'
        )
        self.assertEqual(extract_media_url(html), 'https://media.giphy.com/a.gif')

    def test_empty_higher_priority_tag_falls_back(self):
        """Test that an empty og:video falls through to og:image"""
        html = (
            '<meta property="og:video" content="">'
            '<meta name="og:image" content="https://i.imgur.com/b.gif">'
        )
        self.assertEqual(extract_media_url(html), 'https://i.imgur.com/b.gif')


class InferExtensionTest(TestCase):
    """Tests for fallback file extension selection"""

    def test_from_url_path(self):
        """Test extension taken from the media URL path"""
        self.assertEqual(infer_extension('https://x.com/a/clip.MP4?x=1', 'image/gif'), '.mp4')

    def test_from_content_type(self):
        """Test extension taken from Content-Type when the URL has none"""
        self.assertEqual(infer_extension('https://x.com/media/123', 'video/mp4; charset=binary'), '.mp4')

    def test_implausible_url_extension_ignored(self):
        """Test implausible url extension ignored"""
        self.assertEqual(infer_extension('https://x.com/a.verylongext', 'image/webp'), '.webp')

    def test_default(self):
        """Test .gif default when nothing else is known"""
        self.assertEqual(infer_extension('https://x.com/media/123', None), '.gif')


class FetchMediaTest(TestCase):
    """Tests for size-capped media download"""

    @patch('gallery.service.acquire.requests.get')
    def test_returns_content_and_type(self, mock_get):
        """Test successful media download"""
        mock_get.return_value = media_response(
            [b'GIF89a', b'rest'], headers={'content-type': 'image/gif', 'content-length': '10'}
        )

        content, content_type = fetch_media('https://media.giphy.com/a.gif', max_bytes=100)

        self.assertEqual(content, b'GIF89arest')
        self.assertEqual(content_type, 'image/gif')
        self.assertTrue(mock_get.call_args.kwargs['stream'])

    @patch('gallery.service.acquire.requests.get')
    def test_declared_length_rejected_before_body(self, mock_get):
        """Test oversized Content-Length is rejected without reading the body"""
        response = media_response([b'x'], headers={'content-length': '20000000'})
        mock_get.return_value = response

        with self.assertRaises(MediaTooLarge):
            fetch_media('https://media.giphy.com/huge.mp4', max_bytes=15 * 1024 * 1024)

        response.iter_content.assert_not_called()
        response.close.assert_called_once()

    @patch('gallery.service.acquire.requests.get')
    def test_undeclared_oversize_body(self, mock_get):
        """Test streamed body past the cap is rejected"""
        mock_get.return_value = media_response([b'a' * 6, b'b' * 6])

        with self.assertRaises(MediaTooLarge):
            fetch_media('https://media.giphy.com/a.mp4', max_bytes=10)

    @patch('gallery.service.acquire.requests.get')
    def test_non_2xx_status(self, mock_get):
        """Test non-2xx media response"""
        mock_get.return_value = media_response([], status_code=404)

        with self.assertRaises(FallbackFetchFailed):
            fetch_media('https://media.giphy.com/a.mp4', max_bytes=10)

    @patch('gallery.service.acquire.requests.get')
    def test_connection_error(self, mock_get):
        """Test connection error"""
        mock_get.side_effect = requests.ConnectionError('refused')

        with self.assertRaises(FallbackFetchFailed):
            fetch_media('https://media.giphy.com/a.mp4', max_bytes=10)


class DownloadFallbackTest(TestCase):
    """Tests for the meta tag fallback"""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.workspace = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    @patch('gallery.service.acquire.requests.get')
    def test_writes_fallback_file(self, mock_get):
        """Test fallback writes fallback-download with the inferred extension"""
        mock_get.side_effect = [
            page_response(OG_VIDEO_PAGE),
            media_response([b'mp4data'], headers={'content-type': 'video/mp4'}),
        ]

        path = download_fallback('https://giphy.com/gifs/abc', self.workspace, max_bytes=100)

        self.assertEqual(path, self.workspace / 'fallback-download.mp4')
        self.assertEqual(path.read_bytes(), b'mp4data')
        media_call = mock_get.call_args_list[1]
        self.assertEqual(media_call.args[0], 'https://media.giphy.com/clip.mp4?cid=1&rid=2')

    @patch('gallery.service.acquire.requests.get')
    def test_relative_media_url_resolved(self, mock_get):
        """Test relative media url resolved"""
        mock_get.side_effect = [
            page_response('<meta property="og:image" content="/media/a.gif">'),
            media_response([b'GIF89a'], headers={'content-type': 'image/gif'}),
        ]

        download_fallback('https://tenor.com/view/cat', self.workspace, max_bytes=100)

        self.assertEqual(mock_get.call_args_list[1].args[0], 'https://tenor.com/media/a.gif')

    @patch('gallery.service.acquire.requests.get')
    def test_page_error_status(self, mock_get):
        """Test page error status"""
        mock_get.return_value = page_response('', status_code=403)

        with self.assertRaises(FallbackFetchFailed):
            download_fallback('https://giphy.com/gifs/abc', self.workspace, max_bytes=100)

    @patch('gallery.service.acquire.requests.get')
    def test_no_meta_tags(self, mock_get):
        """Test no meta tags"""
        mock_get.return_value = page_response('<html></html>')

        with self.assertRaises(NoMediaFound):
            download_fallback('https://giphy.com/gifs/abc', self.workspace, max_bytes=100)
        self.assertEqual(list(self.workspace.iterdir()), [])

    @patch('gallery.service.acquire.requests.get')
    def test_too_large_writes_nothing(self, mock_get):
        """Test too large writes nothing"""
        mock_get.side_effect = [
            page_response(OG_VIDEO_PAGE),
            media_response([b'x'], headers={'content-length': '999'}),
        ]

        with self.assertRaises(MediaTooLarge):
            download_fallback('https://giphy.com/gifs/abc', self.workspace, max_bytes=100)
        self.assertEqual(list(self.workspace.iterdir()), [])


class PrimaryDownloaderTest(TestCase):
    """Tests for gallery-dl and yt-dlp backends"""

    @patch('gallery.service.acquire.run_command')
    def test_gallery_dl_command(self, mock_run):
        """Test gallery-dl command line"""
        download_gallery_dl('https://giphy.com/gifs/abc', Path('/tmp/import-x'), timeout=9)

        mock_run.assert_called_once()
        self.assertEqual(
            mock_run.call_args.args[0],
            ['gallery-dl', '-D', '/tmp/import-x', 'https://giphy.com/gifs/abc'],
        )
        self.assertEqual(mock_run.call_args.kwargs['timeout'], 9)

    @patch('gallery.service.acquire.run_command')
    def test_gallery_dl_failure(self, mock_run):
        """Test gallery-dl failure becomes PrimaryAcquireFailed"""
        mock_run.side_effect = ToolFailed('gallery-dl failed with code 1')

        with self.assertRaises(PrimaryAcquireFailed):
            download_gallery_dl('https://giphy.com/gifs/abc', Path('/tmp/import-x'), timeout=9)

    @override_settings(GIFSELECTOR_HTTP_TIMEOUT=7)
    @patch('gallery.service.acquire.yt_dlp.YoutubeDL')
    def test_ytdlp_download(self, mock_ydl_class):
        """Test yt-dlp options and download call"""
        mock_ydl = MagicMock()
        mock_ydl_class.return_value.__enter__.return_value = mock_ydl

        download_ytdlp('https://x.com/u/status/1', Path('/tmp/import-y'), timeout=5)

        opts = mock_ydl_class.call_args.args[0]
        self.assertEqual(opts['outtmpl'], '/tmp/import-y/%(id)s.%(ext)s')
        self.assertEqual(opts['socket_timeout'], 7)
        mock_ydl.download.assert_called_once_with(['https://x.com/u/status/1'])

    @patch('gallery.service.acquire.yt_dlp.YoutubeDL')
    def test_ytdlp_failure(self, mock_ydl_class):
        """Test yt-dlp DownloadError becomes PrimaryAcquireFailed"""
        mock_ydl = MagicMock()
        mock_ydl.download.side_effect = DownloadError('Unsupported URL')
        mock_ydl_class.return_value.__enter__.return_value = mock_ydl

        with self.assertRaises(PrimaryAcquireFailed):
            download_ytdlp('https://x.com/u/status/1', Path('/tmp/import-y'), timeout=5)

    @patch('gallery.service.acquire.yt_dlp.YoutubeDL')
    def test_ytdlp_unexpected_error_allows_fallback(self, mock_ydl_class):
        """Test that non-DownloadError failures inside yt-dlp still count as a primary failure"""
        mock_ydl = MagicMock()
        mock_ydl.download.side_effect = KeyError('formats')
        mock_ydl_class.return_value.__enter__.return_value = mock_ydl

        with self.assertRaises(PrimaryAcquireFailed):
            download_ytdlp('https://x.com/u/status/1', Path('/tmp/import-y'), timeout=5)

    @override_settings(GIFSELECTOR_TOOL_TIMEOUT=300)
    @patch('gallery.service.acquire.time.monotonic')
    @patch('gallery.service.acquire.yt_dlp.YoutubeDL')
    def test_ytdlp_capped_by_tool_timeout(self, mock_ydl_class, mock_monotonic):
        """Test that the progress hook cancels a download running past the tool timeout"""
        mock_monotonic.side_effect = [1000.0, 1100.0, 1400.0]
        mock_ydl = MagicMock()
        mock_ydl_class.return_value.__enter__.return_value = mock_ydl

        def download(urls):
            hook = mock_ydl_class.call_args.args[0]['progress_hooks'][0]
            hook({'status': 'downloading'})
            hook({'status': 'downloading'})

        mock_ydl.download.side_effect = download

        with self.assertRaises(PrimaryAcquireFailed) as ctx:
            download_ytdlp('https://x.com/u/status/1', Path('/tmp/import-y'))

        self.assertIn('timed out after 300s', str(ctx.exception))


class MediaAcquirerTest(TestCase):
    """Tests for primary/fallback orchestration"""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.workspace = Path(self.tmp.name)
        self.fallback = MagicMock()

    def tearDown(self):
        self.tmp.cleanup()

    def test_primary_success_skips_fallback(self):
        """Test primary success skips fallback"""
        def primary(url, workspace, logger=None):
            (workspace / 'a.gif').write_bytes(b'GIF89a')

        acquirer = MediaAcquirer(primary=primary, fallback=self.fallback)

        self.assertEqual(acquirer.acquire('https://giphy.com/a', self.workspace), 'primary')
        self.fallback.assert_not_called()

    def test_primary_failure_uses_fallback(self):
        """Test primary failure uses fallback"""
        primary = MagicMock(side_effect=PrimaryAcquireFailed('gallery-dl failed'))
        logs = []
        acquirer = MediaAcquirer(primary=primary, fallback=self.fallback)

        method = acquirer.acquire('https://giphy.com/a', self.workspace, logger=logs.append)

        self.assertEqual(method, 'fallback')
        self.fallback.assert_called_once_with('https://giphy.com/a', self.workspace, logger=logs.append)
        self.assertTrue(any(line.startswith('Warning:') for line in logs))

    def test_primary_empty_workspace_uses_fallback(self):
        """Test primary empty workspace uses fallback"""
        primary = MagicMock()
        acquirer = MediaAcquirer(primary=primary, fallback=self.fallback)

        self.assertEqual(acquirer.acquire('https://giphy.com/a', self.workspace), 'fallback')
        self.fallback.assert_called_once()

    def test_fallback_errors_propagate(self):
        """Test fallback errors propagate"""
        primary = MagicMock(side_effect=PrimaryAcquireFailed('failed'))
        self.fallback.side_effect = NoMediaFound('No media meta tags found')
        acquirer = MediaAcquirer(primary=primary, fallback=self.fallback)

        with self.assertRaises(NoMediaFound):
            acquirer.acquire('https://giphy.com/a', self.workspace)

    @override_settings(GIFSELECTOR_DOWNLOADER='yt-dlp')
    def test_downloader_from_settings(self):
        """Test primary downloader chosen from settings"""
        self.assertIs(MediaAcquirer().primary, download_ytdlp)

    @override_settings(GIFSELECTOR_DOWNLOADER='wget')
    def test_unknown_downloader(self):
        """Test unknown downloader"""
        with self.assertRaises(ValueError):
            MediaAcquirer()
