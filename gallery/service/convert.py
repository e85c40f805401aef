"""
Format conversion strategy chains.

Videos become animated WebP (or GIF as a last resort) and GIFs are recompressed
to WebP. Each input type maps to an ordered list of strategies that are tried
until one produces an output file.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from gallery.service.config import get_tool_timeout
from gallery.service.process import ToolFailed, run_command

WEBP_QUALITY_FFMPEG = '75'
WEBP_QUALITY_IMAGEMAGICK = '80'


def ffmpeg_webp_command(input_path, output_path):
    """Animated, looping, silent WebP from a video"""
    return [
        'ffmpeg', '-y',
        '-i', str(input_path),
        '-c:v', 'libwebp',
        '-lossless', '0',
        '-q:v', WEBP_QUALITY_FFMPEG,
        '-loop', '0',
        '-an',
        str(output_path),
    ]


def ffmpeg_gif_command(input_path, output_path):
    return ['ffmpeg', '-y', '-i', str(input_path), str(output_path)]


def imagemagick_webp_command(binary, input_path, output_path):
    """WebP via ImageMagick; binary is 'magick' (v7) or 'convert' (legacy)"""
    return [
        binary,
        str(input_path),
        '-coalesce',
        '-quality', WEBP_QUALITY_IMAGEMAGICK,
        str(output_path),
    ]


@dataclass
class ConversionResult:
    """Outcome of running a strategy chain on one file"""

    # Final artifact, or None when the file must be dropped
    path: Optional[Path]
    strategy: Optional[str] = None
    failures: List[str] = field(default_factory=list)

    @property
    def converted(self):
        return self.strategy not in (None, 'passthrough', 'original')


class MediaConverter:
    """
    Normalizes a classified file into a storable format.

    Args:
        runner: Optional callable(cmd, timeout=..., logger=...) raising
            ToolFailed (default: run_command)
        timeout: Seconds per tool invocation (default from settings)
    """

    def __init__(self, runner=None, timeout=None):
        self.runner = runner or run_command
        self.timeout = timeout if timeout is not None else get_tool_timeout()

    def build_chain(self, input_path):
        """
        Ordered (name, output_path, command) strategies for an input file.

        Outputs carry a '.converted' infix so they never overwrite another
        downloaded file.
        """
        input_path = Path(input_path)
        ext = input_path.suffix.lower()
        webp_out = input_path.with_name(f'{input_path.stem}.converted.webp')
        gif_out = input_path.with_name(f'{input_path.stem}.converted.gif')

        if ext == '.mp4':
            return [
                ('ffmpeg-webp', webp_out, ffmpeg_webp_command(input_path, webp_out)),
                ('magick-webp', webp_out, imagemagick_webp_command('magick', input_path, webp_out)),
                ('convert-webp', webp_out, imagemagick_webp_command('convert', input_path, webp_out)),
                ('ffmpeg-gif', gif_out, ffmpeg_gif_command(input_path, gif_out)),
            ]
        if ext == '.gif':
            return [
                ('magick-webp', webp_out, imagemagick_webp_command('magick', input_path, webp_out)),
                ('convert-webp', webp_out, imagemagick_webp_command('convert', input_path, webp_out)),
            ]
        return []

    def convert(self, input_path, logger=None):
        """
        Run the strategy chain for a file.

        .webp passes through untouched. A .gif whose chain fails is kept as
        is. A .mp4 whose chain fails yields a result with path=None.

        Returns:
            ConversionResult
        """

        def log(message):
            if logger:
                logger(message)

        input_path = Path(input_path)
        ext = input_path.suffix.lower()

        if ext == '.webp':
            log(f'No conversion needed: {input_path.name}')
            return ConversionResult(path=input_path, strategy='passthrough')

        failures = []
        for name, output_path, cmd in self.build_chain(input_path):
            # A previous attempt may have left a partial file behind
            output_path.unlink(missing_ok=True)

            log(f'Converting {input_path.name} with {name}')
            try:
                self.runner(cmd, timeout=self.timeout, logger=logger)
            except ToolFailed as e:
                failures.append(f'{name}: {e}')
                log(f'Conversion with {name} failed: {e}')
                continue

            if output_path.exists():
                log(f'Converted to {output_path.name} with {name}')
                return ConversionResult(path=output_path, strategy=name, failures=failures)

            failures.append(f'{name}: no output produced')
            log(f'Conversion with {name} produced no output')

        if ext == '.gif':
            log(f'Keeping original GIF: {input_path.name}')
            return ConversionResult(path=input_path, strategy='original', failures=failures)

        log(f'All conversions failed for {input_path.name}: {"; ".join(failures)}')
        return ConversionResult(path=None, failures=failures)
