"""
Remote media import pipeline.

Runs validate -> acquire -> classify -> convert -> persist for each URL in
turn, inside a private workspace that is always removed afterwards. Failures
are recorded per URL and never affect the other URLs of the batch.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from gallery.service.acquire import MediaAcquirer
from gallery.service.classify import classify_files
from gallery.service.config import get_allowed_domains, get_max_bytes
from gallery.service.convert import MediaConverter
from gallery.service.errors import MediaImportError, NoValidMediaFound, UnexpectedError
from gallery.service.persist import MediaPersister
from gallery.service.validate import validate_url
from gallery.service.workspace import import_workspace


@dataclass
class ImportResult:
    """Outcome for a single imported URL"""

    url: str
    success: bool
    slug: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self):
        data = {'url': self.url, 'success': self.success}
        if self.slug is not None:
            data['slug'] = self.slug
        if self.error is not None:
            data['error'] = self.error
        return data


class ImportPipeline:
    """
    Imports media from a list of URLs, one stored asset per URL at most.

    Every collaborator can be injected; anything left out is built from
    settings.

    Args:
        acquirer: MediaAcquirer-like object with acquire(url, workspace, logger=...)
        converter: MediaConverter-like object with convert(path, logger=...)
        persister: MediaPersister-like object with persist(path, original_name=..., logger=...)
        allowed_domains: Domain allow-list
        max_bytes: Size cap for final artifacts
        tmp_dir: Parent directory for workspaces
        logger: Optional callable(str) for logging
    """

    def __init__(
        self,
        acquirer=None,
        converter=None,
        persister=None,
        allowed_domains=None,
        max_bytes=None,
        tmp_dir=None,
        logger=None,
    ):
        self.acquirer = acquirer or MediaAcquirer()
        self.converter = converter or MediaConverter()
        self.persister = persister or MediaPersister()
        self.allowed_domains = (
            allowed_domains if allowed_domains is not None else get_allowed_domains()
        )
        self.max_bytes = max_bytes if max_bytes is not None else get_max_bytes()
        self.tmp_dir = tmp_dir
        self.logger = logger

    def log(self, message):
        if self.logger:
            self.logger(message)

    def run(self, urls) -> List[ImportResult]:
        """Import each URL sequentially; one result per URL, in input order"""
        self.log(f'Importing {len(urls)} URLs')
        results = [self.import_url(url) for url in urls]
        succeeded = sum(1 for r in results if r.success)
        self.log(f'Import complete: {succeeded} succeeded, {len(results) - succeeded} failed')
        return results

    def import_url(self, url) -> ImportResult:
        """Import a single URL, converting any failure into a failed result"""
        self.log(f'Importing: {url}')
        try:
            validate_url(url, self.allowed_domains)
            with import_workspace(self.tmp_dir, logger=self.logger) as workspace:
                slug = self._process(url, workspace)
        except MediaImportError as e:
            self.log(f'Import failed for {url}: {e}')
            return ImportResult(url=url, success=False, error=str(e))
        except Exception as e:
            error = UnexpectedError(f'Unexpected error: {e}')
            self.log(f'Import failed for {url}: {error}')
            return ImportResult(url=url, success=False, error=str(error))

        self.log(f'Imported {url} as {slug}')
        return ImportResult(url=url, success=True, slug=slug)

    def _process(self, url, workspace):
        method = self.acquirer.acquire(url, workspace, logger=self.logger)
        self.log(f'Acquired via {method}')

        candidates = classify_files(workspace, logger=self.logger)

        # One asset per URL: only the first importable file is ever attempted
        for candidate in candidates[:1]:
            result = self.converter.convert(candidate, logger=self.logger)
            if result.path is None:
                self.log(f'Dropping {candidate.name}: no conversion succeeded')
                continue

            size = Path(result.path).stat().st_size
            if size >= self.max_bytes:
                self.log(f'Skipping {Path(result.path).name}: {size} bytes exceeds limit')
                continue

            original_name = f'{candidate.stem}{Path(result.path).suffix.lower()}'
            asset = self.persister.persist(
                result.path, original_name=original_name, logger=self.logger
            )
            return asset.slug

        raise NoValidMediaFound()
