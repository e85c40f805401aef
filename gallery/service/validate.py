"""
Import URL validation.

Parses a raw URL and checks its hostname against the domain allow-list.
"""

from urllib.parse import urlparse

from gallery.service.config import get_allowed_domains
from gallery.service.errors import DomainNotAllowed, InvalidUrl


def parse_hostname(url):
    """
    Parse a URL and return its lowercased hostname.

    Raises:
        InvalidUrl: If the string is not an absolute http(s) URL with a host
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidUrl(f'Invalid URL: {url!r}')

    try:
        parsed = urlparse(url.strip())
        hostname = parsed.hostname
        # Accessing .port validates the netloc
        parsed.port
    except ValueError:
        raise InvalidUrl(f'Invalid URL: {url}')

    if parsed.scheme not in ('http', 'https') or not hostname:
        raise InvalidUrl(f'Invalid URL: {url}')

    return hostname.rstrip('.')


def is_domain_allowed(hostname, allowed_domains):
    """True if hostname equals or is a subdomain of an allowed domain"""
    hostname = hostname.lower().rstrip('.')
    for domain in allowed_domains:
        domain = domain.lower().rstrip('.')
        if domain and (hostname == domain or hostname.endswith(f'.{domain}')):
            return True
    return False


def validate_url(url, allowed_domains=None):
    """
    Validate an import URL.

    Args:
        url: Raw URL string
        allowed_domains: Optional list of domains (default from settings)

    Returns:
        str: The validated hostname

    Raises:
        InvalidUrl: If the URL cannot be parsed
        DomainNotAllowed: If the hostname is not on the allow-list
    """
    if allowed_domains is None:
        allowed_domains = get_allowed_domains()

    hostname = parse_hostname(url)
    if not is_domain_allowed(hostname, allowed_domains):
        raise DomainNotAllowed(f'Domain not allowed: {hostname}')
    return hostname
