"""
URL collection for save requests.

URLs come from repeated command-line values and from files with one URL per
line. Only absolute http(s) URLs are kept; everything else is dropped with a
warning and never submitted.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union
from urllib.parse import urlparse

from common.errors import UrlSourceError

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = ('http', 'https')


def is_valid_url(url: str) -> bool:
    """
    Check that a string is an absolute HTTP/HTTPS URL.

    Args:
        url: Candidate URL

    Returns:
        True if the URL has an http(s) scheme and a host
    """
    if not url or not isinstance(url, str):
        return False
    if url != url.strip() or any(ch.isspace() for ch in url):
        return False
    try:
        parsed = urlparse(url)
        # Accessing port validates it
        parsed.port
    except ValueError:
        return False
    return parsed.scheme.lower() in ALLOWED_SCHEMES and bool(parsed.hostname)


def _warn_invalid(url: str) -> None:
    print(f"⚠️  URL: \"{url}\" is not valid, and it will be ignored")
    logger.info(f"Ignoring invalid URL: {url!r}")


def filter_valid_urls(urls: Iterable[str]) -> List[str]:
    """Keep valid URLs in input order, warning about the rest."""
    valid = []
    for url in urls:
        if is_valid_url(url):
            valid.append(url)
        else:
            _warn_invalid(url)
    return valid


def read_urls_file(path: Union[str, Path], strict: bool = False) -> List[str]:
    """
    Read URLs from a file, one per line.

    Blank lines are ignored. In strict mode a missing file or any invalid line
    is fatal; otherwise the file is skipped or the line dropped with a warning.

    Raises:
        UrlSourceError: in strict mode, on a missing file or an invalid line
    """
    urls_file = Path(path)
    if not urls_file.is_file():
        if strict:
            raise UrlSourceError(f"File {urls_file} does not exist")
        print(f"❌ File {urls_file} does not exist")
        logger.info(f"URL file not found: {urls_file}")
        return []

    lines = [line.strip() for line in urls_file.read_text(encoding='utf-8').splitlines()]
    lines = [line for line in lines if line]

    if strict:
        for number, line in enumerate(lines, 1):
            if not is_valid_url(line):
                raise UrlSourceError(f"{urls_file}: line {number} is not a valid URL: \"{line}\"")
        return lines

    return filter_valid_urls(lines)


def collect_urls(
    urls: Optional[Iterable[str]] = None,
    paths: Optional[Iterable[Union[str, Path]]] = None,
    strict: bool = False,
) -> List[str]:
    """
    Build the list of URLs to save.

    Command-line URLs come first, followed by each file's URLs in the order
    the files were given.

    Args:
        urls: URLs from the command line
        paths: Files holding one URL per line
        strict: Treat any invalid line in a URL file as fatal

    Returns:
        Valid URLs in input order

    Raises:
        UrlSourceError: if no source was given, or on strict-mode failures
    """
    if urls is None and paths is None:
        raise UrlSourceError("URL cannot be empty: use --urls and/or --urls-path")

    collected = filter_valid_urls(urls or [])
    for path in paths or []:
        collected.extend(read_urls_file(path, strict=strict))

    logger.info(f"Collected {len(collected)} valid URLs")
    return collected
