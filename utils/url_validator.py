"""
SSRF Protection Module

Validates URLs before making HTTP requests to prevent Server-Side Request Forgery attacks.
Blocks access to localhost, private IPs, and non-http(s) schemes.
"""

import ipaddress
import socket
from urllib.parse import urljoin, urlparse

import requests

DEFAULT_HEADERS = {
    'User-Agent': 'Mozilla/5.0 (compatible; MealPlannerRecipeImport/1.0)',
    'Accept': 'text/html,application/xhtml+xml',
}

LOCALHOST_NAMES = {'localhost', 'localhost.localdomain', 'ip6-localhost', 'ip6-loopback'}

MAX_REDIRECTS = 5


class SSRFError(Exception):
    """Raised when a URL fails SSRF validation."""
    pass


def is_private_ip(ip_str):
    """Check if an IP address is private, loopback, or otherwise internal."""
    try:
        ip = ipaddress.ip_address(ip_str.split('%', 1)[0])
    except ValueError:
        return True  # Invalid IP, treat as unsafe
    return (
        ip.is_private or
        ip.is_loopback or
        ip.is_reserved or
        ip.is_link_local or
        ip.is_multicast or
        ip.is_unspecified
    )


def is_safe_url(url):
    """
    Validate that a URL is safe to fetch.

    Returns (is_safe, error_message) tuple.
    """
    if not url:
        return False, "Empty URL"

    parsed = urlparse(url)
    if parsed.scheme not in ('http', 'https'):
        return False, f"Invalid scheme: {parsed.scheme or 'none'}. Only http and https are allowed."

    hostname = parsed.hostname
    if not hostname:
        return False, "No hostname in URL"

    if hostname.lower() in LOCALHOST_NAMES:
        return False, "Cannot access localhost"

    # Literal IP in the URL
    try:
        ipaddress.ip_address(hostname)
    except ValueError:
        pass
    else:
        if is_private_ip(hostname):
            return False, f"Cannot access private/internal IP: {hostname}"
        return True, None

    try:
        resolved = socket.getaddrinfo(hostname, None, socket.AF_UNSPEC, socket.SOCK_STREAM)
    except socket.gaierror:
        return False, f"Cannot resolve hostname: {hostname}"

    for _family, _type, _proto, _canonname, sockaddr in resolved:
        if is_private_ip(sockaddr[0]):
            return False, f"Hostname resolves to private/internal IP: {sockaddr[0]}"

    return True, None


def safe_fetch(url, timeout=10, max_size=10 * 1024 * 1024, headers=None):
    """
    Fetch a URL with SSRF protection and a size limit.

    Raises:
        SSRFError: If the URL fails validation or the body is too large
        requests.RequestException: For network errors
    """
    # Follow redirects by hand so every hop is validated
    for _ in range(MAX_REDIRECTS + 1):
        is_safe, error = is_safe_url(url)
        if not is_safe:
            raise SSRFError(error)

        response = requests.get(url, headers=headers or DEFAULT_HEADERS, timeout=timeout,
                                stream=True, allow_redirects=False)
        if not response.is_redirect:
            break
        location = response.headers.get('location', '')
        response.close()
        url = urljoin(url, location)
    else:
        raise SSRFError(f"Too many redirects (max {MAX_REDIRECTS})")

    response.raise_for_status()

    content_length = response.headers.get('content-length')
    if content_length and content_length.isdigit() and int(content_length) > max_size:
        response.close()
        raise SSRFError(f"Response too large: {content_length} bytes (max {max_size})")

    content = bytearray()
    for chunk in response.iter_content(chunk_size=8192):
        content.extend(chunk)
        if len(content) > max_size:
            response.close()
            raise SSRFError(f"Response exceeded maximum size of {max_size} bytes")

    # Replace content so response.text works after streaming
    response._content = bytes(content)
    return response
