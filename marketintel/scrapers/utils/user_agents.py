"""Request header construction for page fetches."""

from typing import Dict

HTML_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
ACCEPT_LANGUAGE = "en-US,en;q=0.9"


def browser_headers(user_agent: str, full: bool = True) -> Dict[str, str]:
    """Build request headers for a plain HTML GET.

    Args:
        user_agent: User-Agent string from settings
        full: Include Accept/Accept-Language (search pages); shop pages
            only send the User-Agent

    Returns:
        Header dict for httpx
    """
    headers = {"User-Agent": user_agent}
    if full:
        headers["Accept"] = HTML_ACCEPT
        headers["Accept-Language"] = ACCEPT_LANGUAGE
    return headers
