"""
Visitor classification for portfolio analytics: referrer source and device type
"""

import logging
import re
from typing import Optional
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

SEARCH_ENGINES = {
    "google.com": "Google",
    "bing.com": "Bing",
    "yahoo.com": "Yahoo",
    "duckduckgo.com": "DuckDuckGo",
}

SOCIAL_MEDIA = {
    "facebook.com": "Facebook",
    "twitter.com": "Twitter",
    "instagram.com": "Instagram",
    "linkedin.com": "LinkedIn",
    "pinterest.com": "Pinterest",
    "youtube.com": "YouTube",
    "reddit.com": "Reddit",
    "github.com": "GitHub",
    "gitlab.com": "GitLab",
    "stackoverflow.com": "Stack Overflow",
    "medium.com": "Medium",
    "t.me": "Telegram",
    "t.co": "Twitter",
    "m.facebook.com": "Facebook",
    "x.com": "Twitter",
    "l.facebook.com": "Facebook",
}

MOBILE_PATTERN = re.compile(r"Mobile|Android|iPhone|iPad|iPod|Windows Phone", re.IGNORECASE)

DIRECT = {"type": "direct", "source": "direct", "url": None}


def get_device_type(user_agent: Optional[str]) -> str:
    if not user_agent:
        return "Unknown"
    return "Mobile" if MOBILE_PATTERN.search(user_agent) else "PC"


def get_referrer_data(referrer_url: Optional[str], host: str) -> dict:
    """
    Classify where a visit came from.

    Returns {"type", "source", "url"} with type one of
    direct, internal, search, social or external.
    Domain tables match on substring, search engines first.
    """
    if not referrer_url:
        return dict(DIRECT)

    try:
        parsed = urlparse(referrer_url)
    except ValueError as e:
        logger.debug(f"Unparseable referrer {referrer_url!r}: {e}")
        return dict(DIRECT)

    hostname = parsed.hostname
    if not parsed.scheme or not hostname:
        return dict(DIRECT)

    # Host header may carry a port
    if hostname == (host or "").split(":")[0].lower():
        return {"type": "internal", "source": host, "url": referrer_url}

    for domain, name in SEARCH_ENGINES.items():
        if domain in hostname:
            return {"type": "search", "source": name, "url": referrer_url}

    for domain, name in SOCIAL_MEDIA.items():
        if domain in hostname:
            return {"type": "social", "source": name, "url": referrer_url}

    return {"type": "external", "source": hostname, "url": referrer_url}
