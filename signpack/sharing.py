"""
sharing.py — Share-link codec for settings.

A share string is base64( percent-escaped( compact JSON ) ), the same bytes a
browser produces with btoa(encodeURIComponent(JSON.stringify(settings))), so
links made by the web tool and by this package are interchangeable.

Usage:
  link = share_link(settings)                 # …/TrackmaniaSignpacks/?preset=JTdCJTIy…
  raw  = settings_from_link(link)             # dict, or None when unreadable
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any, Dict, Optional, Union
from urllib.parse import parse_qsl, quote, unquote, urlencode, urlsplit, urlunsplit

from .config import SHARE_BASE_URL
from .settings import Settings

logger = logging.getLogger(__name__)

SHARE_PARAM = "preset"

# characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_settings(settings: Union[Settings, Dict[str, Any]]) -> str:
    data = settings.to_json_dict() if isinstance(settings, Settings) else settings
    compact = json.dumps(data, separators=(",", ":"), ensure_ascii=False)
    escaped = quote(compact, safe=_URI_COMPONENT_SAFE)
    return base64.b64encode(escaped.encode("ascii")).decode("ascii")


def decode_settings(encoded: str) -> Optional[Dict[str, Any]]:
    """Inverse of encode_settings; None (and a logged error) for bad input."""
    try:
        escaped = base64.b64decode(encoded, validate=True).decode("ascii")
        data = json.loads(unquote(escaped, errors="strict"))
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        logger.error(f"Failed to decompress settings: {e}")
        return None
    if not isinstance(data, dict):
        logger.error("Failed to decompress settings: not a settings object")
        return None
    return data


def share_link(settings: Union[Settings, Dict[str, Any]], base_url: str = SHARE_BASE_URL) -> str:
    """*base_url* with its `preset` query parameter set to the encoded settings."""
    parts = urlsplit(base_url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != SHARE_PARAM]
    query.append((SHARE_PARAM, encode_settings(settings)))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


def settings_from_link(url: str) -> Optional[Dict[str, Any]]:
    """Settings dict carried by a share link, or None when it has none."""
    params = dict(parse_qsl(urlsplit(url).query, keep_blank_values=True))
    encoded = params.get(SHARE_PARAM)
    if not encoded:
        return None
    return decode_settings(encoded)
