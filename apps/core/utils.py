"""
Utility functions shared by the Storefront apps
"""
import math
import re
from datetime import timedelta
from typing import Any, Dict, Optional, Tuple

from django.utils.text import slugify

_DURATION_RE = re.compile(r'^\s*(\d+)\s*([smhd]?)\s*$')
_DURATION_UNITS = {
    '': 'seconds',
    's': 'seconds',
    'm': 'minutes',
    'h': 'hours',
    'd': 'days',
}


def parse_duration(value: str) -> timedelta:
    """
    Parse a compact duration such as '15m', '7d' or '3600' into a timedelta.
    """
    match = _DURATION_RE.match(str(value))
    if not match:
        raise ValueError(f"Invalid duration '{value}'")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: int(amount)})


def format_response(message: str, data: Optional[Dict] = None, meta: Optional[Dict] = None) -> Dict:
    """
    Format a successful API payload into the standard envelope.
    """
    payload = {"success": True, "message": message}
    if data is not None:
        payload["data"] = data
    if meta is not None:
        payload["meta"] = meta
    return payload


def paginate(queryset, page: int, limit: int) -> Tuple[Any, Dict]:
    """
    Slice a queryset for the requested page and build the pagination meta block.
    """
    total = queryset.count()
    offset = (page - 1) * limit
    total_pages = math.ceil(total / limit) if limit else 0

    meta = {
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": total_pages,
        "has_next": page < total_pages,
        "has_prev": page > 1,
    }
    return queryset[offset:offset + limit], meta


def round_rating(value) -> float:
    """Round an average rating to one decimal place, treating None as 0."""
    if not value:
        return 0.0
    return round(float(value), 1)


def unique_slug(model, value: str, field: str = 'slug') -> str:
    """
    Build a slug that does not collide with existing rows: name, name-1, name-2, ...
    """
    base_slug = slugify(value) or 'item'
    slug = base_slug
    counter = 1
    while model.objects.filter(**{field: slug}).exists():
        slug = f"{base_slug}-{counter}"
        counter += 1
    return slug


def client_ip(request) -> Optional[str]:
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')
