from uuid import uuid4
from slugify import slugify

def make_slug(text: str, max_length: int = 120) -> str:
    """URL-safe slug with transliteration (Arabic and other scripts become ASCII)"""
    slug = slugify(text or "", max_length=max_length, word_boundary=True)
    if not slug:
        slug = uuid4().hex[:12]
    return slug
