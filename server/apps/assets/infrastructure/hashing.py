"""Content hashing for sections."""

import hashlib
from collections.abc import Iterable


def generate_hash(texts: Iterable[str]) -> str:
    """Calculate MD5 digest over a sequence of texts.

    Each text is fed to the digest separately, in order.

    Args:
        texts: Texts to hash.

    Returns:
        Hex-encoded MD5 hash string.
    """
    md5_hash = hashlib.md5(usedforsecurity=False)
    for text in texts:
        md5_hash.update(text.encode('utf-8'))
    return md5_hash.hexdigest()


def section_hash(origin_text: str, desc: str) -> str:
    """Derive the content hash identifying a section.

    Args:
        origin_text: Original text of the section.
        desc: Section description.

    Returns:
        Hex-encoded MD5 of origin text followed by description.
    """
    return generate_hash([origin_text, desc])
