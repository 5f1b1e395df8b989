"""
Payment metadata fitting - keeps the checkout snapshot inside provider limits.

Some providers cap their metadata field (500 bytes by default). The full
payload is used when it fits; otherwise a minimized projection keeping the
scalar fields and compacted addon entries (id, slug, price). When even that
does not fit, the request must fail rather than send truncated data.
"""
import json
import logging
from typing import Optional

from ..config.settings import get_settings
from ..engine.models import PaymentMetadata
from ..errors import MetadataTooLargeError

logger = logging.getLogger(__name__)


def encode(payload: dict) -> str:
    """Compact JSON encoding, the form embedded in provider metadata."""
    return json.dumps(payload, separators=(',', ':'), ensure_ascii=False)


def encoded_size(payload: dict) -> int:
    """Size in bytes of the encoded payload (UTF-8)."""
    return len(encode(payload).encode('utf-8'))


def minimize(metadata: PaymentMetadata) -> dict:
    """Scalar fields plus compacted addon entries."""
    data = metadata.scalar_fields()
    data['addons'] = [
        {'id': line.id, 'slug': line.slug, 'price': line.price}
        for line in metadata.addons
    ]
    return data


def fit_metadata(metadata: PaymentMetadata, limit: Optional[int] = None) -> dict:
    """
    Return the largest metadata payload that fits the provider limit.

    Args:
        metadata: Full metadata built by the pricing engine
        limit: Byte limit; defaults to settings.metadata_byte_limit

    Returns:
        The full payload, or the minimized projection

    Raises:
        MetadataTooLargeError: if the minimized projection still exceeds the limit
    """
    if limit is None:
        limit = get_settings().metadata_byte_limit

    full = metadata.to_dict()
    full_size = encoded_size(full)
    if full_size <= limit:
        return full

    compact = minimize(metadata)
    compact_size = encoded_size(compact)
    if compact_size <= limit:
        logger.info(
            "Payment metadata is %d bytes (limit %d); sending minimized projection of %d bytes",
            full_size, limit, compact_size,
        )
        return compact

    logger.warning(
        "Payment metadata does not fit provider limit: minimized projection is %d bytes (limit %d)",
        compact_size, limit,
    )
    raise MetadataTooLargeError(size=compact_size, limit=limit)
