"""Build recovery timelines from window descriptors and keep per-cluster snapshots.

The descriptor fetched from the backup subsystem is the only stored state.  A
timeline is never cached: it is rebuilt from the current snapshot on every read,
so a new descriptor replaces the old view in one write.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from app.deps import get_app_state, get_cache, get_merge_tolerance_ms
from app.schemas.common import PitrWindowDescriptor
from app.utils.payloads import instant_to_payload
from app.utils.tracing import traced_span
from core.pitr.status import window_span_label, window_status
from core.pitr.timeline import Timeline, build_timeline, timeline_to_raw

logger = logging.getLogger(__name__)

SNAPSHOT_KIND = "window"


def timeline_for(descriptor: PitrWindowDescriptor) -> Timeline:
    """Merge the descriptor's intervals, falling back to its earliest/latest pair."""
    return build_timeline(
        descriptor.intervals,
        descriptor.earliest_pitr_time,
        descriptor.latest_pitr_time,
        tolerance_ms=get_merge_tolerance_ms(),
    )


def describe_window(descriptor: PitrWindowDescriptor) -> Dict:
    """Return the merged timeline plus the descriptor's informational fields."""
    with traced_span("pitr.describe_window", intervals=len(descriptor.intervals)):
        timeline = timeline_for(descriptor)
        return {
            "available": descriptor.available,
            "status": descriptor.status,
            "unavailable_reason": descriptor.unavailable_reason,
            "timeline_status": window_status(timeline),
            "earliest": instant_to_payload(timeline.earliest),
            "latest": instant_to_payload(timeline.latest),
            "span_label": window_span_label(timeline),
            "intervals": timeline_to_raw(timeline),
        }


def store_window(cluster_id: str, descriptor: PitrWindowDescriptor) -> None:
    """Replace the stored descriptor snapshot for ``cluster_id``."""
    cache = get_cache()
    payload = descriptor.model_dump(by_alias=True)
    cache.set(cache.key(SNAPSHOT_KIND, cluster_id), payload, ex=get_app_state().snapshot_ttl_seconds)
    logger.info("Stored PITR window snapshot for cluster %s (%d intervals)", cluster_id, len(descriptor.intervals))


def load_window(cluster_id: str) -> Optional[PitrWindowDescriptor]:
    cache = get_cache()
    payload = cache.get(cache.key(SNAPSHOT_KIND, cluster_id))
    if payload is None:
        return None
    return PitrWindowDescriptor.model_validate(payload)


def drop_window(cluster_id: str) -> None:
    """Forget the stored snapshot; later reads report no window."""
    cache = get_cache()
    cache.delete(cache.key(SNAPSHOT_KIND, cluster_id))
    logger.info("Dropped PITR window snapshot for cluster %s", cluster_id)
