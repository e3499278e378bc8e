# =============================================================================
# File: chatcache/infra/metrics/sync_metrics.py
# Description: Prometheus metrics for the conversation sync engine
# =============================================================================
# Metrics for:
#   - Event handling (count by kind/status, latency)
#   - Message log appends and skipped entries
#   - On-demand group metadata fetches
#   - Store command failures
# =============================================================================

from prometheus_client import Counter, Histogram

# =============================================================================
# Event Metrics
# =============================================================================

chatcache_sync_events_total = Counter(
    'chatcache_sync_events_total',
    'Total events handled by the sync engine',
    ['event_kind', 'status']  # success, error, invalid
)

chatcache_sync_event_latency_seconds = Histogram(
    'chatcache_sync_event_latency_seconds',
    'Time spent applying one event to the store',
    ['event_kind'],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0]
)

# =============================================================================
# Message Log Metrics
# =============================================================================

chatcache_messages_appended_total = Counter(
    'chatcache_messages_appended_total',
    'Total messages appended to conversation logs',
    ['event_kind']
)

chatcache_messages_skipped_total = Counter(
    'chatcache_messages_skipped_total',
    'Total incoming messages not appended',
    ['reason']  # undecryptable_stub, no_content, no_conversation, invalid
)

# =============================================================================
# Remote Fetch Metrics
# =============================================================================

chatcache_remote_fetch_total = Counter(
    'chatcache_remote_fetch_total',
    'Total on-demand group metadata fetches from the origin service',
    ['context', 'status']  # history/participant_update/read_fallback, success/failure/empty
)

# =============================================================================
# Store Metrics
# =============================================================================

chatcache_store_failures_total = Counter(
    'chatcache_store_failures_total',
    'Total store commands that failed',
    ['command']
)

chatcache_store_slow_commands_total = Counter(
    'chatcache_store_slow_commands_total',
    'Total store commands slower than the configured threshold',
    ['command']
)
