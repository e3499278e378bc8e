from chatcache.sync.ports.group_metadata_port import GroupMetadataPort, fetch_group_metadata_best_effort
from chatcache.sync.ports.list_store_port import KeyValueListStore

__all__ = [
    "GroupMetadataPort",
    "KeyValueListStore",
    "fetch_group_metadata_best_effort",
]
