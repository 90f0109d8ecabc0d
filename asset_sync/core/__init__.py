"""
Core synchronization engine.

The `SyncManager` acts as the high-level run coordinator: it fetches the
manifest, asks the `DeltaPlanner` what to fetch, hands the targets to the
`DownloadScheduler`, and persists the hash cache once the batch succeeds.
"""
