"""Sync-protocol file stats and transfer progress streams."""