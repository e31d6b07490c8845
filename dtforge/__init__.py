"""dtforge - device-tree repository reconciliation service."""
