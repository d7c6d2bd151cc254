"""Package resolution: dependency aggregation, file discovery and assembly."""
