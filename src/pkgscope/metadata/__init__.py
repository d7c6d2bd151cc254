"""Package metadata model: version ranges, conditions, targets and condition trees."""
