"""Well-known schema property keys."""

from __future__ import annotations

# Default name of the field property holding the JSON path annotation.
JSONPATH_DEFAULT = "jsonpath"

# Date format property on timestamp fields.
FORMAT_PROPERTIES_KEY = "format"

# Time zone property on timestamp fields.
TIMEZONE_PROPERTIES_KEY = "timezone"

# Output scale property on decimal fields.
SCALEOUT_PROPERTIES_KEY = "scaleOut"
