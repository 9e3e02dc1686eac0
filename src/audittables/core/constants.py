"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

# String field lengths
MAX_DESCRIPTION_LENGTH = 255
MAX_ENTITY_TYPE_LENGTH = 100
MAX_ENTITY_ID_LENGTH = 255
MAX_REQUEST_ID_LENGTH = 64
MAX_CHANGE_KIND_LENGTH = 16

# Pagination defaults
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Batch operations
MAX_BATCH_SIZE = 100

# Largest primary key a 32-bit INTEGER column can hold
MAX_ROW_ID = 2**31 - 1
