from __future__ import annotations

CLIENT_NAME = "sui-gql"
DEFAULT_ENDPOINT = "https://sui-mainnet.mystenlabs.com/graphql"

# Pagination
# Used only when neither the config nor the server's serviceConfig provides a size.
FALLBACK_PAGE_SIZE = 50

# GraphQL typenames of the DynamicFieldValue union
MOVE_VALUE = "MoveValue"
MOVE_OBJECT = "MoveObject"

# UInt53 scalar upper bound (object versions)
MAX_UINT53 = 2**53 - 1

# Logging frequency
LOG_EVERY_N_PAGES = 25

# Slow responses get a warn event
SLOW_RESPONSE_MS = 5000
