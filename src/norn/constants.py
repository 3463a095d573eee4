"""Network constants for the Norn SDK."""

# NORN has 12 decimal places
NORN_DECIMALS = 12
ONE_NORN = 10**NORN_DECIMALS

# Maximum u128 value (2^128 - 1)
MAX_U128 = (1 << 128) - 1

# Native token ID (32 zero bytes)
NATIVE_TOKEN_ID = bytes(32)

# Name registration fee (raw units)
NAME_REGISTRATION_FEE = ONE_NORN

# Loom registration defaults
DEFAULT_LOOM_MAX_PARTICIPANTS = 1000
DEFAULT_LOOM_MIN_PARTICIPANTS = 1

# Knot wire tags
KNOT_TYPE_TRANSFER = 0
KNOT_PAYLOAD_TRANSFER = 0

# SLIP-44 coin type ("NORN" in ASCII)
NORN_COIN_TYPE = 0x4E4F524E

# Chat event kinds
CHAT_KIND_PROFILE = 30000
CHAT_KIND_DM = 30001
CHAT_KIND_CHANNEL_CREATE = 30002
CHAT_KIND_CHANNEL_MESSAGE = 30003
