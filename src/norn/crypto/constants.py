"""Cryptographic constants for the Norn SDK."""

# BLAKE3 digest size
HASH_SIZE = 32

# Ed25519 sizes
ED25519_PRIVATE_KEY_SIZE = 32
ED25519_PUBLIC_KEY_SIZE = 32
ED25519_SIGNATURE_SIZE = 64

# Address is the last 20 bytes of BLAKE3(public_key)
ADDRESS_SIZE = 20
ADDRESS_OFFSET = HASH_SIZE - ADDRESS_SIZE

# X25519 key size
X25519_KEY_SIZE = 32

# XChaCha20-Poly1305 constants
XCHACHA_KEY_SIZE = 32
XCHACHA_NONCE_SIZE = 24
XCHACHA_TAG_SIZE = 16

# BLAKE3 derive-key contexts
KDF_CONTEXT_X25519 = "norn-ed25519-to-x25519"
KDF_CONTEXT_ENCRYPTION = "norn-encryption-key"
KDF_CONTEXT_CHAT_DM = "norn-chat-dm"

# Sparse Merkle tree depth (256 bits = 32-byte key space)
TREE_DEPTH = 256
