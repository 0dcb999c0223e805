"""Fixed dimensions of the trie proof core.

These are build-time parameters: every table and every loop in the core is
sized from them, so they are not read from the environment.
"""

# Longest RLP length-of-length accepted (payloads stay below 2**16 bytes)
MAX_LEN_IN_BYTES = 2

# Fields in the largest trie node (branch: 16 children + value)
MAX_NUM_FIELDS = 17

# Number of fields of a branch / extension-or-leaf node
BRANCH_NUM_FIELDS = 17
EXT_OR_LEAF_NUM_FIELDS = 2

HASH_LENGTH = 32
HASH_NIBBLE_LENGTH = 2 * HASH_LENGTH

# Longest state or storage trie node (branch of 16 hashes: 3 + 16 * 33 + 1)
MAX_TRIE_NODE_LENGTH = 532

# Largest storage slot value
MAX_STORAGE_VALUE_LENGTH = 32

# Largest RLP-encoded account state [nonce, balance, storageRoot, codeHash]
MAX_ACCOUNT_STATE_LENGTH = 134

STORAGE_KEY_LENGTH = 32
ACCOUNT_KEY_LENGTH = 20

# RLP prefix boundaries
RLP_SHORT_STRING = 0x80
RLP_LONG_STRING = 0xB7
RLP_SHORT_LIST = 0xC0
RLP_LONG_LIST = 0xF7
