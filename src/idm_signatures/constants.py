DEFAULT_KEY_PATH = "m"

# Key algorithm descriptor accepted by the signer
EC_PUBLIC_KEY_ID = "ec-public-key"
SECP256K1_CURVE = "secp256k1"
SECP256K1_ORDER = int("FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141", 16)

# BIP32
HARDENED_OFFSET = 0x80000000
EXTENDED_PRIVATE_KEY_PREFIXES = ("xprv",)
