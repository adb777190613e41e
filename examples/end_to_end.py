"""
End-to-end example: signing data as a DID and verifying it

This script demonstrates:
- Deriving a key pair from a BIP32 seed and publishing the xpub in a DID Document
- Signing structured data with a child key
- Verifying the signature through a resolver
- Seeing verification fail for different data
"""

import asyncio

from bip_utils import Bip32Slip10Secp256k1

from idm_signatures import create_signer, create_verifier, static_resolver

DID = "did:example:123"
DID_URL = f"{DID}#key-1"


async def main() -> None:
    # 1. Master key (deterministic seed for demo)
    master = Bip32Slip10Secp256k1.FromSeed(bytes(32))

    # 2. DID Document advertising the extended public key
    did_document = {
        "id": DID,
        "publicKey": [{"id": DID_URL, "publicExtendedKeyBase58": master.PublicKey().ToExtended()}],
    }

    # 3. Sign with the child key at m/0/1 (derived from the xprv by the signer)
    sign = create_signer(DID_URL, master.PrivateKey().ToExtended(), "m/0/1")
    signature = await sign({"user": "alice", "amount": 42})
    print("Signature:", signature.to_dict())

    # 4. Verify via a resolver
    verify = create_verifier(static_resolver({DID: did_document}))
    result = await verify({"user": "alice", "amount": 42}, signature)
    print("Verification:", result.valid)

    # 5. Tampered data
    result = await verify({"user": "alice", "amount": 43}, signature)
    print("Tampered verification:", result.valid, result.error)


if __name__ == "__main__":
    asyncio.run(main())
