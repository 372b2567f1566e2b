"""
End-to-end example: signing and verifying a cachet

This script demonstrates:
- Issuing a root -> leaf trust chain
- Signing a payload with the leaf key
- Verifying the serialized cachet against the trusted root
- Rejecting a tampered copy

All steps are documented inline.
"""

from cachet.envelope import sign_cachet
from cachet.signers import FileSigner
from cachet.trustchain import RootKeyStore, TrustChain
from cachet.verify import verify_cachet

# 1. Create root and leaf signers (Ed25519, deterministic seeds for demo)
root = FileSigner("AAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA")  # 32 zero bytes, base64url
leaf = FileSigner("AQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQE")  # 32 0x01 bytes, base64url

# 2. The root vouches for the leaf
chain = TrustChain.issue(root, leaf.public_key)
print("Chain:", chain.root_key, "->", chain.leaf_public_key())

# 3. Sign a payload and serialize it
blob = sign_cachet(b"test data", chain, leaf).to_bytes()
print("Cachet bytes:", blob.hex())

# 4. Verifiers are configured with the root key only
roots = RootKeyStore.of(root.public_key)

# 5. Verify the cachet
cachet, reason = verify_cachet(blob, roots)
print("Verification:", cachet is not None, reason, cachet.data if cachet else None)

# 6. Tamper with the payload and verify again
tampered = blob[:-1] + bytes([blob[-1] ^ 0x01])
cachet, reason = verify_cachet(tampered, roots)
print("Tampered verification:", cachet is not None, reason)
