from __future__ import annotations

import pytest
from cachet.signers import FileSigner
from cachet.trustchain import RootKeyStore, TrustChain
from cachet.utils import b64u_encode


def seed_for(n: int) -> str:
    return b64u_encode(bytes([n]) * 32)


ROOT_SEED = seed_for(0)
LEAF_SEED = seed_for(1)


@pytest.fixture
def root_signer() -> FileSigner:
    return FileSigner(ROOT_SEED)


@pytest.fixture
def leaf_signer() -> FileSigner:
    return FileSigner(LEAF_SEED)


@pytest.fixture
def chain(root_signer: FileSigner, leaf_signer: FileSigner) -> TrustChain:
    return TrustChain.issue(root_signer, leaf_signer.public_key)


@pytest.fixture
def root_keys(root_signer: FileSigner) -> RootKeyStore:
    return RootKeyStore.of(root_signer.public_key)
