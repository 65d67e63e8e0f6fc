# tests/test_chain.py
import threading

import pytest

from starnotary.chain.blockchain import Blockchain, ChainState
from starnotary.config import Settings
from starnotary.core.block import Block
from starnotary.core.payload import DataPayload
from starnotary.errors import ChainCorruptedError, GenesisAccessError

NOW = 1647104846


@pytest.fixture
def chain():
    return Blockchain(verifier=lambda *_: True, clock=lambda: NOW, settings=Settings())


def test_genesis_initialized(chain):
    assert chain.initialized is True
    assert chain.state is ChainState.READY
    assert chain.height == 0
    assert chain.get_chain_height() == 0
    assert len(chain.chain) == 1

    genesis = chain.get_block_by_height(0)
    assert genesis.height == 0
    assert genesis.previous_hash is None
    assert genesis.timestamp == NOW
    assert genesis.validate() is True


def test_genesis_payload_hidden(chain):
    with pytest.raises(GenesisAccessError):
        chain.get_block_by_height(0).get_decoded_payload()


def test_initialize_chain_is_idempotent(chain):
    chain.initialize_chain()
    assert chain.height == 0
    assert len(chain.chain) == 1


def test_add_block_links_to_previous(chain):
    genesis = chain.get_block_by_height(0)
    block = chain._add_block(Block({"n": 1}))

    assert block.height == 1
    assert block.previous_hash == genesis.hash
    assert block.timestamp == NOW
    assert block.validate() is True
    assert chain.height == 1
    assert chain.get_last_hash() == block.hash


def test_heights_match_positions(chain):
    for i in range(5):
        chain._add_block(Block({"n": i}))
    for i, block in enumerate(chain.get_chain()):
        assert block.height == i
    assert chain.height == len(chain.chain) - 1


def test_timestamp_truncated_to_seconds():
    chain = Blockchain(verifier=lambda *_: True, clock=lambda: NOW + 0.987, settings=Settings())
    assert chain.get_block_by_height(0).timestamp == NOW


def test_get_block_by_hash(chain):
    block = chain._add_block(Block({"n": 1}))
    assert chain.get_block_by_hash(block.hash) is block
    assert chain.get_block_by_hash("nonexistent") is None


def test_get_block_by_height_out_of_range(chain):
    assert chain.get_block_by_height(1) is None
    assert chain.get_block_by_height(-1) is None


def test_get_chain_returns_copy(chain):
    snapshot = chain.get_chain()
    snapshot.append(Block({"fake": True}))
    assert len(chain.chain) == 1


def test_untouched_chain_validates(chain):
    for i in range(3):
        chain._add_block(Block({"n": i}))
    assert chain.validate_chain() == []
    assert chain.verify().is_valid


def test_tampered_timestamp_flags_block_and_successor(chain):
    for i in range(3):
        chain._add_block(Block({"n": i}))

    chain.chain[2].timestamp = NOW + 1
    assert chain.validate_chain() == ["block 2 is invalid", "block 3 is invalid"]


def test_tampered_last_block_flags_only_itself(chain):
    for i in range(3):
        chain._add_block(Block({"n": i}))

    chain.chain[3].body = Block({"n": 99}).body
    assert chain.validate_chain() == ["block 3 is invalid"]


def test_rehashed_tamper_still_breaks_link(chain):
    for i in range(3):
        chain._add_block(Block({"n": i}))

    # attacker fixes up the tampered block's own hash
    chain.chain[1].body = Block({"n": 99}).body
    chain.chain[1].compute_digest(persist=True)
    assert chain.validate_chain() == ["block 2 is invalid"]


def test_tampered_genesis(chain):
    chain._add_block(Block({"n": 1}))
    chain.chain[0].timestamp = 0
    assert chain.validate_chain() == ["block 0 is invalid", "block 1 is invalid"]


def test_append_refused_on_corrupted_chain(chain):
    chain._add_block(Block({"n": 1}))
    chain._add_block(Block({"n": 2}))
    chain.chain[1].timestamp = 0

    pending = Block({"n": 3})
    with pytest.raises(ChainCorruptedError) as exc_info:
        chain._add_block(pending)

    assert exc_info.value.error == "block 1 is invalid"
    assert "chain invalid" in str(exc_info.value)
    assert chain.height == 2
    assert len(chain.chain) == 3
    assert pending.hash is None
    assert pending.timestamp is None


def test_data_block_decodes(chain):
    block = chain._add_block(Block({"data": ["dummy data"]}))
    assert chain.get_block_by_hash(block.hash).get_decoded_payload() == DataPayload({"data": ["dummy data"]})


def test_concurrent_appends_keep_heights_unique(chain):
    n_threads = 8
    per_thread = 10
    barrier = threading.Barrier(n_threads)

    def worker(tid):
        barrier.wait()
        for i in range(per_thread):
            chain._add_block(Block({"t": tid, "i": i}))

    threads = [threading.Thread(target=worker, args=(t,)) for t in range(n_threads)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    blocks = chain.get_chain()
    assert len(blocks) == 1 + n_threads * per_thread
    assert [b.height for b in blocks] == list(range(len(blocks)))
    assert chain.height == len(blocks) - 1
    assert chain.validate_chain() == []
