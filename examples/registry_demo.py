# examples/registry_demo.py
# Run with: python examples/registry_demo.py
#
# Registers a star with a real testnet signature, then tampers with the chain
# to show what validation reports.

from starnotary import Blockchain, ChainCorruptedError
from starnotary.config import Settings

ADDRESS = "mgzVFHzy8myTdLExhdC87Ld9zuLwPnY3d9"
SIGNATURE = "INmVXTHWctLjQElqLVNT06B/7BU8vaynpXXcyvwM4/bmclTdniY5j6CwmEdl3qdYZKKFz6KYPTs8KASfAsBSvFw="
SIGNED_AT = 1647104846  # the signature above covers the message issued at this time


if __name__ == "__main__":
    chain = Blockchain(clock=lambda: SIGNED_AT, settings=Settings(network="testnet"))

    message = chain.request_ownership_message(ADDRESS)
    print(f"Message to sign: {message}")

    star = {"dec": "68° 52' 56.9", "ra": "16h 29m 1.0s", "story": "Testing star"}
    for _ in range(3):
        block = chain.submit_star(ADDRESS, message, SIGNATURE, star)
        print(f"Registered at height {block.height}: {block.hash}")

    print(f"Stars owned by {ADDRESS}: {len(chain.get_stars_by_address(ADDRESS))}")
    print(chain.verify())

    print("\nTampering with block 2 timestamp...")
    chain.chain[2].timestamp += 1
    print(chain.verify())

    try:
        chain.submit_star(ADDRESS, message, SIGNATURE, star)
    except ChainCorruptedError as e:
        print(f"Append refused: {e}")
