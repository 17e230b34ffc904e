"""python -m zkkeys [out_dir]: transfer_pk.bin, reclaim_pk.bin 및 vk manifest 생성."""

import argparse
import logging
import sys

from zkkeys.errors import KeyGenerationError
from zkkeys.pipeline import write_zkp_keys

logger = logging.getLogger("zkkeys")


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="zkkeys",
        description="Deterministically generate the transfer and reclaim Groth16 keys.",
    )
    parser.add_argument("out_dir", nargs="?", default=".", help="output directory")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    try:
        write_zkp_keys(args.out_dir)
    except KeyGenerationError as exc:
        logger.error("key generation failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
