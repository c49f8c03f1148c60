#!/usr/bin/env python
"""Manage S3 Vectors indexes from the command line.

Usage:
    python -m scripts.manage_indexes create --index docs --dimension 1024
    python -m scripts.manage_indexes describe --index docs
    python -m scripts.manage_indexes delete --index docs
    python -m scripts.manage_indexes list

Connection settings come from S3VECTORS_* environment variables; the bucket
can be overridden with --bucket.
"""

import argparse
import asyncio
import json
import sys

from s3vector.exceptions import VectorStoreError
from s3vector.logging_config import get_logger, setup_logging
from s3vector.vectorstore.models import DistanceMetric
from s3vector.vectorstore.service import S3VectorStore, VectorStore

logger = get_logger(__name__)


async def run_command(args: argparse.Namespace, store: VectorStore) -> int:
    """Run one index command against ``store``.

    Returns:
        Process exit code.
    """
    try:
        if args.command == "create":
            await store.create_index(args.index, args.dimension, args.metric)
            print(f"Created index {args.index}")
        elif args.command == "describe":
            stats = await store.describe_index(args.index)
            print(json.dumps(stats.model_dump(mode="json"), indent=2))
        elif args.command == "delete":
            await store.delete_index(args.index)
            print(f"Deleted index {args.index}")
        elif args.command == "list":
            for name in await store.list_indexes():
                print(name)
    except VectorStoreError as e:
        print(f"ERROR [{e.code.value}]: {e.message}", file=sys.stderr)
        return 1
    finally:
        await store.disconnect()

    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Manage S3 Vectors indexes",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--bucket",
        default=None,
        help="Vector bucket name (default from S3VECTORS_VECTOR_BUCKET_NAME)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    create = subparsers.add_parser("create", help="Create an index")
    create.add_argument("--index", required=True, help="Index name")
    create.add_argument(
        "--dimension",
        type=int,
        required=True,
        help="Vector dimension",
    )
    create.add_argument(
        "--metric",
        choices=[m.value for m in DistanceMetric],
        default=DistanceMetric.COSINE.value,
        help="Distance metric",
    )

    for name, help_text in (
        ("describe", "Describe an index"),
        ("delete", "Delete an index"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--index", required=True, help="Index name")

    subparsers.add_parser("list", help="List indexes in the bucket")
    return parser


def main() -> None:
    """Main entry point."""
    args = build_parser().parse_args()
    setup_logging()

    try:
        store = S3VectorStore(vector_bucket_name=args.bucket)
    except VectorStoreError as e:
        logger.error(e.message, extra=e.to_dict())
        sys.exit(2)

    sys.exit(asyncio.run(run_command(args, store)))


if __name__ == "__main__":
    main()
