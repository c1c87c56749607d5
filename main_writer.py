#!/usr/bin/env python3
"""
Blob Writer - Command Line Entry Point

Copies a local file to a target path through the blob writer: the bytes are
streamed to the loopback server and, if that fails, written by the chunked
fallback.

Usage:
    python main_writer.py SOURCE TARGET

Optional arguments:
    --directory NAME      Symbolic root (DOCUMENTS, DATA, LIBRARY, CACHE, EXTERNAL, EXTERNAL_STORAGE)
    --recursive           Create missing parent directories
    --root-base DIR       Base directory of the symbolic roots (default: ~/.blobwriter)
    --log-dir DIR         Append one line per streamed transfer to DIR/blob_transfers.log
    --chunk-size N        Fallback chunk size in bytes
    --verbose             Debug logging
"""

import argparse
import asyncio
import logging
import sys

from blobwriter.client.orchestrator import WriteOrchestrator, write_blob
from blobwriter.client.utils.config import ClientConfig
from blobwriter.client.utils.logger import logger
from blobwriter.common.blob import Blob
from blobwriter.common.constants import DEFAULT_ROOT_BASE
from blobwriter.common.errors import BlobWriterError, InvalidPathError
from blobwriter.common.protocol_definitions import Directory
from blobwriter.server.session import ServerSession
from blobwriter.server.utils.config import ServerConfig
from blobwriter.server.utils.logger import logger as server_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Blob Writer')
    parser.add_argument('source', help='Local file to copy')
    parser.add_argument('target', help='Target path (relative to --directory, absolute, or file:// URI)')
    parser.add_argument('--directory', type=str, default=None, choices=[d.value for d in Directory],
                        help='Symbolic root directory of the target')
    parser.add_argument('--recursive', action='store_true',
                        help='Create missing parent directories')
    parser.add_argument('--root-base', type=str, default=DEFAULT_ROOT_BASE,
                        help=f'Base directory of the symbolic roots (default: {DEFAULT_ROOT_BASE})')
    parser.add_argument('--log-dir', type=str, default=None,
                        help='Directory for the transfer log file')
    parser.add_argument('--chunk-size', type=int, default=None,
                        help='Fallback chunk size in bytes')
    parser.add_argument('--verbose', action='store_true',
                        help='Enable debug logging')
    return parser


async def run(args: argparse.Namespace) -> str:
    config = ClientConfig(root_base=args.root_base)
    config.update_fallback_settings(chunk_size=args.chunk_size)

    server_config = ServerConfig(log_dir=args.log_dir)

    async def acquire_session():
        return await ServerSession.acquire_async(server_config)

    orchestrator = WriteOrchestrator(config=config, session_provider=acquire_session)
    directory = Directory(args.directory) if args.directory else None

    return await write_blob(
        args.target,
        Blob.from_path(args.source),
        directory=directory,
        recursive=args.recursive,
        on_fallback=lambda error: logger.warning(f"Using fallback after: {error}"),
        orchestrator=orchestrator
    )


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        logger.set_level(logging.DEBUG)
        server_logger.set_level(logging.DEBUG)

    try:
        path = asyncio.run(run(args))
    except InvalidPathError as e:
        logger.error(str(e))
        return 2
    except (BlobWriterError, OSError, ValueError) as e:
        logger.error(f"Write failed: {e}")
        return 1

    print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
