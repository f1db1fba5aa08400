"""Copy the active dialect's schema files into place.

Each supported database keeps its schema under ``<source>/<database type>``.
Before migrations run, that directory is copied over the destination
(``prisma`` by default), replacing whatever was there.

Usage:
    statsdb-copy-schema
    statsdb-copy-schema --database-type mysql --source db --destination prisma
"""

import argparse
import shutil
import sys
from pathlib import Path
from typing import List, Optional, Union

from statsdb.common.exceptions import (
    ErrorCode,
    StatsDBError,
    configuration_error,
    resource_not_found_error,
)
from statsdb.constants import SUPPORTED_DATABASE_TYPES
from statsdb.dialect import get_database_type
from statsdb.logging import get_logger, setup_logging
from statsdb.settings import DatabaseSettings, get_settings

logger = get_logger(__name__)

PathLike = Union[str, Path]


def copy_schema_files(
    settings: Optional[DatabaseSettings] = None,
    database_type: Optional[str] = None,
    source_root: Optional[PathLike] = None,
    destination: Optional[PathLike] = None,
) -> Path:
    """Replace ``destination`` with the schema directory of the active dialect.

    Args:
        settings: Settings supplying URL, override and default directories
        database_type: Explicit dialect, overriding settings
        source_root: Directory holding one sub-directory per dialect
        destination: Directory to replace

    Returns:
        The destination path

    Raises:
        StatsDBError: CONFIG_INVALID if no supported dialect is configured,
            FILE_NOT_FOUND if the dialect's schema directory does not exist
    """
    settings = settings or get_settings()
    db_type = get_database_type(settings.database_url, database_type or settings.database_type)

    if db_type not in SUPPORTED_DATABASE_TYPES:
        raise configuration_error(
            "Missing or invalid database",
            config_key="DATABASE_URL",
            error_code=ErrorCode.CONFIG_INVALID,
            details={"database_type": db_type},
        )

    logger.info("Database type detected", extra={"database_type": db_type})

    source = Path(source_root or settings.schema_source_dir) / db_type
    target = Path(destination or settings.schema_destination_dir)

    if not source.is_dir():
        raise resource_not_found_error(
            f"Schema directory not found: {source}",
            resource_type="directory",
            resource_name=str(source),
            error_code=ErrorCode.FILE_NOT_FOUND,
        )

    if target.exists():
        shutil.rmtree(target)
        logger.info("Deleted existing schema files", extra={"destination": str(target)})

    shutil.copytree(source, target)
    logger.info("Copied schema files", extra={"source": str(source), "destination": str(target)})

    return target


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="statsdb-copy-schema",
        description="Copy the schema files of the configured database into place.",
    )
    parser.add_argument("--database-type", help="Dialect to use instead of DATABASE_URL/DATABASE_TYPE")
    parser.add_argument("--source", help="Directory holding one schema directory per dialect")
    parser.add_argument("--destination", help="Directory to replace with the schema files")
    parser.add_argument("--log-level", default=None, help="Log level (defaults to LOG_LEVEL)")
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(args.log_level or settings.log_level, log_query=settings.log_query or None)

    try:
        target = copy_schema_files(
            settings,
            database_type=args.database_type,
            source_root=args.source,
            destination=args.destination,
        )
    except StatsDBError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    print(f"Schema files copied to {target}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
