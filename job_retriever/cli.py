"""
Command-line entry point.

Prints exactly one JobData JSON document on stdout, even on failure; logs go
to stderr. Exits 1 when nothing usable was extracted.

    job-retriever --job-url https://example.com/jobs/123
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv

from job_retriever.core.config import TRANSPORT_CDP, TRANSPORT_GATEWAY, ConfigError, RetrieverConfig
from job_retriever.pipeline.retriever import JobRetriever
from job_retriever.pipeline.schema import JobData, minimal_job_data

logger = logging.getLogger(__name__)


def emit(data: JobData):
    print(json.dumps(data.model_dump(mode="json"), indent=2, ensure_ascii=False))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Retrieve and normalize a job posting")
    parser.add_argument("--job-url", help="Job posting URL (defaults to JOB_URL)")
    parser.add_argument(
        "--transport",
        choices=[TRANSPORT_CDP, TRANSPORT_GATEWAY],
        help="Browser transport (defaults to RETRIEVER_TRANSPORT or cdp)",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (defaults to LOG_LEVEL or INFO)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    level = (args.log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    config = RetrieverConfig.from_env(job_url=args.job_url)
    if args.transport:
        config.transport = args.transport

    try:
        config.validate()
    except ConfigError as e:
        logger.error(f"[cli] {e}")
        emit(minimal_job_data(config.job_url, [str(e)], agent=config.agent))
        return 1

    try:
        result = asyncio.run(JobRetriever(config).retrieve())
    except Exception as e:
        logger.error(f"[cli] Critical error: {e}", exc_info=True)
        emit(minimal_job_data(config.job_url, [f"Critical error: {e}"], agent=config.agent))
        return 1

    emit(result)
    if not result.job.title and result.metadata.notes:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
