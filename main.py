import logging
import sys
import argparse

from tenacity import retry, stop_after_attempt, wait_fixed
from core.app_context import AppContext
from core.config_loader import load_config
from database.init_db import init_db

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@retry(stop=stop_after_attempt(5), wait=wait_fixed(2))
def initialize_database():
    """Create the vector extension and tables, waiting for the DB to come up."""
    logger.info("Initializing database...")
    init_db()


def run_backfill(ctx: AppContext, mode: str) -> int:
    """Re-embed records and return the number of failures."""
    results = []
    if mode in ('all', 'jobs'):
        results.extend(ctx.embedding_service.backfill_job_embeddings())
    if mode in ('all', 'freelancers'):
        results.extend(ctx.embedding_service.backfill_freelancer_embeddings())

    failures = [r for r in results if not r.success]
    for failure in failures:
        logger.warning(f"  {failure.entity_id}: {failure.error}")

    logger.info(f"Backfill finished: {len(results) - len(failures)}/{len(results)} records embedded")
    return len(failures)


def main():
    parser = argparse.ArgumentParser(description="Marketplace embedding maintenance")
    parser.add_argument('--mode', type=str, choices=['all', 'jobs', 'freelancers', 'init-db'], default='all',
                        help='all (default): backfill jobs and freelancers; jobs / freelancers: backfill one kind; '
                             'init-db: create the schema only')
    parser.add_argument('--config', type=str, default='config.yaml', help='Path to config.yaml')
    args = parser.parse_args()

    initialize_database()
    if args.mode == 'init-db':
        return 0

    config = load_config(args.config)
    ctx = AppContext.build(config)

    logger.info(f"Embedding backfill starting in {args.mode.upper()} mode...")
    failures = run_backfill(ctx, args.mode)
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
