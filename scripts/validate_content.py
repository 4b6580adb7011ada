import logging
import sys

from app.exceptions import CorpusValidationError
from app.services.content_loader import load_corpus
from app.settings import settings

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

if __name__ == "__main__":
    content_dir = sys.argv[1] if len(sys.argv) > 1 else settings.CONTENT_DIR
    try:
        snapshot = load_corpus(content_dir)
        published = len(snapshot.published_posts())
        logger.info(
            f"Content OK: {len(snapshot)} posts ({published} published) in {content_dir}"
        )
    except CorpusValidationError as e:
        logger.error(f"Content validation failed: {e}")
        sys.exit(1)
