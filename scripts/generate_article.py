#!/usr/bin/env python3
"""Draft an article from a social-media URL on the command line.

Prints the generated draft as JSON. With --save the draft is stored in the
articles table (unpublished unless --publish is given).
"""
import argparse
import json
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from omninews.database import SessionLocal, engine, Base
from omninews.schemas import ArticleCreate
from omninews.services.articles import create_article
from omninews.services.generator import GeneratorError, generate_article
from omninews.utils.logger import configure_logging, setup_script_logger
from omninews.utils.text import is_social_url

configure_logging()
logger = setup_script_logger("generate_article")


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate a news article draft from a TikTok/Instagram URL")
    parser.add_argument("url", help="Source social-media URL")
    parser.add_argument("--save", action="store_true", help="Store the draft in the database")
    parser.add_argument("--publish", action="store_true", help="Publish the stored article (implies --save)")
    parser.add_argument("--breaking", action="store_true", help="Mark the stored article as breaking news")
    args = parser.parse_args()

    platforms = is_social_url(args.url)
    if not (platforms["is_tiktok"] or platforms["is_instagram"]):
        logger.warning(f"{args.url} is not a TikTok or Instagram link; drafting anyway")

    try:
        draft = generate_article(args.url)
    except GeneratorError as e:
        logger.error(f"Generation failed ({e.status_code}): {e.message}")
        return 1

    print(json.dumps(draft.model_dump(), ensure_ascii=False, indent=2))

    if not (args.save or args.publish):
        return 0

    if not draft.title.strip() or not draft.content.strip():
        logger.error("Draft has no title or content; not saving")
        return 1

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        article = create_article(db, ArticleCreate(
            title=draft.title,
            content=draft.content,
            category=draft.category,
            source_url=args.url,
            thumbnail_url=draft.thumbnailUrl,
            is_published=args.publish,
            is_breaking=args.breaking,
        ))
        logger.info(f"Saved article {article.id} ({'published' if article.is_published else 'draft'})")
    except Exception as e:
        logger.error(f"Error saving article: {e}")
        return 1
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
