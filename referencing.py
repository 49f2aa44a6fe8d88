"""Courses that point at a standalone author by id.

Authors live in their own collection. Listing courses resolves each stored
id with a second lookup and keeps only the author's name; an id with no
matching author resolves to ``None``.
"""
import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo.database import Database

from database import (
    create_document,
    delete_document,
    get_document_by_id,
    open_database,
    to_object_id,
)
from logging_config import configure_logging
from schemas import Author, AuthorDocument, AuthorName, PopulatedCourse, ReferencedCourse, ReferencedCourseDocument

logger = logging.getLogger(__name__)

AUTHORS = "author"
COURSES = "course"


def _reference(author_id: Optional[str]) -> Any:
    # Stored unchecked; only well-formed ids become ObjectIds
    if author_id is not None and ObjectId.is_valid(author_id):
        return ObjectId(author_id)
    return author_id


def create_author(db: Database, name: str, bio: Optional[str] = None, website: Optional[str] = None) -> AuthorDocument:
    author = Author(name=name, bio=bio, website=website)
    saved = AuthorDocument(**create_document(db, AUTHORS, author))
    logger.info("created author %s", saved.model_dump())
    return saved


def create_course(db: Database, name: str, author_id: Optional[str]) -> ReferencedCourseDocument:
    course = ReferencedCourse(name=name, author=author_id)
    data: Dict[str, Any] = course.model_dump(exclude_none=True)
    if course.author is not None:
        data["author"] = _reference(course.author)
    saved = ReferencedCourseDocument(**create_document(db, COURSES, data))
    logger.info("created course %s", saved.model_dump())
    return saved


def remove_author(db: Database, author_id: str) -> int:
    deleted = delete_document(db, AUTHORS, to_object_id(author_id))
    logger.info("remove_author %s: deleted %d", author_id, deleted)
    return deleted


def _resolve_author(db: Database, ref: Any, cache: Dict[Any, Optional[AuthorName]]) -> Optional[AuthorName]:
    if ref is None:
        return None
    if ref not in cache:
        doc = get_document_by_id(db, AUTHORS, ref, {"name": 1, "_id": 0})
        cache[ref] = AuthorName(**doc) if doc is not None else None
    return cache[ref]


def list_courses(db: Database) -> List[PopulatedCourse]:
    """Return every course as ``{name, author: {name}}`` with the author looked up by id."""
    cache: Dict[Any, Optional[AuthorName]] = {}
    courses = []
    for doc in db[COURSES].find({}, {"name": 1, "author": 1, "_id": 0}):
        author = _resolve_author(db, doc.get("author"), cache)
        courses.append(PopulatedCourse(name=doc.get("name"), author=author))
    logger.info("listed courses %s", [c.model_dump() for c in courses])
    return courses


def run_demo(db: Database) -> None:
    author = create_author(db, "Mostafa", "My bio", "My website")
    create_course(db, "NodeJs Course", author.id)
    create_course(db, "NodeJs Course", "1")
    list_courses(db)


if __name__ == "__main__":
    configure_logging()
    with open_database() as db:
        run_demo(db)
