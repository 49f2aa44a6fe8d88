"""Courses with their author embedded as a sub-document.

The author has no collection of its own here: it is written with the course,
changed through field-path updates on the course and removed by unsetting it.
"""
import logging
from typing import List, Optional

from pymongo.database import Database

from database import (
    create_document,
    get_document_by_id,
    get_documents,
    open_database,
    replace_document,
    to_object_id,
    update_document,
)
from logging_config import configure_logging
from schemas import AUTHOR_FIELDS, Author, EmbeddedCourse, EmbeddedCourseDocument, UpdateOutcome

logger = logging.getLogger(__name__)

COURSES = "embedded_course"


def _author_path(field: str) -> str:
    if field not in AUTHOR_FIELDS:
        raise ValueError(f"Unknown author field: {field!r}")
    return f"author.{field}"


def create_course(db: Database, name: str, author: Optional[Author]) -> EmbeddedCourseDocument:
    course = EmbeddedCourse(name=name, author=author)
    saved = EmbeddedCourseDocument(**create_document(db, COURSES, course))
    logger.info("created course %s", saved.model_dump())
    return saved


def list_courses(db: Database) -> List[EmbeddedCourseDocument]:
    courses = [EmbeddedCourseDocument(**doc) for doc in get_documents(db, COURSES)]
    logger.info("listed %d courses", len(courses))
    return courses


def update_author(db: Database, course_id: str, field: str = "name", value: Optional[str] = "John") -> UpdateOutcome:
    """Set a single author field on a course, leaving its sibling fields alone."""
    outcome = update_document(db, COURSES, to_object_id(course_id), {"$set": {_author_path(field): value}})
    logger.info("update_author %s: %s", course_id, outcome.model_dump())
    return outcome


def remove_author(db: Database, course_id: str) -> UpdateOutcome:
    """Drop the whole author sub-document from a course."""
    outcome = update_document(db, COURSES, to_object_id(course_id), {"$unset": {"author": ""}})
    logger.info("remove_author %s: %s", course_id, outcome.model_dump())
    return outcome


def remove_author_field(db: Database, course_id: str, field: str) -> UpdateOutcome:
    outcome = update_document(db, COURSES, to_object_id(course_id), {"$unset": {_author_path(field): ""}})
    logger.info("remove_author_field %s.%s: %s", course_id, field, outcome.model_dump())
    return outcome


def rename_author_via_parent(db: Database, course_id: str, name: str) -> Optional[EmbeddedCourseDocument]:
    """Change the author's name in memory and save the whole course.

    A sub-document can only be persisted through its parent, so the course is
    read, modified and written back as one replacement.
    """
    oid = to_object_id(course_id)
    doc = get_document_by_id(db, COURSES, oid)
    if doc is None:
        logger.warning("No course matched id %s", course_id)
        return None
    course = EmbeddedCourseDocument(**doc)
    author = course.author or Author()
    course.author = author.model_copy(update={"name": name})
    replace_document(db, COURSES, oid, course.model_dump(exclude={"id"}, exclude_none=True))
    logger.info("renamed author of course %s to %s", course_id, name)
    return course


def run_demo(db: Database) -> None:
    course = create_course(
        db, "NodeJs Course", Author(name="Mostafa", bio="My Bio", website="My website")
    )
    update_author(db, course.id)
    list_courses(db)
    remove_author(db, course.id)
    list_courses(db)


if __name__ == "__main__":
    configure_logging()
    with open_database() as db:
        run_demo(db)
