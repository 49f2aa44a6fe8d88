"""
Database Schemas

MongoDB record shapes for the Course/Author relationship, declared as
Pydantic models and checked whenever a record crosses the database boundary.

Two layouts share the same entities:
- Embedded: the Author lives inside each Course -> "course" collection only
- Referenced: the Author has its own "author" collection and the Course
  keeps the author's id
"""

from pydantic import BaseModel, Field
from typing import Optional

AUTHOR_FIELDS = ("name", "bio", "website")


class Author(BaseModel):
    """
    Author data as stored inside a course (sub-document, no id of its own)
    """
    name: Optional[str] = Field(None, description="Author's display name")
    bio: Optional[str] = Field(None, description="Short biography")
    website: Optional[str] = Field(None, description="Personal website")


class AuthorDocument(Author):
    """
    Standalone author
    Collection name: "author"
    """
    id: str = Field(..., description="Generated author id")


class EmbeddedCourse(BaseModel):
    """
    Course carrying its author inline
    Collection name: "course"
    """
    name: Optional[str] = Field(None, description="Course title")
    author: Optional[Author] = Field(None, description="Embedded author sub-document")


class EmbeddedCourseDocument(EmbeddedCourse):
    id: str


class ReferencedCourse(BaseModel):
    """
    Course pointing at an author by id
    Collection name: "course"
    """
    name: Optional[str] = Field(None, description="Course title")
    author: Optional[str] = Field(None, description="ID of the referenced author (not checked)")


class ReferencedCourseDocument(ReferencedCourse):
    id: str


class AuthorName(BaseModel):
    name: Optional[str] = None


class PopulatedCourse(BaseModel):
    """Course as listed with its author resolved to the author's name."""
    name: Optional[str] = None
    author: Optional[AuthorName] = None


class UpdateOutcome(BaseModel):
    matched_count: int = Field(0, ge=0)
    modified_count: int = Field(0, ge=0)
