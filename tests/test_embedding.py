import pytest
from bson import ObjectId
from bson.errors import InvalidId

import embedding
from schemas import Author


def _mostafa():
    return Author(name="Mostafa", bio="My Bio", website="My website")


def test_create_course_embeds_author(db):
    course = embedding.create_course(db, "NodeJs Course", _mostafa())

    assert ObjectId.is_valid(course.id)
    assert course.author == _mostafa()
    stored = db[embedding.COURSES].find_one({"_id": ObjectId(course.id)})
    assert stored["author"] == {"name": "Mostafa", "bio": "My Bio", "website": "My website"}
    # No independent author collection is written
    assert "author" not in db.list_collection_names()


def test_list_courses_returns_author_inline(db):
    embedding.create_course(db, "NodeJs Course", _mostafa())
    embedding.create_course(db, "Python Course", Author(name="Ada"))

    courses = embedding.list_courses(db)

    assert [c.name for c in courses] == ["NodeJs Course", "Python Course"]
    assert courses[0].author == _mostafa()
    assert courses[1].author.name == "Ada"
    assert courses[1].author.bio is None


def test_update_author_changes_only_target_field(db):
    course = embedding.create_course(db, "NodeJs Course", _mostafa())

    outcome = embedding.update_author(db, course.id)

    assert outcome.matched_count == 1
    assert outcome.modified_count == 1
    [updated] = embedding.list_courses(db)
    assert updated.name == "NodeJs Course"
    assert updated.author.name == "John"
    assert updated.author.bio == "My Bio"
    assert updated.author.website == "My website"


def test_update_author_other_field(db):
    course = embedding.create_course(db, "NodeJs Course", _mostafa())

    embedding.update_author(db, course.id, field="website", value="example.com")

    [updated] = embedding.list_courses(db)
    assert updated.author == Author(name="Mostafa", bio="My Bio", website="example.com")


def test_update_author_rejects_unknown_field(db):
    course = embedding.create_course(db, "NodeJs Course", _mostafa())

    with pytest.raises(ValueError):
        embedding.update_author(db, course.id, field="email", value="x")


def test_update_author_missing_course_reports_zero_matches(db, caplog):
    outcome = embedding.update_author(db, str(ObjectId()))

    assert outcome.matched_count == 0
    assert outcome.modified_count == 0
    assert "No embedded_course document matched" in caplog.text


def test_update_author_malformed_id_raises(db):
    with pytest.raises(InvalidId):
        embedding.update_author(db, "not-an-id")


def test_remove_author_drops_subdocument(db):
    course = embedding.create_course(db, "NodeJs Course", _mostafa())

    outcome = embedding.remove_author(db, course.id)

    assert outcome.matched_count == 1
    stored = db[embedding.COURSES].find_one({"_id": ObjectId(course.id)})
    assert "author" not in stored
    assert stored["name"] == "NodeJs Course"
    [listed] = embedding.list_courses(db)
    assert listed.author is None


def test_remove_author_field_unsets_single_field(db):
    course = embedding.create_course(db, "NodeJs Course", _mostafa())

    embedding.remove_author_field(db, course.id, "name")

    stored = db[embedding.COURSES].find_one({"_id": ObjectId(course.id)})
    assert stored["author"] == {"bio": "My Bio", "website": "My website"}


def test_rename_author_via_parent_saves_whole_course(db):
    course = embedding.create_course(db, "NodeJs Course", _mostafa())

    renamed = embedding.rename_author_via_parent(db, course.id, "Mosh Hamadani")

    assert renamed.author.name == "Mosh Hamadani"
    stored = db[embedding.COURSES].find_one({"_id": ObjectId(course.id)})
    assert stored["name"] == "NodeJs Course"
    assert stored["author"] == {"name": "Mosh Hamadani", "bio": "My Bio", "website": "My website"}


def test_rename_author_via_parent_missing_course(db):
    assert embedding.rename_author_via_parent(db, str(ObjectId()), "John") is None


def test_run_demo_leaves_course_without_author(db):
    embedding.run_demo(db)

    [course] = list(db[embedding.COURSES].find())
    assert course["name"] == "NodeJs Course"
    assert "author" not in course


def test_remove_author_missing_course_reports_zero_matches(db, caplog):
    outcome = embedding.remove_author(db, str(ObjectId()))

    assert outcome.matched_count == 0
    assert outcome.modified_count == 0
    assert "No embedded_course document matched" in caplog.text
