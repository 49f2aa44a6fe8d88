import os
from contextlib import asynccontextmanager
from typing import List, Optional

from bson.errors import InvalidId
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from pymongo.database import Database

import embedding
import referencing
from database import DATABASE_NAME, connect
from logging_config import configure_logging
from schemas import (
    Author,
    AuthorDocument,
    EmbeddedCourseDocument,
    PopulatedCourse,
    ReferencedCourseDocument,
    UpdateOutcome,
)

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Connection failure here aborts startup
    db = await run_in_threadpool(connect)
    app.state.db = db
    try:
        yield
    finally:
        db.client.close()


app = FastAPI(title="Modeling Relationships API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_db(request: Request) -> Database:
    return request.app.state.db


def _bad_id(kind: str) -> HTTPException:
    return HTTPException(status_code=400, detail=f"Invalid {kind} id")


# Request models
class CreateEmbeddedCourseRequest(BaseModel):
    name: str
    author: Optional[Author] = None

class UpdateAuthorRequest(BaseModel):
    field: str = "name"
    value: Optional[str]

class RenameAuthorRequest(BaseModel):
    name: str

class CreateAuthorRequest(BaseModel):
    name: str
    bio: Optional[str] = None
    website: Optional[str] = None

class CreateReferencedCourseRequest(BaseModel):
    name: str
    author: Optional[str] = None


# Health
@app.get("/")
def read_root():
    return {"message": "Modeling Relationships API running"}

@app.get("/test")
def test_database(db: Database = Depends(get_db)):
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "database_url": "✅ Set" if os.getenv("DATABASE_URL") else "❌ Not Set",
        "database_name": DATABASE_NAME,
        "connection_status": "Not Connected",
        "collections": []
    }
    try:
        db.command("ping")
        response["database"] = "✅ Available"
        response["database_name"] = db.name
        response["connection_status"] = "Connected"
        response["collections"] = db.list_collection_names()[:10]
    except Exception as e:
        response["database"] = f"❌ Error: {str(e)[:80]}"
    return response


# Embedded author
@app.post("/embedded/courses", response_model=EmbeddedCourseDocument)
def create_embedded_course(payload: CreateEmbeddedCourseRequest, db: Database = Depends(get_db)):
    return embedding.create_course(db, payload.name, payload.author)

@app.get("/embedded/courses", response_model=List[EmbeddedCourseDocument])
def list_embedded_courses(db: Database = Depends(get_db)):
    return embedding.list_courses(db)

@app.patch("/embedded/courses/{course_id}/author", response_model=UpdateOutcome)
def update_embedded_author(course_id: str, payload: UpdateAuthorRequest, db: Database = Depends(get_db)):
    try:
        return embedding.update_author(db, course_id, payload.field, payload.value)
    except InvalidId:
        raise _bad_id("course")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@app.delete("/embedded/courses/{course_id}/author", response_model=UpdateOutcome)
def remove_embedded_author(course_id: str, field: Optional[str] = None, db: Database = Depends(get_db)):
    try:
        if field:
            return embedding.remove_author_field(db, course_id, field)
        return embedding.remove_author(db, course_id)
    except InvalidId:
        raise _bad_id("course")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@app.put("/embedded/courses/{course_id}/author/name", response_model=EmbeddedCourseDocument)
def rename_embedded_author(course_id: str, payload: RenameAuthorRequest, db: Database = Depends(get_db)):
    try:
        course = embedding.rename_author_via_parent(db, course_id, payload.name)
    except InvalidId:
        raise _bad_id("course")
    if course is None:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


# Referenced author
@app.post("/referenced/authors", response_model=AuthorDocument)
def create_author(payload: CreateAuthorRequest, db: Database = Depends(get_db)):
    return referencing.create_author(db, payload.name, payload.bio, payload.website)

@app.delete("/referenced/authors/{author_id}")
def delete_author(author_id: str, db: Database = Depends(get_db)):
    try:
        deleted = referencing.remove_author(db, author_id)
    except InvalidId:
        raise _bad_id("author")
    return {"deleted_count": deleted}

@app.post("/referenced/courses", response_model=ReferencedCourseDocument)
def create_referenced_course(payload: CreateReferencedCourseRequest, db: Database = Depends(get_db)):
    return referencing.create_course(db, payload.name, payload.author)

@app.get("/referenced/courses", response_model=List[PopulatedCourse])
def list_referenced_courses(db: Database = Depends(get_db)):
    return referencing.list_courses(db)


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
