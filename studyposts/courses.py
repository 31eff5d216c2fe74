"""CRUD operations over the course collection and the posts nested in it.

Every function works on the whole collection as loaded from the JSON
document. Write operations mutate that list in place and then persist it;
a failed write raises PersistenceError after the list was already changed,
so callers should reload rather than trust the in-memory copy.
"""

from __future__ import annotations

import time
import random
import logging

from studyposts.storage import save_courses

logger = logging.getLogger(__name__)


class StudyPostsError(Exception):
    """Base error for course and post operations"""

    def __init__(self, message):
        self.message = message
        super().__init__(message)


class NotFoundError(StudyPostsError):
    pass


class CourseNotFound(NotFoundError):
    def __init__(self, course_id):
        self.course_id = course_id
        super().__init__("Course not found")


class PostNotFound(NotFoundError):
    def __init__(self, course_id, post_id):
        self.course_id = course_id
        self.post_id = post_id
        super().__init__("Post not found")


class PersistenceError(StudyPostsError):
    pass


class ValidationError(StudyPostsError):
    pass


# --- identifiers ---

def _now_ms():
    return int(time.time() * 1000)


def new_course_id(courses: list[dict]) -> str:
    taken = {str(course.get("id")) for course in courses}
    candidate = _now_ms()
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)


def new_post_id(posts: list[dict]) -> str:
    taken = {str(post.get("id")) for post in posts}
    while True:
        candidate = f"{_now_ms()}.{random.randint(0, 999999):06d}"
        if candidate not in taken:
            return candidate


# --- lookups ---

def _check_payload(payload):
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def find_course_index(courses: list[dict], course_id: str) -> int:
    for i, course in enumerate(courses):
        if course.get("id") == course_id:
            return i
    raise CourseNotFound(course_id)


def find_post_index(course: dict, post_id: str) -> int:
    for i, post in enumerate(course.get("posts", [])):
        if post.get("id") == post_id:
            return i
    raise PostNotFound(course.get("id"), post_id)


def _persist(db_file, courses, failure):
    if not save_courses(db_file, courses):
        raise PersistenceError(failure)


# --- courses ---

def list_courses(courses: list[dict]) -> list[dict]:
    return courses


def create_course(courses: list[dict], payload: dict | None, db_file: str) -> dict:
    payload = _check_payload(payload)
    course = {"title": "", "description": ""}
    course.update(payload)
    course["id"] = new_course_id(courses)
    course["posts"] = []
    courses.insert(0, course)
    _persist(db_file, courses, "Failed to save course")
    logger.info("Created course %s", course["id"])
    return course


def update_course(courses: list[dict], course_id: str, payload: dict | None, db_file: str) -> dict:
    payload = _check_payload(payload)
    idx = find_course_index(courses, course_id)
    existing = courses[idx]
    merged = dict(existing)
    merged.update(payload)
    # id and posts always come from the stored record
    merged["id"] = course_id
    merged["posts"] = existing.get("posts", [])
    courses[idx] = merged
    _persist(db_file, courses, "Failed to update course")
    logger.info("Updated course %s", course_id)
    return merged


def delete_course(courses: list[dict], course_id: str, db_file: str) -> dict:
    idx = find_course_index(courses, course_id)
    removed = courses.pop(idx)
    _persist(db_file, courses, "Failed to delete course")
    logger.info("Deleted course %s with %d posts", course_id, len(removed.get("posts", [])))
    return removed


# --- posts ---

def create_post(courses: list[dict], course_id: str, payload: dict | None, db_file: str) -> dict:
    payload = _check_payload(payload)
    course = courses[find_course_index(courses, course_id)]
    posts = course.setdefault("posts", [])
    post = {"title": "", "imageUrl": "", "description": ""}
    post.update(payload)
    post["id"] = new_post_id(posts)
    posts.insert(0, post)
    _persist(db_file, courses, "Failed to save post")
    logger.info("Created post %s in course %s", post["id"], course_id)
    return post


def update_post(courses: list[dict], course_id: str, post_id: str, payload: dict | None, db_file: str) -> dict:
    payload = _check_payload(payload)
    course = courses[find_course_index(courses, course_id)]
    idx = find_post_index(course, post_id)
    merged = dict(course["posts"][idx])
    merged.update(payload)
    merged["id"] = post_id
    course["posts"][idx] = merged
    _persist(db_file, courses, "Failed to update post")
    logger.info("Updated post %s in course %s", post_id, course_id)
    return merged


def delete_post(courses: list[dict], course_id: str, post_id: str, db_file: str) -> dict:
    course = courses[find_course_index(courses, course_id)]
    idx = find_post_index(course, post_id)
    removed = course["posts"].pop(idx)
    _persist(db_file, courses, "Failed to delete post")
    logger.info("Deleted post %s from course %s", post_id, course_id)
    return removed
