import os
import json
import logging
import tempfile

logger = logging.getLogger(__name__)


def load_courses(path):
    # Missing or unreadable documents count as an empty collection
    if not os.path.exists(path):
        return []
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error("Error reading database %s: %s", path, e)
        return []
    if not _well_formed(data):
        logger.error("Error reading database %s: expected a JSON array of courses", path)
        return []
    return data


def _well_formed(data):
    # Courses are objects; posts, when present, are a list of objects
    if not isinstance(data, list):
        return False
    for course in data:
        if not isinstance(course, dict):
            return False
        posts = course.get("posts", [])
        if not isinstance(posts, list) or not all(isinstance(post, dict) for post in posts):
            return False
    return True


def save_courses(path, courses) -> bool:
    # Write a sibling temp file, then rename it over the document
    directory = os.path.dirname(os.path.abspath(path))
    tmp_path = None
    try:
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".db-", suffix=".json", dir=directory)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(courses, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, path)
        return True
    except (OSError, TypeError, ValueError) as e:
        logger.error("Error writing database %s: %s", path, e)
        if tmp_path and os.path.exists(tmp_path):
            os.remove(tmp_path)
        return False
