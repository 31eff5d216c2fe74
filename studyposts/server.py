import logging
import threading

from flask import Flask, request, jsonify, current_app
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from studyposts import config
from studyposts import courses as service
from studyposts.courses import NotFoundError, PersistenceError, ValidationError
from studyposts.logger import setup_logger
from studyposts.storage import load_courses

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["DB_FILE"] = config.DB_FILE
CORS(app)

# One read-modify-write of the document at a time
db_lock = threading.Lock()


def db_file():
    return current_app.config["DB_FILE"]


def read_payload():
    data = request.get_json(silent=True)
    if data is None and request.get_data():
        raise ValidationError("Request body must be valid JSON")
    return data


def with_courses(operation, *args):
    with db_lock:
        courses = load_courses(db_file())
        return operation(courses, *args)


@app.errorhandler(NotFoundError)
def not_found(e):
    return jsonify({"error": e.message}), 404


@app.errorhandler(ValidationError)
def bad_request(e):
    return jsonify({"error": e.message}), 400


@app.errorhandler(PersistenceError)
def persistence_failed(e):
    return jsonify({"error": e.message}), 500


@app.errorhandler(Exception)
def unexpected(e):
    # Let Flask render its own 404/405 etc.
    if isinstance(e, HTTPException):
        return e
    logger.exception("Unhandled error on %s %s", request.method, request.path)
    return jsonify({"error": "Internal server error"}), 500


# Courses API
@app.get("/courses")
def list_courses():
    return jsonify(with_courses(service.list_courses))


@app.post("/courses")
def add_course():
    data = read_payload()
    course = with_courses(service.create_course, data, db_file())
    return jsonify(course), 201


@app.put("/courses/<course_id>")
def update_course(course_id):
    data = read_payload()
    course = with_courses(service.update_course, course_id, data, db_file())
    return jsonify(course)


@app.delete("/courses/<course_id>")
def delete_course(course_id):
    course = with_courses(service.delete_course, course_id, db_file())
    return jsonify({"message": "Course deleted successfully", "course": course})


# Posts API, nested under their course
@app.post("/courses/<course_id>/posts")
def add_post(course_id):
    data = read_payload()
    post = with_courses(service.create_post, course_id, data, db_file())
    return jsonify(post), 201


@app.put("/courses/<course_id>/posts/<post_id>")
def update_post(course_id, post_id):
    data = read_payload()
    post = with_courses(service.update_post, course_id, post_id, data, db_file())
    return jsonify(post)


@app.delete("/courses/<course_id>/posts/<post_id>")
def delete_post(course_id, post_id):
    post = with_courses(service.delete_post, course_id, post_id, db_file())
    return jsonify({"message": "Post deleted successfully", "post": post})


def main():
    setup_logger()
    logger.info("Serving %s on %s:%s", app.config["DB_FILE"], config.HOST, config.PORT)
    app.run(host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    main()
