"""Client-side mirror of the course collection plus UI-only state.

The mirror is only ever changed with data returned by a successful service
call: a failed call is logged and leaves every field as it was. Intents
return True when the service call succeeded and the mirror was updated.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from studyposts import config
from studyposts.client import ApiError, CoursesClient

logger = logging.getLogger(__name__)

DELETE_COURSE_PROMPT = "Are you sure you want to delete this course and all its posts?"
DELETE_POST_PROMPT = "Are you sure you want to delete this post?"


def _decline(message: str) -> bool:
    return False


class CourseBoard:
    def __init__(
        self,
        client: CoursesClient | None = None,
        confirm: Callable[[str], bool] = _decline,
        new_flag_seconds: float | None = None,
    ) -> None:
        self.client = client or CoursesClient()
        self.confirm = confirm
        self.new_flag_seconds = config.NEW_FLAG_SECONDS if new_flag_seconds is None else new_flag_seconds

        self.courses: list[dict] = []
        self.editing_course_id = None
        self.newly_added_course_id = None
        self.active_course_id = None
        self.editing_post_id = None
        self.show_quick_add = False
        self.quick_course_name = ""

        self._new_flag_timer = None

    # --- derived views ---

    @property
    def course_being_edited(self) -> dict | None:
        return self._find_course(self.editing_course_id)

    @property
    def active_course(self) -> dict | None:
        return self._find_course(self.active_course_id)

    @property
    def post_being_edited(self) -> dict | None:
        course = self.active_course
        if course is None or self.editing_post_id is None:
            return None
        for post in course.get("posts", []):
            if post.get("id") == self.editing_post_id:
                return post
        return None

    def _find_course(self, course_id):
        if course_id is None:
            return None
        for course in self.courses:
            if course.get("id") == course_id:
                return course
        return None

    # --- loading ---

    def refresh(self) -> bool:
        try:
            self.courses = self.client.list_courses()
        except ApiError as e:
            logger.warning("Failed to fetch courses: %s", e)
            return False
        return True

    # --- courses ---

    def save_course(self, data: dict) -> bool:
        if self.editing_course_id:
            course_id = self.editing_course_id
            try:
                updated = self.client.update_course(course_id, data)
            except ApiError as e:
                logger.warning("Failed to update course %s: %s", course_id, e)
                return False
            self.courses = [updated if c.get("id") == course_id else c for c in self.courses]
            self.editing_course_id = None
            return True

        try:
            created = self.client.create_course(data)
        except ApiError as e:
            logger.warning("Failed to create course: %s", e)
            return False
        self._prepend_new_course(created)
        return True

    def edit_course(self, course_id: str) -> None:
        self.editing_course_id = course_id

    def cancel_course_edit(self) -> None:
        self.editing_course_id = None

    def delete_course(self, course_id: str) -> bool:
        if not self.confirm(DELETE_COURSE_PROMPT):
            return False
        try:
            self.client.delete_course(course_id)
        except ApiError as e:
            logger.warning("Failed to delete course %s: %s", course_id, e)
            return False
        self.courses = [c for c in self.courses if c.get("id") != course_id]
        if self.editing_course_id == course_id:
            self.editing_course_id = None
        if self.active_course_id == course_id:
            self.close_posts()
        return True

    def _prepend_new_course(self, course):
        self.courses = [course] + self.courses
        self.newly_added_course_id = course.get("id")
        self._schedule_new_flag_reset(self.newly_added_course_id)

    def _schedule_new_flag_reset(self, course_id):
        if self._new_flag_timer is not None:
            self._new_flag_timer.cancel()
        self._new_flag_timer = threading.Timer(self.new_flag_seconds, self._clear_new_flag, args=(course_id,))
        self._new_flag_timer.daemon = True
        self._new_flag_timer.start()

    def _clear_new_flag(self, course_id):
        # A newer course may have taken the flag in the meantime
        if self.newly_added_course_id == course_id:
            self.newly_added_course_id = None

    # --- post view ---

    def open_posts(self, course_id: str) -> None:
        if course_id != self.active_course_id:
            self.editing_post_id = None
        self.active_course_id = course_id

    def close_posts(self) -> None:
        self.active_course_id = None
        self.editing_post_id = None

    def edit_post(self, post_id: str) -> None:
        self.editing_post_id = post_id

    def cancel_post_edit(self) -> None:
        self.editing_post_id = None

    def _replace_posts(self, course_id, change):
        replaced = []
        for course in self.courses:
            if course.get("id") == course_id:
                course = dict(course)
                course["posts"] = change(course.get("posts", []))
            replaced.append(course)
        self.courses = replaced

    def save_post(self, data: dict) -> bool:
        course_id = self.active_course_id
        if not course_id:
            return False

        if self.editing_post_id:
            post_id = self.editing_post_id
            try:
                updated = self.client.update_post(course_id, post_id, data)
            except ApiError as e:
                logger.warning("Failed to update post %s: %s", post_id, e)
                return False
            self._replace_posts(course_id, lambda posts: [updated if p.get("id") == post_id else p for p in posts])
            self.editing_post_id = None
            return True

        try:
            created = self.client.create_post(course_id, data)
        except ApiError as e:
            logger.warning("Failed to create post in course %s: %s", course_id, e)
            return False
        self._replace_posts(course_id, lambda posts: [created] + posts)
        return True

    def delete_post(self, post_id: str) -> bool:
        course_id = self.active_course_id
        if not course_id:
            return False
        if not self.confirm(DELETE_POST_PROMPT):
            return False
        try:
            self.client.delete_post(course_id, post_id)
        except ApiError as e:
            logger.warning("Failed to delete post %s: %s", post_id, e)
            return False
        self._replace_posts(course_id, lambda posts: [p for p in posts if p.get("id") != post_id])
        if self.editing_post_id == post_id:
            self.editing_post_id = None
        return True

    # --- quick add ---

    def start_quick_add(self) -> None:
        self.show_quick_add = True

    def cancel_quick_add(self) -> None:
        self.quick_course_name = ""
        self.show_quick_add = False

    def quick_add(self, name: str | None = None) -> bool:
        if name is not None:
            self.quick_course_name = name
        title = self.quick_course_name.strip()
        if not title:
            return False
        try:
            created = self.client.create_course({"title": title, "description": ""})
        except ApiError as e:
            logger.warning("Failed to create course: %s", e)
            return False
        self._prepend_new_course(created)
        self.cancel_quick_add()
        return True

    def close(self) -> None:
        if self._new_flag_timer is not None:
            self._new_flag_timer.cancel()
