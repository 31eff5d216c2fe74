import requests

from studyposts import config


class ApiError(Exception):
    """A request to the courses service failed or was answered with an error"""

    def __init__(self, message, status=None):
        self.message = message
        self.status = status
        super().__init__(message if status is None else f"[{status}] {message}")


class CoursesClient:
    """JSON client for the courses REST service."""

    def __init__(self, base_url=None, session=None, timeout=None):
        self.base_url = (base_url or config.API_URL).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = config.REQUEST_TIMEOUT if timeout is None else timeout

    def _request(self, method, path, payload=None):
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise ApiError(f"{method} {path} failed: {e}")
        if not response.ok:
            try:
                message = response.json()["error"]
            except (ValueError, KeyError, TypeError):
                message = response.reason
            raise ApiError(message or f"{method} {path} failed", response.status_code)
        try:
            return response.json()
        except ValueError:
            raise ApiError(f"{method} {path} returned a non-JSON body", response.status_code)

    def list_courses(self):
        return self._request("GET", "/courses")

    def create_course(self, data):
        return self._request("POST", "/courses", data)

    def update_course(self, course_id, data):
        return self._request("PUT", f"/courses/{course_id}", data)

    def delete_course(self, course_id):
        return self._request("DELETE", f"/courses/{course_id}")["course"]

    def create_post(self, course_id, data):
        return self._request("POST", f"/courses/{course_id}/posts", data)

    def update_post(self, course_id, post_id, data):
        return self._request("PUT", f"/courses/{course_id}/posts/{post_id}", data)

    def delete_post(self, course_id, post_id):
        return self._request("DELETE", f"/courses/{course_id}/posts/{post_id}")["post"]
