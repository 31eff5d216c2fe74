"""Interactive terminal front end for the course board."""

from __future__ import annotations

from collections.abc import Callable

from studyposts.client import CoursesClient
from studyposts.forms import clean_course_form, clean_post_form, resolve_image
from studyposts.state import CourseBoard

InputFn = Callable[[str], str]
PrintFn = Callable[[str], None]
YES_ANSWERS = {"y", "yes"}
QUIT_COMMANDS = {"q"}
BACK_COMMANDS = {"b"}
CLEAR_ANSWER = "-"


def play_shell(client: CoursesClient | None = None, input_fn: InputFn = input, print_fn: PrintFn = print) -> int:
    """Run the main course menu until the user quits."""
    board = CourseBoard(client=client, confirm=_confirm_with(input_fn))
    try:
        if not board.refresh():
            print_fn("Could not load courses from the service.")
        while True:
            _render_courses(board, print_fn)
            print_fn("n) New course")
            print_fn("a) Quick add course")
            print_fn("e) Edit course")
            print_fn("d) Delete course")
            print_fn("o) Open posts")
            print_fn("r) Refresh")
            print_fn("q) Quit")
            choice = input_fn("Choose: ").strip().lower()

            if choice == "n":
                board.cancel_course_edit()
                _course_form_flow(board, input_fn, print_fn)
            elif choice == "a":
                _quick_add_flow(board, input_fn, print_fn)
            elif choice == "e":
                course = _pick(board.courses, "Course number: ", input_fn, print_fn)
                if course is not None:
                    board.edit_course(course["id"])
                    _course_form_flow(board, input_fn, print_fn)
            elif choice == "d":
                course = _pick(board.courses, "Course number: ", input_fn, print_fn)
                if course is not None and board.delete_course(course["id"]):
                    print_fn(f"Deleted course '{course.get('title', '')}'.")
            elif choice == "o":
                course = _pick(board.courses, "Course number: ", input_fn, print_fn)
                if course is not None:
                    board.open_posts(course["id"])
                    _posts_flow(board, input_fn, print_fn)
            elif choice == "r":
                if not board.refresh():
                    print_fn("Could not load courses from the service.")
            elif choice in QUIT_COMMANDS:
                return 0
            else:
                print_fn("Invalid choice.")
    except EOFError:
        return 0
    finally:
        board.close()


def _confirm_with(input_fn: InputFn) -> Callable[[str], bool]:
    def confirm(message: str) -> bool:
        return input_fn(f"{message} [y/N]: ").strip().lower() in YES_ANSWERS

    return confirm


def _plural(count: int) -> str:
    return "Post" if count == 1 else "Posts"


def _render_courses(board: CourseBoard, print_fn: PrintFn) -> None:
    print_fn("\n=== Study Posts ===")
    if not board.courses:
        print_fn('No courses yet. Choose "New course" to get started, then add posts inside each course.')
        return
    for idx, course in enumerate(board.courses, start=1):
        count = len(course.get("posts", []))
        marker = " (new)" if course.get("id") == board.newly_added_course_id else ""
        print_fn(f"{idx}) {course.get('title', '')} - {count} {_plural(count)}{marker}")
        if course.get("description"):
            print_fn(f"   {course['description']}")


def _pick(items: list[dict], prompt: str, input_fn: InputFn, print_fn: PrintFn) -> dict | None:
    if not items:
        print_fn("Nothing to choose from.")
        return None
    raw = input_fn(prompt).strip()
    if raw.isdigit() and 1 <= int(raw) <= len(items):
        return items[int(raw) - 1]
    print_fn("Invalid selection.")
    return None


def _ask(label: str, current: str | None, input_fn: InputFn, clearable: bool = False) -> str:
    """Prompt for one field; an empty answer keeps the current value when editing.

    For optional fields, answering ``-`` clears the current value.
    """
    if current:
        hint = ", - to clear" if clearable else ""
        answer = input_fn(f"{label} [{_short(current)}{hint}]: ")
        if clearable and answer.strip() == CLEAR_ANSWER:
            return ""
        return answer if answer.strip() else current
    return input_fn(f"{label}: ")


def _short(value: str, limit: int = 40) -> str:
    if value.startswith("data:"):
        return "inline image"
    return value if len(value) <= limit else value[: limit - 3] + "..."


def _course_form_flow(board: CourseBoard, input_fn: InputFn, print_fn: PrintFn) -> None:
    editing = board.course_being_edited
    print_fn("\n--- Edit Course ---" if editing else "\n--- Add New Course ---")
    current = editing or {}
    values = {
        "title": _ask("Course title", current.get("title"), input_fn),
        "description": _ask("Description (optional)", current.get("description"), input_fn, clearable=True),
    }
    cleaned = clean_course_form(values)
    if cleaned is None:
        print_fn("Course title is required.")
        board.cancel_course_edit()
        return
    if board.save_course(cleaned):
        print_fn("Course updated." if editing else "Course added.")
    else:
        print_fn("Could not save course.")
        board.cancel_course_edit()


def _quick_add_flow(board: CourseBoard, input_fn: InputFn, print_fn: PrintFn) -> None:
    board.start_quick_add()
    name = input_fn("Enter course name (blank to cancel): ")
    if not name.strip():
        board.cancel_quick_add()
        return
    if board.quick_add(name):
        print_fn("Course added.")
    else:
        print_fn("Could not create course.")
        board.cancel_quick_add()


def _render_posts(course: dict, print_fn: PrintFn) -> None:
    print_fn(f"\n=== {course.get('title', '')} ===")
    print_fn("Manage posts inside this course.")
    posts = course.get("posts", [])
    if not posts:
        print_fn("No posts yet. Add your first post for this course.")
        return
    for idx, post in enumerate(posts, start=1):
        print_fn(f"{idx}) {post.get('title', '')} [{_short(post.get('imageUrl', ''))}]")
        print_fn(f"   {post.get('description', '')}")


def _posts_flow(board: CourseBoard, input_fn: InputFn, print_fn: PrintFn) -> None:
    while board.active_course is not None:
        course = board.active_course
        _render_posts(course, print_fn)
        print_fn("a) Add post")
        print_fn("e) Edit post")
        print_fn("d) Delete post")
        print_fn("b) Back")
        choice = input_fn("Choose: ").strip().lower()

        if choice == "a":
            board.cancel_post_edit()
            _post_form_flow(board, input_fn, print_fn)
        elif choice == "e":
            post = _pick(course.get("posts", []), "Post number: ", input_fn, print_fn)
            if post is not None:
                board.edit_post(post["id"])
                _post_form_flow(board, input_fn, print_fn)
        elif choice == "d":
            post = _pick(course.get("posts", []), "Post number: ", input_fn, print_fn)
            if post is not None and board.delete_post(post["id"]):
                print_fn(f"Deleted post '{post.get('title', '')}'.")
        elif choice in BACK_COMMANDS:
            board.close_posts()
        else:
            print_fn("Invalid choice.")


def _post_form_flow(board: CourseBoard, input_fn: InputFn, print_fn: PrintFn) -> None:
    editing = board.post_being_edited
    print_fn("\n--- Edit Post ---" if editing else "\n--- Add New Post ---")
    current = editing or {}
    title = _ask("Post title", current.get("title"), input_fn)
    image = _ask("Image file or link", current.get("imageUrl"), input_fn)
    description = _ask("Description", current.get("description"), input_fn)
    try:
        image = resolve_image(image)
    except (OSError, ValueError) as e:
        print_fn(f"Could not read image: {e}")
        board.cancel_post_edit()
        return

    cleaned = clean_post_form({"title": title, "imageUrl": image, "description": description})
    if cleaned is None:
        print_fn("Title, image and description are required.")
        board.cancel_post_edit()
        return
    if board.save_post(cleaned):
        print_fn("Post updated." if editing else "Post added.")
    else:
        print_fn("Could not save post.")
        board.cancel_post_edit()
