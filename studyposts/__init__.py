"""Study posts: courses with image posts, kept in a local JSON file."""

__version__ = "0.1.0"
