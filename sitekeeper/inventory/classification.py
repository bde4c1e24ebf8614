"""Page kind classification by URL path."""

from pathlib import PurePosixPath

from sitekeeper.consts import COMPARISONS_PREFIX, DOCUMENTS_PREFIX
from sitekeeper.models.model_page import PageKind


def classify_path(path: str) -> PageKind:
    """Classify a page by its leading-slash URL path.

    Args:
        path: URL path such as '/', '/documents/guide.html'.

    Returns:
        HOMEPAGE for the site root, DOCUMENT and COMPARISON by directory
        prefix, OTHER for everything else.
    """
    if path in ("/", "/index.html"):
        return PageKind.HOMEPAGE
    if path.startswith(DOCUMENTS_PREFIX):
        return PageKind.DOCUMENT
    if path.startswith(COMPARISONS_PREFIX):
        return PageKind.COMPARISON
    return PageKind.OTHER


def page_path_for(relative_file: PurePosixPath | str) -> str:
    """URL path of an HTML file given its path relative to the site root.

    The root index.html maps to '/'. Every other file keeps its file name.
    """
    relative = PurePosixPath(relative_file).as_posix().lstrip("/")
    if relative == "index.html":
        return "/"
    return f"/{relative}"
