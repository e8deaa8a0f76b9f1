"""
XML serializer for blog posts.

The format comes from MiniBlog/BlogEngine: a ``post`` root holding one child
element per field, a ``categories`` list and a ``comments`` list.  The post id
is not trusted from the body on read; it is the key the storage layer used to
find the document (typically the file name).

Usage example::

    serializer = PostXmlSerializer(ErrorReporter("reports/codec"))
    text = serializer.encode(post)
    same_post = serializer.decode(text, post.id)
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from typing import Any, Optional

from src.models.post import Comment, Post, utc_now
from src.serializers.dates import STRICT_THEN_GENERAL, format_round_trip, parse_general, parse_with
from src.utils.errors import ErrorReporter

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'
COMMENT_DATE_SENTINEL = datetime(2000, 1, 1, tzinfo=timezone.utc)

# Characters outside the XML 1.0 Char production
_INVALID_XML_CHARS = re.compile(
    "[^\u0009\u000a\u000d\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]"
)


def xml_text(value: Any) -> str:
    """Render ``value`` as element/attribute text, rejecting characters XML cannot carry."""
    if isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, datetime):
        text = format_round_trip(value)
    elif value is None:
        text = ""
    else:
        text = str(value)
    bad = _INVALID_XML_CHARS.search(text)
    if bad:
        raise ValueError(f"Character {bad.group()!r} at position {bad.start()} is not allowed in XML")
    return text


def parse_bool(text: str, name: str) -> bool:
    value = text.strip().lower()
    if value == "true":
        return True
    if value == "false":
        return False
    raise ValueError(f"<{name}> holds {text!r}, which is not a boolean")


def read_child_text(node: ET.Element, name: str, default: str = "") -> str:
    """Text of the child element ``name`` (including nested text) or ``default``."""
    child = node.find(name)
    if child is None:
        return default
    return "".join(child.itertext())


def read_attribute_text(node: ET.Element, name: str, default: str = "") -> str:
    return node.get(name, default)


class PostXmlSerializer:
    """
    Convert :class:`~src.models.post.Post` objects to and from XML text.

    The serializer keeps no state between calls; ``reporter`` receives the
    diagnostics for comments dropped on encode and dates that could not be
    read on decode.
    """

    def __init__(
        self,
        reporter: Optional[ErrorReporter] = None,
        *,
        indent: bool = True,
        xml_declaration: bool = True,
        file_extension: str = ".xml",
    ) -> None:
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.indent = indent
        self.xml_declaration = xml_declaration
        self.expected_file_extension = file_extension

    ###########################################################################
    # Encoding
    ###########################################################################

    def encode(self, post: Post) -> str:
        root = ET.Element("post")
        fields = (
            ("id", post.id),
            ("title", post.title),
            ("slug", post.slug),
            ("correlationkey", post.correlation_key),
            ("author", post.author),
            ("pubDate", post.pub_date),
            ("lastModified", post.last_modified),
            ("excerpt", post.meta_description),
            ("content", post.content),
            ("contentType", post.content_type),
            ("imageUrl", post.image_url),
            ("thumbnailUrl", post.thumbnail_url),
            ("ispublished", post.is_published),
            ("isFeatured", post.is_featured),
        )
        for name, value in fields:
            ET.SubElement(root, name).text = xml_text(value)

        categories = ET.SubElement(root, "categories")
        for category in post.categories or []:
            ET.SubElement(categories, "category").text = xml_text(category)

        comments = ET.SubElement(root, "comments")
        if post.comments is not None:
            for comment in post.comments:
                element = self._try_comment_element(post, comment)
                if element is not None:
                    comments.append(element)

        if self.indent:
            ET.indent(root, space="  ")
        # ElementTree leaves \r bare in text, and parsers fold \r\n into \n
        body = ET.tostring(root, encoding="unicode").replace("\r", "&#13;")
        if self.xml_declaration:
            return f"{XML_DECLARATION}\n{body}"
        return body

    def _try_comment_element(self, post: Post, comment: Comment) -> Optional[ET.Element]:
        """Build one ``comment`` element, or report the failure and return ``None``."""
        try:
            return self._comment_element(comment)
        except Exception as e:
            self.reporter.report_error(
                "COMMENT_APPEND",
                {"post_id": post.id, "comment_id": getattr(comment, "id", "")},
                e,
            )
            return None

    @staticmethod
    def _comment_element(comment: Comment) -> ET.Element:
        element = ET.Element(
            "comment",
            {
                "isAdmin": xml_text(comment.is_admin),
                "isApproved": xml_text(comment.is_approved),
                "id": xml_text(comment.id),
            },
        )
        if not isinstance(comment.pub_date, datetime):
            raise TypeError(f"Comment date must be a datetime, got {type(comment.pub_date).__name__}")
        for name, value in (
            ("author", comment.author),
            ("email", comment.email),
            ("website", comment.website),
            ("ip", comment.ip),
            ("userAgent", comment.user_agent),
            ("date", comment.pub_date),
            ("content", comment.content),
        ):
            ET.SubElement(element, name).text = xml_text(value)
        return element

    ###########################################################################
    # Decoding
    ###########################################################################

    def decode(self, xml_string: str, key: str) -> Post:
        # The format keeps the post id in the file name, not in the document
        root = ET.fromstring(xml_string)

        post = Post(
            id=key,
            title=read_child_text(root, "title"),
            author=read_child_text(root, "author"),
            correlation_key=read_child_text(root, "correlationkey"),
            meta_description=read_child_text(root, "excerpt"),
            content=read_child_text(root, "content"),
            content_type=read_child_text(root, "contentType"),
            slug=read_child_text(root, "slug").lower(),
            image_url=read_child_text(root, "imageUrl"),
            thumbnail_url=read_child_text(root, "thumbnailUrl"),
            pub_date=self._read_date(root, "pubDate", key),
            last_modified=self._read_date(root, "lastModified", key),
            is_published=parse_bool(read_child_text(root, "ispublished", "true"), "ispublished"),
            is_featured=parse_bool(read_child_text(root, "isFeatured", "false"), "isFeatured"),
        )

        self._load_categories(post, root)
        self._load_comments(post, root)
        return post

    def _read_date(self, root: ET.Element, name: str, key: str) -> datetime:
        if root.find(name) is None:
            return utc_now()
        text = read_child_text(root, name)
        parsed = parse_with(text, STRICT_THEN_GENERAL)
        if parsed is not None:
            return parsed
        self.reporter.report_error(
            "DATE_PARSE",
            {"post_id": key, "field": name, "value": text},
            ValueError(f"{text!r} matches no known date format"),
        )
        return utc_now()

    @staticmethod
    def _load_categories(post: Post, root: ET.Element) -> None:
        categories = root.find("categories")
        if categories is None:
            return
        post.categories = ["".join(node.itertext()) for node in categories.findall("category")]

    @staticmethod
    def _load_comments(post: Post, root: ET.Element) -> None:
        comments = root.find("comments")
        if comments is None:
            return
        loaded = []
        for node in comments.findall("comment"):
            loaded.append(
                Comment(
                    id=read_attribute_text(node, "id"),
                    author=read_child_text(node, "author"),
                    email=read_child_text(node, "email"),
                    website=read_child_text(node, "website"),
                    ip=read_child_text(node, "ip"),
                    user_agent=read_child_text(node, "userAgent"),
                    is_admin=parse_bool(read_attribute_text(node, "isAdmin", "false"), "isAdmin"),
                    is_approved=parse_bool(read_attribute_text(node, "isApproved", "true"), "isApproved"),
                    content=read_child_text(node, "content").replace("\n", "<br />"),
                    pub_date=parse_general(read_child_text(node, "date", "2000-01-01")) or COMMENT_DATE_SENTINEL,
                )
            )
        post.comments = loaded
