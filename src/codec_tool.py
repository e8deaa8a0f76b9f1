"""
File-level orchestration around the post XML codec.

This module defines a :class:`PostCodecTool` class that ties together the
configuration, the error reporter and :class:`PostXmlSerializer`.  It converts
post JSON files to stored XML documents and reads stored documents back,
deriving each post id from the document's file name the way the storage layer
does.

Configuration is supplied via a JSON file path or directly as a dictionary.
The ``codec`` section controls output formatting and the file extension; the
``reports`` section says where log and JSON Lines reports are written.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional
from xml.etree.ElementTree import ParseError

from src.models.post import Post
from src.serializers.post_xml import PostXmlSerializer
from src.utils.errors import ErrorReporter


def context_for(post: Post) -> Dict[str, Any]:
    """Identifying fields used in report entries."""
    return {"id": post.id, "slug": post.slug, "title": post.title}


class PostCodecTool:
    """
    Holds configuration and a configured serializer, and performs the file
    conversions used by the command line entry point.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, *, config_file: Optional[str] = None) -> None:
        if config_file and os.path.exists(config_file):
            with open(config_file, "r", encoding="utf-8") as f:
                config = json.load(f)
        elif config is None:
            config = {}

        # Ensure essential keys exist to prevent KeyErrors
        config.setdefault("codec", {})
        config["codec"].setdefault("indent", True)
        config["codec"].setdefault("xml_declaration", True)
        config["codec"].setdefault("file_extension", os.getenv("POST_XML_EXTENSION", ".xml"))

        config.setdefault("reports", {})
        config["reports"].setdefault("dir", os.getenv("POST_XML_REPORT_DIR", os.path.join("reports", "codec")))

        self.config = config
        self.reporter = ErrorReporter(config["reports"]["dir"])
        self.serializer = PostXmlSerializer(
            self.reporter,
            indent=bool(config["codec"]["indent"]),
            xml_declaration=bool(config["codec"]["xml_declaration"]),
            file_extension=config["codec"]["file_extension"],
        )

    def log_message(self, message: str, level: str = "INFO") -> None:
        print(f"[{level}] {message}")
        report_dir = self.config["reports"]["dir"]
        if not report_dir:
            return
        os.makedirs(report_dir, exist_ok=True)
        with open(os.path.join(report_dir, "codec.log"), "a", encoding="utf-8") as f:
            f.write(f"{level}: {message}\n")

    def load_post_json(self, json_path: str) -> Post:
        with open(json_path, "r", encoding="utf-8") as f:
            return Post.model_validate_json(f.read())

    def encode_file(self, json_path: str, out_dir: str) -> str:
        """Encode the post in ``json_path`` and write ``<id><extension>`` under ``out_dir``.

        Returns the path of the written document.
        """
        post = self.load_post_json(json_path)
        if not post.id:
            raise ValueError(f"Post in {json_path} has no id; stored documents are named after it")
        text = self.serializer.encode(post)
        os.makedirs(out_dir, exist_ok=True)
        out_path = os.path.join(out_dir, f"{post.id}{self.serializer.expected_file_extension}")
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(text)
        self.reporter.report_ok("ENCODED", context_for(post), {"path": out_path})
        return out_path

    def decode_file(self, xml_path: str) -> Post:
        """Read a stored document; the key is the file name without extension."""
        key = os.path.splitext(os.path.basename(xml_path))[0]
        with open(xml_path, "r", encoding="utf-8") as f:
            text = f.read()
        post = self.serializer.decode(text, key)
        self.reporter.report_ok("DECODED", context_for(post), {"path": xml_path})
        return post

    def decode_directory(self, directory: str) -> List[Post]:
        """Decode every document in ``directory`` that carries the codec's extension.

        Unreadable documents are reported and skipped.
        """
        extension = self.serializer.expected_file_extension
        posts: List[Post] = []
        for name in sorted(os.listdir(directory)):
            if not name.endswith(extension):
                continue
            path = os.path.join(directory, name)
            try:
                posts.append(self.decode_file(path))
            except (ParseError, ValueError) as e:
                self.reporter.report_error("DECODE_FAILED", {"path": path}, e)
                self.log_message(f"Skipping unreadable document {path}: {e}", "ERROR")
        self.log_message(f"Decoded {len(posts)} posts from {directory}")
        return posts
