"""
Top-level package for the blog post XML codec.

This package converts blog posts, with their categories and comments, to and
from the XML document format inherited from MiniBlog/BlogEngine.  Modules are
split into subpackages:

* :mod:`src.models` – pydantic records for posts and comments
* :mod:`src.serializers` – the XML codec and timestamp parsing
* :mod:`src.utils` – error and success reporting

File handling and configuration live in :mod:`src.codec_tool`; the codec
itself works purely on in-memory text.
"""
