"""
Entry point for the post XML codec.

``encode`` turns a post JSON file into a stored XML document named after the
post id; ``decode`` reads a stored document (or a whole directory of them)
and prints the posts as JSON.
"""

import argparse
import json
import os
import sys

from src.codec_tool import PostCodecTool

CONFIG_FILE = "config/codec_config.json"


def main(argv=None):
    """Main function to parse arguments and run the requested conversion."""
    parser = argparse.ArgumentParser(description="Convert blog posts to and from the legacy XML format.")
    parser.add_argument("--config", default=CONFIG_FILE, help="Path to the JSON configuration file.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    encode_parser = subparsers.add_parser("encode", help="Encode a post JSON file to XML.")
    encode_parser.add_argument("json_path", help="Post JSON file.")
    encode_parser.add_argument("--out-dir", default="data/posts", help="Directory for the XML document.")

    decode_parser = subparsers.add_parser("decode", help="Decode an XML document, or a directory of them, to JSON.")
    decode_parser.add_argument("xml_path", help="XML document or directory of documents.")
    decode_parser.add_argument("--out", help="Write JSON here instead of printing it.")

    args = parser.parse_args(argv)
    tool = PostCodecTool(config_file=args.config)

    if args.command == "encode":
        out_path = tool.encode_file(args.json_path, args.out_dir)
        tool.log_message(f"Wrote {out_path}")
        return 0

    if os.path.isdir(args.xml_path):
        posts = tool.decode_directory(args.xml_path)
        payload = [p.model_dump(mode="json", by_alias=True) for p in posts]
    else:
        payload = tool.decode_file(args.xml_path).model_dump(mode="json", by_alias=True)

    output = json.dumps(payload, ensure_ascii=False, indent=4)
    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            f.write(output)
        tool.log_message(f"Wrote {args.out}")
    else:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
