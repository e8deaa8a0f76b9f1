import json
import os
import sys

# Ensure project root is on sys.path for imports when running tests directly
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from src.codec_tool import PostCodecTool
from main import main


def _tool(tmp_path, **codec):
    return PostCodecTool({"codec": codec, "reports": {"dir": str(tmp_path / "reports")}})


def _write_post_json(path, **fields):
    data = {
        "id": "post-1",
        "title": "Stored post",
        "slug": "Stored-Post",
        "pubDate": "2019-03-04T05:06:07.000008+00:00",
        "categories": ["Tips"],
        "comments": [{"id": "c1", "author": "Ana", "content": "Hi"}],
    }
    data.update(fields)
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_defaults_are_filled_in():
    tool = PostCodecTool({})
    assert tool.config["codec"]["indent"] is True
    assert tool.config["codec"]["xml_declaration"] is True
    assert tool.serializer.expected_file_extension == tool.config["codec"]["file_extension"]
    assert tool.config["reports"]["dir"]


def test_config_file_is_loaded(tmp_path):
    config_path = tmp_path / "codec_config.json"
    config_path.write_text(json.dumps({"codec": {"file_extension": ".post"}}), encoding="utf-8")
    tool = PostCodecTool(config_file=str(config_path))
    assert tool.serializer.expected_file_extension == ".post"


def test_encode_file_names_document_after_post_id(tmp_path):
    tool = _tool(tmp_path)
    json_path = _write_post_json(tmp_path / "post.json")

    out_path = tool.encode_file(json_path, str(tmp_path / "store"))

    assert out_path == str(tmp_path / "store" / "post-1.xml")
    assert "<title>Stored post</title>" in open(out_path, encoding="utf-8").read()
    assert (tmp_path / "reports" / "success.jsonl").exists()


def test_decode_file_takes_key_from_file_name(tmp_path):
    tool = _tool(tmp_path)
    out_path = tool.encode_file(_write_post_json(tmp_path / "post.json"), str(tmp_path / "store"))
    renamed = tmp_path / "store" / "renamed.xml"
    os.rename(out_path, renamed)

    post = tool.decode_file(str(renamed))

    assert post.id == "renamed"
    assert post.slug == "stored-post"
    assert post.categories == ["Tips"]
    assert [c.author for c in post.comments] == ["Ana"]


def test_decode_directory_skips_unreadable_documents(tmp_path):
    tool = _tool(tmp_path)
    store = tmp_path / "store"
    tool.encode_file(_write_post_json(tmp_path / "a.json", id="a"), str(store))
    tool.encode_file(_write_post_json(tmp_path / "b.json", id="b"), str(store))
    (store / "broken.xml").write_text("<post><title>", encoding="utf-8")
    (store / "notes.txt").write_text("ignored", encoding="utf-8")

    posts = tool.decode_directory(str(store))

    assert [p.id for p in posts] == ["a", "b"]
    errors = (tmp_path / "reports" / "errors.jsonl").read_text(encoding="utf-8").splitlines()
    assert len(errors) == 1
    assert json.loads(errors[0])["code"] == "DECODE_FAILED"


def test_cli_encode_then_decode(tmp_path, capsys):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"reports": {"dir": str(tmp_path / "reports")}}), encoding="utf-8")
    json_path = _write_post_json(tmp_path / "post.json")
    store = tmp_path / "store"

    assert main(["--config", str(config_path), "encode", json_path, "--out-dir", str(store)]) == 0
    out_json = tmp_path / "decoded.json"
    assert main(["--config", str(config_path), "decode", str(store / "post-1.xml"), "--out", str(out_json)]) == 0

    decoded = json.loads(out_json.read_text(encoding="utf-8"))
    assert decoded["id"] == "post-1"
    assert decoded["slug"] == "stored-post"
    assert decoded["isPublished"] is True
    assert decoded["comments"][0]["content"] == "Hi"
