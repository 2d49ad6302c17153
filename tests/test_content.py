import pytest
from conftest import FakeRepositoryClient, dir_entry, file_entry

from ingest import ContentSerializer, is_binary_file
from ingest.content import MAX_FILE_SIZE
from ingest.models import DELIMITER, DirectoryEntry, EntryType, SectionKind


def header(path):
    return f"{DELIMITER}\nFile: {path}\n{DELIMITER}\n"


@pytest.mark.parametrize("name", ["logo.png", "LOGO.PNG", "song.mp3", "bundle.tar", "lib.so", "report.docx", "a.7z"])
def test_binary_extensions(name):
    assert is_binary_file(name)


@pytest.mark.parametrize("name", ["main.py", "README.md", "Makefile", "archive.tar.bz2", "png"])
def test_text_extensions(name):
    assert not is_binary_file(name)


def test_binary_file_gets_placeholder_without_fetch(handle):
    client = FakeRepositoryClient(listings={})
    blob = ContentSerializer(client, handle).build_content([file_entry("img/logo.png", size=5)], "img")

    assert blob.text == header("img/logo.png") + "[Binary or large file: 5 bytes]\n\n"
    assert blob.sections[0].kind is SectionKind.BINARY
    assert client.fetched == []


def test_large_file_gets_placeholder_without_fetch(handle):
    client = FakeRepositoryClient(listings={}, files={"big.txt": "x"})
    blob = ContentSerializer(client, handle).build_content([file_entry("big.txt", size=MAX_FILE_SIZE + 1)])

    assert "[Binary or large file: 1000001 bytes]" in blob.text
    assert client.fetched == []


def test_file_just_below_threshold_is_fetched(handle):
    client = FakeRepositoryClient(listings={}, files={"notes.txt": "just text"})
    blob = ContentSerializer(client, handle, "main").build_content([file_entry("notes.txt", size=999_999)])

    assert blob.text == header("notes.txt") + "just text\n\n"
    assert client.fetched == [("notes.txt", "main")]


def test_file_fetch_failure_renders_error_and_continues(handle):
    client = FakeRepositoryClient(listings={}, files={"b.txt": "bee"}, failing_paths={"a.txt"})
    blob = ContentSerializer(client, handle).build_content([file_entry("a.txt"), file_entry("b.txt")])

    assert blob.text == header("a.txt") + "[Error loading file: Not Found]\n\n" + header("b.txt") + "bee\n\n"
    assert blob.sections[0].kind is SectionKind.ERROR


def test_undecodable_body_renders_error(handle):
    class BadBase64Client(FakeRepositoryClient):
        def get_file_content(self, owner, repo, path, ref=None):
            return "not base64!"

    blob = ContentSerializer(BadBase64Client(listings={}), handle).build_content([file_entry("a.txt")])
    assert blob.sections[0].kind is SectionKind.ERROR
    assert blob.sections[0].body.startswith("[Error loading file: ")


def test_end_to_end_keeps_entry_order(handle, sample_client):
    blob = ContentSerializer(sample_client, handle).build_content(sample_client.listings[""])

    assert [section.path for section in blob.sections] == ["src/index.js", "README.md"]
    assert blob.text == (
        header("src/index.js") + "console.log('hello');\n\n\n" + header("README.md") + "# Demo\n\nA demo repository.\n\n\n"
    )


def test_order_follows_listing_not_tree_sort(handle):
    client = FakeRepositoryClient(
        listings={"lib": [file_entry("lib/z.py")]},
        files={"b.txt": "b", "lib/z.py": "z", "a.txt": "a"},
    )
    entries = [file_entry("b.txt"), dir_entry("lib"), file_entry("a.txt")]
    blob = ContentSerializer(client, handle).build_content(entries)
    assert [section.path for section in blob.sections] == ["b.txt", "lib/z.py", "a.txt"]


def test_subdirectory_failure_is_skipped_silently(handle, sample_client):
    sample_client.failing_paths.add("src")
    blob = ContentSerializer(sample_client, handle).build_content(sample_client.listings[""])

    assert [section.path for section in blob.sections] == ["README.md"]
    assert "src" not in blob.text
    assert "Error" not in blob.text


def test_other_entry_kinds_are_skipped(handle):
    entries = [
        DirectoryEntry(name="vendor", type=EntryType.SUBMODULE, path="vendor"),
        DirectoryEntry(name="link", type=EntryType.SYMLINK, path="link"),
    ]
    client = FakeRepositoryClient(listings={})
    assert ContentSerializer(client, handle).build_content(entries).sections == ()
    assert client.fetched == []
    assert client.listed == []


def test_file_exactly_at_threshold_is_fetched(handle):
    client = FakeRepositoryClient(listings={}, files={"edge.txt": "edge"})
    blob = ContentSerializer(client, handle).build_content([file_entry("edge.txt", size=MAX_FILE_SIZE)])

    assert blob.text == header("edge.txt") + "edge\n\n"
    assert blob.sections[0].kind is SectionKind.TEXT
    assert client.fetched == [("edge.txt", None)]
