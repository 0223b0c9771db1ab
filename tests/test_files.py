"""Tests for the local file capability."""
import io
import pytest

from losstrack.errors import ExportFileExistsError, InvalidSourceFileError
from losstrack.files import LocalFileStorage, SourceFile, describe_file, validate_source_file


class TestValidateSourceFile:
    """Tests for import source checks."""

    def test_accepts_txt(self):
        validate_source_file(SourceFile(uri="/tmp/a.txt", name="a.txt", size=100), max_size=1000)

    def test_accepts_text_plain_mime(self):
        validate_source_file(SourceFile(uri="/tmp/a.dat", name="a.dat", mime_type="text/plain"), max_size=1000)

    def test_rejects_other_formats(self):
        with pytest.raises(InvalidSourceFileError):
            validate_source_file(SourceFile(uri="/tmp/a.csv", name="a.csv", mime_type="text/csv"), max_size=1000)

    def test_rejects_large_files(self):
        with pytest.raises(InvalidSourceFileError):
            validate_source_file(SourceFile(uri="/tmp/a.txt", name="a.txt", size=1001), max_size=1000)

    def test_rejects_missing_uri(self):
        with pytest.raises(InvalidSourceFileError):
            validate_source_file(SourceFile(uri="", name="a.txt"), max_size=1000)


class TestLocalFileStorage:
    """Tests for reading, writing and uploads."""

    def test_write_creates_file(self, tmp_path):
        storage = LocalFileStorage(tmp_path / "out")
        location = storage.write("motivo01.txt", "Inventario 7890000000001 1.000\n")

        assert location == str(tmp_path / "out" / "motivo01.txt")
        assert (tmp_path / "out" / "motivo01.txt").read_text(encoding="utf-8") == "Inventario 7890000000001 1.000\n"

    def test_write_never_overwrites(self, tmp_path):
        storage = LocalFileStorage(tmp_path)
        storage.write("motivo01.txt", "first\n")

        with pytest.raises(ExportFileExistsError):
            storage.write("motivo01.txt", "second\n")
        assert (tmp_path / "motivo01.txt").read_text(encoding="utf-8") == "first\n"

    def test_read_keeps_line_breaks(self, tmp_path):
        (tmp_path / "a.txt").write_bytes(b"one\r\ntwo\rthree\n")
        assert LocalFileStorage(tmp_path).read_as_text(str(tmp_path / "a.txt")) == "one\r\ntwo\rthree\n"

    def test_read_strips_bom(self, tmp_path):
        (tmp_path / "a.txt").write_bytes(b"\xef\xbb\xbf7890000000001ARROZ 5KG            002599\n")
        content = LocalFileStorage(tmp_path).read_as_text(str(tmp_path / "a.txt"))
        assert content.splitlines()[0] == "7890000000001ARROZ 5KG            002599"

    def test_picker(self, tmp_path):
        (tmp_path / "produtos.txt").write_text("x", encoding="utf-8")
        storage = LocalFileStorage(tmp_path, picker=lambda: str(tmp_path / "produtos.txt"))

        source = storage.pick_source_file()

        assert source.name == "produtos.txt"
        assert source.size == 1
        assert source.mime_type == "text/plain"

    def test_no_picker(self, tmp_path):
        assert LocalFileStorage(tmp_path).pick_source_file() is None

    def test_save_upload(self, tmp_path):
        class Upload:
            filename = "produtos.txt"
            content_type = "text/plain"
            file = io.BytesIO(b"7890000000001ARROZ 5KG            002599\n")

        source = LocalFileStorage(tmp_path).save_upload(Upload(), "products")

        assert source.name == "produtos.txt"
        assert source.mime_type == "text/plain"
        assert source.size == 41
        assert source.uri.startswith(str(tmp_path / "products_"))

    def test_describe_file(self, tmp_path):
        path = tmp_path / "a.txt"
        path.write_text("abc", encoding="utf-8")
        assert describe_file(path).size == 3

    def test_upload_over_declared_size_not_written(self, tmp_path):
        class Upload:
            filename = "produtos.txt"
            content_type = "text/plain"
            size = 100
            file = io.BytesIO(b"x" * 100)

        with pytest.raises(InvalidSourceFileError):
            LocalFileStorage(tmp_path / "uploads").save_upload(Upload(), "products", max_size=10)
        assert not (tmp_path / "uploads").exists()

    def test_upload_over_size_while_streaming(self, tmp_path):
        class Upload:
            filename = "produtos.txt"
            content_type = "text/plain"
            file = io.BytesIO(b"x" * 100)

        storage = LocalFileStorage(tmp_path / "uploads")
        with pytest.raises(InvalidSourceFileError):
            storage.save_upload(Upload(), "products", max_size=10)
        assert list((tmp_path / "uploads").iterdir()) == []
