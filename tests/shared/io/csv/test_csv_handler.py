"""
tests/shared/io/csv/test_csv_handler.py - CSV 핸들러 테스트
"""

from shared.io.csv.handler import ENCODING_PRIORITIES, detect_csv_encoding, read_csv_rows


class TestDetectCsvEncoding:
    """CSV 인코딩 감지 테스트"""

    def test_priorities(self):
        assert ENCODING_PRIORITIES[0] == "utf-8-sig"
        assert ENCODING_PRIORITIES[-1] == "latin-1"

    def test_detect_utf8(self, tmp_path):
        path = tmp_path / "utf8.csv"
        path.write_text("role/app,앱 역할,IAM,Role,\n", encoding="utf-8")

        encoding, error = detect_csv_encoding(path)

        assert error is None
        assert encoding in ("utf-8", "utf-8-sig")

    def test_detect_cp949(self, tmp_path):
        """UTF-8로 디코딩되지 않는 한글 CSV"""
        path = tmp_path / "cp949.csv"
        path.write_bytes("bucket-1,버킷,S3,Bucket,ap-northeast-2\n".encode("cp949"))

        encoding, error = detect_csv_encoding(path)

        assert error is None
        assert encoding == "cp949"

    def test_missing_file(self, tmp_path):
        encoding, error = detect_csv_encoding(tmp_path / "missing.csv")

        assert encoding is None
        assert "파일을 찾을 수 없습니다" in error

    def test_directory(self, tmp_path):
        encoding, error = detect_csv_encoding(tmp_path)

        assert encoding is None
        assert "디렉토리" in error

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_bytes(b"")

        encoding, error = detect_csv_encoding(path)

        assert encoding is None
        assert "빈 파일" in error


class TestReadCsvRows:
    """read_csv_rows 테스트"""

    def test_ragged_rows_and_leading_spaces(self, tmp_path):
        """행마다 컬럼 수가 달라도 허용하고 앞 공백 제거"""
        path = tmp_path / "ragged.csv"
        path.write_text("a, b, c\nd\ne, f, g, h, i, j\n", encoding="utf-8")

        rows, encoding, error = read_csv_rows(path)

        assert error is None
        assert rows == [["a", "b", "c"], ["d"], ["e", "f", "g", "h", "i", "j"]]

    def test_blank_lines_skipped(self, tmp_path):
        path = tmp_path / "blank.csv"
        path.write_text("a,b\n\n , \nc,d\n", encoding="utf-8")

        rows, _, error = read_csv_rows(path)

        assert error is None
        assert rows == [["a", "b"], ["c", "d"]]

    def test_bom_stripped(self, tmp_path):
        path = tmp_path / "bom.csv"
        path.write_bytes("\ufeffIdentifier,Name\n".encode("utf-8"))

        rows, encoding, error = read_csv_rows(path)

        assert error is None
        assert encoding == "utf-8-sig"
        assert rows[0][0] == "Identifier"

    def test_quoted_fields(self, tmp_path):
        path = tmp_path / "quoted.csv"
        path.write_text('"arn:aws:s3:::bucket","name, with comma",S3\n', encoding="utf-8")

        rows, _, _ = read_csv_rows(path)

        assert rows == [["arn:aws:s3:::bucket", "name, with comma", "S3"]]

    def test_explicit_encoding(self, tmp_path):
        path = tmp_path / "latin.csv"
        path.write_bytes("caf\xe9,x\n".encode("latin-1"))

        rows, encoding, error = read_csv_rows(path, encoding="latin-1")

        assert error is None
        assert encoding == "latin-1"
        assert rows == [["café", "x"]]

    def test_unknown_encoding(self, tmp_path):
        path = tmp_path / "a.csv"
        path.write_text("a\n", encoding="utf-8")

        rows, encoding, error = read_csv_rows(path, encoding="no-such-encoding")

        assert rows is None
        assert "지원하지 않는 인코딩" in error

    def test_missing_file(self, tmp_path):
        rows, encoding, error = read_csv_rows(tmp_path / "missing.csv")

        assert rows is None
        assert encoding is None
        assert error is not None
