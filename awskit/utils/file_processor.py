"""File processing utilities for awskit.

Loads input records for bulk operations from CSV, JSON or JSONL files.
"""

import csv
import io
import json
from pathlib import Path
from typing import List, Union

from awskit.core.errors import ValidationError
from awskit.core.logging import logger
from awskit.utils.types import Record


class FileProcessor:
    """Parse local record files into lists of dicts."""

    MAX_FILE_SIZE_MB = 50
    SUPPORTED_EXTENSIONS = [".csv", ".json", ".jsonl"]

    @staticmethod
    def read_file(path: Path) -> bytes:
        """Read a local file.

        Args:
            path: File path

        Returns:
            File content as bytes

        Raises:
            ValidationError: If the file is missing, unreadable or too large
        """
        if not path.is_file():
            raise ValidationError(
                "Input file not found. Ensure the file path is correct.",
                field="input_file",
                value=str(path),
            )

        size = path.stat().st_size
        max_size_bytes = FileProcessor.MAX_FILE_SIZE_MB * 1024 * 1024
        if size > max_size_bytes:
            raise ValidationError(
                f"File too large: {size / (1024 * 1024):.2f}MB "
                f"(max: {FileProcessor.MAX_FILE_SIZE_MB}MB)",
                field="input_file",
                value=str(path),
            )

        try:
            return path.read_bytes()
        except OSError as e:
            raise ValidationError(f"Failed to read file '{path}': {e}", field="input_file")

    @staticmethod
    def parse_csv(content: bytes, filename: str) -> List[Record]:
        """Parse CSV file content using the header row for keys.

        Args:
            content: CSV file content as bytes
            filename: Original filename for logging

        Returns:
            All rows as list of dicts

        Raises:
            ValidationError: If CSV decoding or parsing fails, or a row has
                more fields than the header (names the row number)
        """
        try:
            text_content = content.decode("utf-8-sig")
            reader = csv.DictReader(io.StringIO(text_content))
            rows = []
            for row in reader:
                # DictReader files extra fields under the None key
                if None in row:
                    raise ValidationError(
                        f"CSV file '{filename}' row {reader.line_num} has more fields than the header",
                        field="input_file",
                        line=reader.line_num,
                    )
                if any((value or "").strip() for value in row.values()):
                    rows.append(dict(row))
        except UnicodeDecodeError as e:
            raise ValidationError(f"CSV file '{filename}' has invalid encoding: {str(e)}")
        except csv.Error as e:
            raise ValidationError(f"CSV file '{filename}' parsing failed: {str(e)}")

        logger.info("csv_parsed", filename=filename, rows=len(rows))
        return rows

    @staticmethod
    def parse_json(content: bytes, filename: str) -> List[Record]:
        """Parse JSON file content (an array of objects or a single object).

        Args:
            content: JSON file content as bytes
            filename: Original filename for logging

        Returns:
            List of records

        Raises:
            ValidationError: If JSON parsing fails or records are not objects
        """
        try:
            data = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ValidationError(f"JSON file '{filename}' parsing failed: {str(e)}")

        records = data if isinstance(data, list) else [data]
        for index, record in enumerate(records):
            if not isinstance(record, dict):
                raise ValidationError(
                    f"JSON file '{filename}' record {index} is not an object",
                    field="input_file",
                    value=type(record).__name__,
                )

        logger.info("json_parsed", filename=filename, rows=len(records))
        return records

    @staticmethod
    def parse_jsonl(content: bytes, filename: str) -> List[Record]:
        """Parse JSON Lines content, skipping blank lines.

        Args:
            content: JSONL file content as bytes
            filename: Original filename for logging

        Returns:
            List of records

        Raises:
            ValidationError: If a line is not a JSON object (names the line number)
        """
        try:
            text_content = content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ValidationError(f"JSONL file '{filename}' has invalid encoding: {str(e)}")

        records = []
        for line_number, line in enumerate(text_content.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as e:
                raise ValidationError(
                    f"JSONL file '{filename}' line {line_number} parsing failed: {str(e)}",
                    field="input_file",
                    line=line_number,
                )
            if not isinstance(record, dict):
                raise ValidationError(
                    f"JSONL file '{filename}' line {line_number} is not an object",
                    field="input_file",
                    line=line_number,
                )
            records.append(record)

        logger.info("jsonl_parsed", filename=filename, rows=len(records))
        return records

    @staticmethod
    def load_records(path: Union[str, Path]) -> List[Record]:
        """Load records from a CSV, JSON or JSONL file based on its extension.

        Args:
            path: Path to the input file

        Returns:
            List of record dicts

        Raises:
            ValidationError: If the extension is unsupported or parsing fails
        """
        path = Path(path)
        extension = path.suffix.lower()

        if extension not in FileProcessor.SUPPORTED_EXTENSIONS:
            raise ValidationError(
                f"Unsupported file format: {extension or '(none)'}. "
                f"Supported formats: {', '.join(FileProcessor.SUPPORTED_EXTENSIONS)}",
                field="input_file",
                value=str(path),
            )

        content = FileProcessor.read_file(path)

        if extension == ".csv":
            return FileProcessor.parse_csv(content, path.name)
        if extension == ".json":
            return FileProcessor.parse_json(content, path.name)
        return FileProcessor.parse_jsonl(content, path.name)


def load_records(path: Union[str, Path]) -> List[Record]:
    """Load records from a CSV, JSON or JSONL file."""
    return FileProcessor.load_records(path)
