"""Unit tests for chunk_items."""

import pytest

from awskit.core.batch import chunk_items
from awskit.core.errors import BatchConfigurationError


class TestChunkItems:
    """Test order-preserving chunking."""

    def test_splits_with_remainder(self):
        """Test 53 items in batches of 25 give 25, 25, 3."""
        batches = chunk_items(list(range(53)), 25)

        assert [len(b) for b in batches] == [25, 25, 3]
        assert [item for batch in batches for item in batch] == list(range(53))

    def test_exact_multiple(self):
        """Test no empty trailing batch when size divides evenly."""
        batches = chunk_items(list(range(50)), 25)

        assert [len(b) for b in batches] == [25, 25]

    def test_empty_input(self):
        """Test empty input yields no batches."""
        assert chunk_items([], 25) == []

    def test_batch_size_larger_than_input(self):
        """Test a single partial batch."""
        assert chunk_items(["a", "b"], 25) == [["a", "b"]]

    def test_accepts_any_sequence(self):
        """Test tuples are chunked into lists."""
        assert chunk_items(("a", "b", "c"), 2) == [["a", "b"], ["c"]]

    @pytest.mark.parametrize("batch_size", [0, -1, 2.5, True, "25"])
    def test_invalid_batch_size_raises(self, batch_size):
        """Test non-positive or non-integer sizes raise."""
        with pytest.raises(BatchConfigurationError, match="batch_size"):
            chunk_items([1, 2, 3], batch_size)
