"""Integration tests for the batch converter."""

import asyncio
import json

import bson
import pytest
from bson.int64 import Int64

from bsonverter import BSONConverter, ConversionFailure, ConversionSuccess, ErrorType, InputBuffer


def make_documents(count):
    return b"".join(bson.encode({"index": i, "label": f"doc-{i}"}) for i in range(count))


class TestBSONConverterIntegration:
    """Integration tests for the complete conversion pipeline."""

    def setup_method(self):
        """Set up test fixtures."""
        self.converter = BSONConverter()

    def teardown_method(self):
        self.converter.close()

    @pytest.mark.asyncio
    async def test_convert_single_document(self, single_document_bytes):
        """One document becomes an object root."""
        results = await self.converter.convert_all([InputBuffer("data.bson", single_document_bytes)])

        assert len(results) == 1
        result = results[0]
        assert isinstance(result, ConversionSuccess)
        assert result.original_name == "data.bson"
        assert result.output_name == "data.json"
        assert result.document_count == 1
        assert result.warnings == []
        assert json.loads(result.output_text) == {"a": 1}

    @pytest.mark.asyncio
    async def test_convert_two_documents(self, two_document_bytes):
        """Two documents become an array root in buffer order."""
        results = await self.converter.convert_all([("pair.db", two_document_bytes)])

        assert results[0].success
        assert json.loads(results[0].output_text) == [
            {"id": 1, "name": "first"},
            {"id": 2, "name": "second"},
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("count", [1, 2, 3, 7])
    async def test_document_count_matches_root_shape(self, count):
        results = await self.converter.convert_all([("many.bson", make_documents(count))])

        result = results[0]
        assert result.success
        assert result.document_count == count
        parsed = json.loads(result.output_text)
        if count == 1:
            assert parsed == {"index": 0, "label": "doc-0"}
        else:
            assert isinstance(parsed, list)
            assert [doc["index"] for doc in parsed] == list(range(count))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["empty.bson", "empty.db", "", "whatever"])
    async def test_convert_empty_buffer(self, name):
        """An empty buffer always fails with EMPTY_INPUT."""
        results = await self.converter.convert_all([(name, b"")])

        assert isinstance(results[0], ConversionFailure)
        assert results[0].error_type == ErrorType.EMPTY_INPUT
        assert results[0].original_name == name

    @pytest.mark.asyncio
    async def test_convert_zero_size(self, zero_size_bytes):
        """A declared size of zero fails the buffer as corrupt."""
        results = await self.converter.convert_all([("zero.bson", zero_size_bytes)])

        assert results[0].error_type == ErrorType.FRAMING
        assert "Invalid BSON document size in zero.bson" in results[0].error_message
        assert "corrupt" in results[0].error_message

    @pytest.mark.asyncio
    async def test_corruption_discards_earlier_documents(self, truncated_tail_bytes):
        """Documents before a corrupt prefix are not surfaced by default."""
        results = await self.converter.convert_all([("tail.bson", truncated_tail_bytes)])

        assert not results[0].success
        assert results[0].error_type == ErrorType.FRAMING

    @pytest.mark.asyncio
    async def test_decode_failure(self, bad_terminator_bytes):
        """A document the codec rejects fails the buffer with DECODE."""
        data = bson.encode({"ok": 1}) + bad_terminator_bytes

        results = await self.converter.convert_all([("broken.bson", data)])

        assert results[0].error_type == ErrorType.DECODE
        assert "broken.bson" in results[0].error_message
        assert "#1" in results[0].error_message

    @pytest.mark.asyncio
    async def test_no_documents_located(self):
        """A non-empty buffer too short for any prefix fails with EMPTY_RESULT."""
        results = await self.converter.convert_all([("tiny.bson", b"\x01\x02\x03")])

        assert results[0].error_type == ErrorType.EMPTY_RESULT
        assert "Could not parse BSON documents from tiny.bson" in results[0].error_message

    @pytest.mark.asyncio
    async def test_batch_order_and_isolation(self, single_document_bytes, two_document_bytes,
                                             zero_size_bytes):
        """Results follow input order and a failure does not affect siblings."""
        results = await self.converter.convert_all([
            ("a.bson", single_document_bytes),
            ("b.bson", zero_size_bytes),
            ("c.db", two_document_bytes),
            ("d.bson", b""),
        ])

        assert [r.original_name for r in results] == ["a.bson", "b.bson", "c.db", "d.bson"]
        assert [r.success for r in results] == [True, False, True, False]
        assert json.loads(results[0].output_text) == {"a": 1}
        assert len(json.loads(results[2].output_text)) == 2

    @pytest.mark.asyncio
    async def test_empty_batch(self):
        assert await self.converter.convert_all([]) == []

    @pytest.mark.asyncio
    async def test_int64_round_trips_as_string(self):
        data = bson.encode({"big": Int64(9223372036854775807), "small": 42})

        results = await self.converter.convert_all([("ints.bson", data)])

        text = results[0].output_text
        assert '"9223372036854775807"' in text
        assert json.loads(text) == {"big": "9223372036854775807", "small": 42}

    @pytest.mark.asyncio
    async def test_quoted_keys_are_repaired(self, quoted_key_bytes):
        results = await self.converter.convert_all([("quoted.bson", quoted_key_bytes)])

        assert json.loads(results[0].output_text) == {"foo": "bar", "plain": {"nested": True}}

    @pytest.mark.asyncio
    async def test_mapping_inputs(self, single_document_bytes):
        results = await self.converter.convert_all([{"name": "m.bson", "bytes": single_document_bytes}])

        assert results[0].output_name == "m.json"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("parallel", [True, False])
    async def test_malformed_entry_is_isolated(self, single_document_bytes, parallel):
        """A batch entry that cannot become a buffer fails alone, in its own slot."""
        with BSONConverter(enable_parallel_processing=parallel) as converter:
            results = await converter.convert_all([
                ("good.bson", single_document_bytes),
                ("bad.bson", None),
                {"bytes": single_document_bytes},
                ("last.bson", single_document_bytes),
            ])

        assert [r.success for r in results] == [True, False, False, True]
        assert isinstance(results[1], ConversionFailure)
        assert results[1].original_name == "bad.bson"
        assert results[1].error_type == ErrorType.UNEXPECTED
        assert results[2].original_name == "<input 2>"
        assert results[3].original_name == "last.bson"

    @pytest.mark.asyncio
    async def test_memory_sampled_per_buffer(self, single_document_bytes, monkeypatch):
        samples = []
        monkeypatch.setattr(self.converter.profiler, "sample_performance",
                            lambda: samples.append(1))

        await self.converter.convert_all([
            (f"{i}.bson", single_document_bytes) for i in range(3)
        ])

        assert len(samples) == 3
        assert self.converter.profiler.current_operation is None

    @pytest.mark.asyncio
    async def test_unexpected_error_is_isolated(self, single_document_bytes, monkeypatch):
        """An unexpected exception in one buffer becomes that buffer's failure."""
        converter = BSONConverter(enable_parallel_processing=False)
        real_encode = converter.encoder.encode
        calls = []

        def flaky_encode(values):
            calls.append(values)
            if len(calls) == 1:
                raise RuntimeError("encoder exploded")
            return real_encode(values)

        monkeypatch.setattr(converter.encoder, "encode", flaky_encode)

        results = await converter.convert_all([
            ("first.bson", single_document_bytes),
            ("second.bson", single_document_bytes),
        ])

        assert results[0].error_type == ErrorType.UNEXPECTED
        assert "first.bson" in results[0].error_message
        assert "encoder exploded" in results[0].error_message
        assert results[1].success

    @pytest.mark.asyncio
    async def test_profiling_records_batch(self, single_document_bytes, zero_size_bytes):
        await self.converter.convert_all([
            ("a.bson", single_document_bytes),
            ("b.bson", zero_size_bytes),
        ])

        metrics = self.converter.profiler.metrics_history[-1]
        assert metrics.buffers_converted == 1
        assert metrics.buffers_failed == 1
        assert metrics.documents_converted == 1
        assert metrics.input_size == len(single_document_bytes) + len(zero_size_bytes)

    @pytest.mark.asyncio
    async def test_cancellation_at_buffer_granularity(self, single_document_bytes):
        """A cancelled batch raises CancelledError without partial results."""
        converter = BSONConverter(enable_parallel_processing=False)
        task = asyncio.ensure_future(converter.convert_all([
            (f"{i}.bson", single_document_bytes) for i in range(50)
        ]))
        await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert converter.profiler.current_operation is None


class TestBSONConverterOptions:
    """Tests for converter configuration."""

    @pytest.mark.asyncio
    async def test_sequential_matches_parallel(self, two_document_bytes, zero_size_bytes):
        inputs = [("a.bson", two_document_bytes), ("b.bson", zero_size_bytes)] * 3

        with BSONConverter(enable_parallel_processing=True, max_workers=4) as parallel:
            parallel_results = await parallel.convert_all(inputs)
        with BSONConverter(enable_parallel_processing=False) as sequential:
            sequential_results = await sequential.convert_all(inputs)

        assert parallel_results == sequential_results

    @pytest.mark.asyncio
    async def test_quoted_keys_kept_when_disabled(self, quoted_key_bytes):
        with BSONConverter(strip_quoted_keys=False) as converter:
            results = await converter.convert_all([("q.bson", quoted_key_bytes)])

        assert json.loads(results[0].output_text) == {'"foo"': "bar", "plain": {'"nested"': True}}

    @pytest.mark.asyncio
    async def test_keep_partial_on_corruption(self, truncated_tail_bytes):
        """Partial mode keeps documents located before the corrupt prefix."""
        with BSONConverter(keep_partial_on_corruption=True) as converter:
            results = await converter.convert_all([("tail.bson", truncated_tail_bytes)])

        result = results[0]
        assert result.success
        assert result.document_count == 1
        assert json.loads(result.output_text) == {"ok": True}
        assert len(result.warnings) == 1
        assert "Invalid BSON document size in tail.bson" in result.warnings[0]

    @pytest.mark.asyncio
    async def test_keep_partial_without_located_documents(self, zero_size_bytes):
        """Partial mode still fails when nothing was located."""
        with BSONConverter(keep_partial_on_corruption=True) as converter:
            results = await converter.convert_all([("zero.bson", zero_size_bytes)])

        assert results[0].error_type == ErrorType.FRAMING

    def test_compact_indent(self, single_document_bytes):
        with BSONConverter(indent=None) as converter:
            result = converter.convert_buffer(InputBuffer("c.bson", single_document_bytes))

        assert result.output_text == '{"a": 1}'

    def test_convert_all_sync(self, single_document_bytes):
        with BSONConverter() as converter:
            results = converter.convert_all_sync([("s.bson", single_document_bytes)])

        assert results[0].success

    def test_profiling_disabled(self, single_document_bytes):
        with BSONConverter(enable_profiling=False) as converter:
            results = converter.convert_all_sync([("s.bson", single_document_bytes)])

            assert converter.profiler is None
        assert results[0].success

    def test_close_is_idempotent(self):
        converter = BSONConverter()
        converter.close()
        converter.close()

        assert converter.executor is None
