"""Batch conversion of BSON buffers to JSON text."""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import nullcontext
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from .decoder import DocumentDecoder
from .encoder import TextEncoder
from .error_handler import ErrorHandler
from .framer import DocumentFramer
from .models import (
    ConversionFailure,
    ConversionResult,
    ConversionSuccess,
    DocumentRange,
    InputBuffer,
)
from .normalizer import KeyNormalizer
from .profiler import PerformanceProfiler
from .types import (
    BSONConverterInterface,
    EmptyInputError,
    EmptyResultError,
    FramingError,
)
from .utils.naming import output_name_for

InputLike = Union[InputBuffer, Tuple[str, bytes], Mapping[str, Any]]


class BSONConverter(BSONConverterInterface):
    """
    Converts named buffers of concatenated BSON documents to JSON text.

    Each buffer runs through framing, decoding, key normalization and
    encoding on its own. A failure in one buffer becomes that buffer's
    failure result and never affects the others; results come back in
    input order.
    """

    def __init__(self, logger: Optional[logging.Logger] = None,
                 enable_parallel_processing: bool = True,
                 max_workers: Optional[int] = None,
                 strip_quoted_keys: bool = True,
                 indent: Optional[int] = 2,
                 keep_partial_on_corruption: bool = False,
                 enable_profiling: bool = True):
        """
        Initialize the converter.

        Args:
            logger: Optional logger instance
            enable_parallel_processing: Convert buffers of a batch on a thread pool
            max_workers: Maximum number of worker threads (None = auto-detect)
            strip_quoted_keys: Remove literal double quotes wrapping object keys
            indent: JSON indentation width (None for compact output)
            keep_partial_on_corruption: On a corrupt length prefix, keep the
                documents located before it instead of failing the buffer
            enable_profiling: Record duration and memory metrics per batch
        """
        self.logger = logger or logging.getLogger(__name__)
        self.enable_parallel_processing = enable_parallel_processing
        self.max_workers = max_workers
        self.keep_partial_on_corruption = keep_partial_on_corruption

        if enable_parallel_processing:
            self.executor = ThreadPoolExecutor(max_workers=max_workers,
                                               thread_name_prefix="bsonverter")
        else:
            self.executor = None

        self.error_handler = ErrorHandler(self.logger)
        self.framer = DocumentFramer(self.logger)
        self.decoder = DocumentDecoder(logger=self.logger)
        self.normalizer = KeyNormalizer(enabled=strip_quoted_keys, logger=self.logger)
        self.encoder = TextEncoder(indent=indent, logger=self.logger)
        self.profiler = PerformanceProfiler(self.logger) if enable_profiling else None

    def __enter__(self) -> "BSONConverter":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        """Release the worker pool."""
        if self.executor is not None:
            self.executor.shutdown(wait=True)
            self.executor = None

    async def convert_all(self, inputs: Sequence[InputLike]) -> List[ConversionResult]:
        """
        Convert a batch of named buffers.

        Args:
            inputs: InputBuffer instances, ``(name, bytes)`` pairs or
                mappings with ``name`` and ``bytes`` keys. A malformed
                entry becomes a failure result of its own.

        Returns:
            One ConversionResult per input, in input order
        """
        prepared = [self._prepare_input(index, item) for index, item in enumerate(inputs)]
        input_size = sum(len(item) for item in prepared if isinstance(item, InputBuffer))

        self.logger.info(f"Starting conversion of {len(prepared)} buffers ({input_size/1024:.1f}KB)")

        profiling = self.profiler is not None and self.profiler.current_operation is None
        profile = (self.profiler.profile_operation("convert_all", input_size)
                   if profiling else nullcontext())

        with profile:
            if self.executor is not None:
                loop = asyncio.get_running_loop()
                results = list(await asyncio.gather(*(
                    self._run_in_executor(loop, item) for item in prepared
                )))
            else:
                results = []
                for item in prepared:
                    results.append(self._convert_prepared(item))
                    # Yield between buffers so cancellation lands on a buffer boundary
                    await asyncio.sleep(0)

            successes = [r for r in results if r.success]
            if profiling:
                self.profiler.stop_profiling(
                    output_size=sum(len(r.output_text.encode("utf-8")) for r in successes),
                    buffers_converted=len(successes),
                    buffers_failed=len(results) - len(successes),
                    documents_converted=sum(r.document_count for r in successes),
                )

        self.logger.info(f"Conversion finished: {len(successes)} of {len(results)} buffers converted")
        return results

    def convert_all_sync(self, inputs: Sequence[InputLike]) -> List[ConversionResult]:
        """Run ``convert_all`` to completion from synchronous code."""
        return asyncio.run(self.convert_all(inputs))

    def convert_buffer(self, buffer: InputBuffer) -> ConversionResult:
        """
        Convert one named buffer.

        Args:
            buffer: Buffer holding zero or more concatenated BSON documents

        Returns:
            ConversionSuccess with the JSON text, or ConversionFailure
            naming the buffer and the cause
        """
        try:
            return self._convert(buffer)
        except Exception as e:
            return self.error_handler.to_failure(buffer.name, e)

    def _convert(self, buffer: InputBuffer) -> ConversionSuccess:
        validation = self.error_handler.validate_input(buffer)
        if not validation.is_valid:
            raise EmptyInputError("; ".join(error.message for error in validation.errors))
        for warning in validation.warnings:
            self.logger.warning(warning)

        warnings: List[str] = []
        try:
            ranges = self.framer.frame(buffer.data, buffer.name)
        except FramingError as e:
            ranges = self._recover_ranges(e)
            warnings.append(f"{e} Kept {len(ranges)} document(s) located before "
                            f"offset {e.context['offset']}.")
            self.logger.warning(warnings[-1])

        if not ranges:
            raise EmptyResultError(
                f"Could not parse BSON documents from {buffer.name}. It may be invalid."
            )

        documents = []
        for index, document_range in enumerate(ranges):
            value = self.decoder.decode(document_range.slice(buffer.data), buffer.name, index)
            documents.append(self.normalizer.normalize(value))

        output_text = self.encoder.encode(documents)

        self.logger.info(f"Converted {buffer.name} ({buffer.get_size_kb():.1f}KB): {len(documents)} documents")
        return ConversionSuccess(
            original_name=buffer.name,
            output_text=output_text,
            output_name=output_name_for(buffer.name),
            document_count=len(documents),
            warnings=warnings,
        )

    def _recover_ranges(self, error: FramingError) -> List[DocumentRange]:
        """Return the ranges to keep after a framing error, or re-raise it."""
        ranges = error.context.get("ranges") or []
        if not self.keep_partial_on_corruption or not ranges:
            raise error
        return ranges

    async def _run_in_executor(self, loop: asyncio.AbstractEventLoop,
                               item: Union[InputBuffer, ConversionFailure]) -> ConversionResult:
        if isinstance(item, ConversionFailure):
            return item
        result = await loop.run_in_executor(self.executor, self.convert_buffer, item)
        self._sample()
        return result

    def _convert_prepared(self, item: Union[InputBuffer, ConversionFailure]) -> ConversionResult:
        if isinstance(item, ConversionFailure):
            return item
        result = self.convert_buffer(item)
        self._sample()
        return result

    def _sample(self):
        if self.profiler is not None:
            self.profiler.sample_performance()

    def _prepare_input(self, index: int,
                       item: InputLike) -> Union[InputBuffer, ConversionFailure]:
        """Coerce one batch entry, turning a malformed entry into its own failure."""
        try:
            return self._coerce_input(item)
        except Exception as e:
            return self.error_handler.to_failure(self._input_name(index, item), e)

    @staticmethod
    def _input_name(index: int, item: Any) -> str:
        name = None
        if isinstance(item, Mapping):
            name = item.get("name")
        elif isinstance(item, (tuple, list)) and item:
            name = item[0]
        return name if isinstance(name, str) else f"<input {index}>"

    @staticmethod
    def _coerce_input(item: InputLike) -> InputBuffer:
        if isinstance(item, InputBuffer):
            return item
        if isinstance(item, Mapping):
            return InputBuffer(name=item["name"], data=item["bytes"])
        name, data = item
        return InputBuffer(name=name, data=data)
