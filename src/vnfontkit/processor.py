"""WorkbookProcessor -- orchestrator and public API for vnfontkit.

Converts every text cell of a workbook:

1. Open the document through the injected opener.
2. Resolve the sheets to convert.
3. Run the cell pipeline.  A dispatcher thread reads the cells and queues
   one :class:`CellJob` per non-blank cell, a pool of workers converts the
   jobs, and the caller's thread collects the results and writes them back.
4. Save the document under a derived, timestamped name.
5. Assemble and return a :class:`ProcessingResult`.

The document is never touched by two threads at once.  Only the dispatcher
reads it and only the collector writes it, and each single read or write
happens under a handoff lock that neither side holds while waiting on a
queue.  Writes therefore keep pace with the scan, and the cells in flight
are bounded by the queue sizes and worker count.  Workers only ever see
jobs and results.
"""

from __future__ import annotations

import asyncio
import logging
import os
import queue
import threading
import time
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from datetime import datetime

from openpyxl.utils import get_column_letter

from vnfontkit.backends import OpenpyxlDocument
from vnfontkit.config import ConverterConfig
from vnfontkit.errors import ConversionError, ConversionIssue, ErrorCode
from vnfontkit.models import CellJob, ConversionResult, ProcessingResult, StyledRun
from vnfontkit.protocols import DocumentOpener, SpreadsheetDocument
from vnfontkit.transformer import RunTransformer

logger = logging.getLogger("vnfontkit")

ProgressCallback = Callable[[int], None]

# End-of-stream marker for both queues.
_CLOSED = object()


@dataclass
class _DispatchReport:
    """Returned by the dispatcher once its last job is queued."""

    dispatched: int = 0
    cancelled: bool = False
    issues: list[ConversionIssue] = field(default_factory=list)


@dataclass
class _CollectReport:
    processed: int = 0
    converted: int = 0
    failed: int = 0
    issues: list[ConversionIssue] = field(default_factory=list)


class WorkbookProcessor:
    """Top-level orchestrator for converting one workbook.

    Parameters
    ----------
    config:
        Converter configuration.  Uses defaults when *None*.
    opener:
        Callable that opens a workbook path.  Defaults to
        :meth:`OpenpyxlDocument.open`.
    transformer:
        Run transformer shared by every worker.  Built from *config* when
        *None*.
    """

    def __init__(
        self,
        config: ConverterConfig | None = None,
        opener: DocumentOpener | None = None,
        transformer: RunTransformer | None = None,
    ) -> None:
        self._config = config or ConverterConfig()
        self._opener = opener or OpenpyxlDocument.open
        self._transformer = transformer or RunTransformer(self._config)

    @property
    def config(self) -> ConverterConfig:
        return self._config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(
        self,
        input_path: str,
        sheet_name: str | None = None,
        progress: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ProcessingResult:
        """Convert a workbook and save the result next to it.

        Parameters
        ----------
        input_path:
            Path of the workbook to convert.
        sheet_name:
            Convert only this sheet.  All worksheets when *None*.
        progress:
            Called from the caller's thread with the number of cells
            written so far.
        cancel_event:
            When set, no further cells are dispatched.  Cells already
            queued are still converted and the partial workbook is saved.

        Returns
        -------
        ProcessingResult
            Counters, per-cell issues and the output path.

        Raises
        ------
        ConversionError
            ``E_OPEN_FAILED``, ``E_SHEET_NOT_FOUND`` or ``E_SAVE_FAILED``.
        """
        overall_start = time.monotonic()
        filename = os.path.basename(input_path)
        if cancel_event is None:
            cancel_event = threading.Event()

        # ==============================================================
        # Step 1: Open
        # ==============================================================
        document = self._open(input_path, filename)

        try:
            # ==========================================================
            # Step 2: Resolve Sheets
            # ==========================================================
            sheets = self._resolve_sheets(document, sheet_name, filename)

            # ==========================================================
            # Step 3: Cell Pipeline
            # ==========================================================
            dispatch, collect = self._run_pipeline(document, sheets, progress, cancel_event)

            # ==========================================================
            # Step 4: Save
            # ==========================================================
            output_path = derive_output_path(input_path, self._config)
            self._save(document, output_path, filename)
        finally:
            self._close(document, filename)

        # ==============================================================
        # Step 5: Assemble Result
        # ==============================================================
        issues = dispatch.issues + collect.issues
        warnings: list[str] = []
        if dispatch.cancelled:
            warnings.append(ErrorCode.W_CANCELLED.value)
            logger.warning(
                "vnfontkit | file=%s | code=%s | detail=cancelled after %d cells, "
                "partial output saved",
                filename,
                ErrorCode.W_CANCELLED.value,
                dispatch.dispatched,
            )
        elif dispatch.dispatched == 0:
            warnings.append(ErrorCode.W_NO_TEXT_CELLS.value)
            logger.warning(
                "vnfontkit | file=%s | code=%s | detail=no text cells in %s",
                filename,
                ErrorCode.W_NO_TEXT_CELLS.value,
                sheets,
            )

        elapsed = time.monotonic() - overall_start
        logger.info(
            "vnfontkit | file=%s | sheets=%d | dispatched=%d | processed=%d | "
            "converted=%d | failed=%d | time=%.1fs",
            filename,
            len(sheets),
            dispatch.dispatched,
            collect.processed,
            collect.converted,
            collect.failed + len(dispatch.issues),
            elapsed,
        )

        return ProcessingResult(
            input_path=input_path,
            output_path=output_path,
            sheets=sheets,
            cells_dispatched=dispatch.dispatched,
            cells_processed=collect.processed,
            cells_converted=collect.converted,
            cells_failed=collect.failed + len(dispatch.issues),
            cancelled=dispatch.cancelled,
            errors=list(dict.fromkeys(issue.code.value for issue in issues)),
            warnings=warnings,
            error_details=issues,
            processing_time_seconds=elapsed,
        )

    async def arun(
        self,
        input_path: str,
        sheet_name: str | None = None,
        progress: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ProcessingResult:
        """Async wrapper around :meth:`run`.

        Offloads the synchronous ``run()`` call to a thread via
        ``asyncio.to_thread()``.
        """
        return await asyncio.to_thread(self.run, input_path, sheet_name, progress, cancel_event)

    # ------------------------------------------------------------------
    # Preconditions and persistence
    # ------------------------------------------------------------------

    def _open(self, input_path: str, filename: str) -> SpreadsheetDocument:
        try:
            return self._opener(input_path)
        except Exception as exc:
            logger.error(
                "vnfontkit | file=%s | code=%s | detail=%s",
                filename,
                ErrorCode.E_OPEN_FAILED.value,
                exc,
            )
            raise ConversionError(
                ErrorCode.E_OPEN_FAILED, f"Failed to open workbook {input_path}: {exc}"
            ) from exc

    def _resolve_sheets(
        self, document: SpreadsheetDocument, sheet_name: str | None, filename: str
    ) -> list[str]:
        available = document.sheet_names()
        if sheet_name is None:
            return available
        if sheet_name not in available:
            logger.error(
                "vnfontkit | file=%s | code=%s | detail=sheet %r not in %s",
                filename,
                ErrorCode.E_SHEET_NOT_FOUND.value,
                sheet_name,
                available,
            )
            raise ConversionError(
                ErrorCode.E_SHEET_NOT_FOUND, f"Sheet '{sheet_name}' not found"
            )
        return [sheet_name]

    def _save(self, document: SpreadsheetDocument, output_path: str, filename: str) -> None:
        try:
            document.save_as(output_path)
        except Exception as exc:
            logger.error(
                "vnfontkit | file=%s | code=%s | detail=%s",
                filename,
                ErrorCode.E_SAVE_FAILED.value,
                exc,
            )
            raise ConversionError(
                ErrorCode.E_SAVE_FAILED, f"Failed to save workbook to {output_path}: {exc}"
            ) from exc

    @staticmethod
    def _close(document: SpreadsheetDocument, filename: str) -> None:
        try:
            document.close()
        except Exception as exc:
            logger.warning("vnfontkit | file=%s | close failed: %s", filename, exc)

    # ------------------------------------------------------------------
    # Cell pipeline
    # ------------------------------------------------------------------

    def _run_pipeline(
        self,
        document: SpreadsheetDocument,
        sheets: list[str],
        progress: ProgressCallback | None,
        cancel_event: threading.Event,
    ) -> tuple[_DispatchReport, _CollectReport]:
        config = self._config
        worker_count = max(1, config.worker_count)
        jobs: queue.Queue = queue.Queue(maxsize=max(1, config.job_queue_size))
        results: queue.Queue = queue.Queue(maxsize=max(1, config.result_queue_size))
        # Held for exactly one document call at a time, never across a queue operation.
        handoff = threading.Lock()

        # Dispatcher + workers + closer must all run at once.
        with ThreadPoolExecutor(
            max_workers=worker_count + 2, thread_name_prefix="vnfontkit"
        ) as executor:
            dispatcher = executor.submit(
                self._dispatch, document, handoff, sheets, jobs, worker_count, cancel_event
            )
            workers = [executor.submit(self._work, jobs, results) for _ in range(worker_count)]
            executor.submit(_close_when_done, workers, results)
            collect = self._collect(document, handoff, results, progress, cancel_event)

        return dispatcher.result(), collect

    # -- dispatcher ----------------------------------------------------

    def _dispatch(
        self,
        document: SpreadsheetDocument,
        handoff: threading.Lock,
        sheets: list[str],
        jobs: queue.Queue,
        worker_count: int,
        cancel_event: threading.Event,
    ) -> _DispatchReport:
        report = _DispatchReport()
        try:
            for sheet in sheets:
                self._dispatch_sheet(document, handoff, sheet, jobs, cancel_event, report)
                if report.cancelled:
                    break
        finally:
            for _ in range(worker_count):
                jobs.put(_CLOSED)

        logger.debug(
            "vnfontkit | dispatch | done | dispatched=%d | skipped=%d | cancelled=%s",
            report.dispatched,
            len(report.issues),
            report.cancelled,
        )
        return report

    def _dispatch_sheet(
        self,
        document: SpreadsheetDocument,
        handoff: threading.Lock,
        sheet: str,
        jobs: queue.Queue,
        cancel_event: threading.Event,
        report: _DispatchReport,
    ) -> None:
        try:
            with handoff:
                rows = iter(document.iter_rows(sheet))
        except Exception as exc:
            self._row_failed(report, sheet, f"Failed to read rows: {exc}")
            return

        row_index = 0
        while True:
            row_index += 1
            try:
                with handoff:
                    row = next(rows)
            except StopIteration:
                return
            except Exception as exc:
                # A generator is finished after raising; other iterators go on.
                self._row_failed(report, sheet, f"Failed to read row {row_index}: {exc}")
                continue

            for column_index, text in enumerate(row, start=1):
                if cancel_event.is_set():
                    report.cancelled = True
                    return
                if not text or not text.strip():
                    continue
                with handoff:
                    job = self._read_cell(document, sheet, row_index, column_index, text, report)
                if job is not None:
                    jobs.put(job)
                    report.dispatched += 1

    @staticmethod
    def _row_failed(report: _DispatchReport, sheet: str, message: str) -> None:
        report.issues.append(
            _cell_issue(ErrorCode.E_CELL_READ, message, sheet, None, "dispatch")
        )
        logger.warning(
            "vnfontkit | dispatch | sheet=%s | code=%s | detail=%s",
            sheet,
            ErrorCode.E_CELL_READ.value,
            message,
        )

    def _read_cell(
        self,
        document: SpreadsheetDocument,
        sheet: str,
        row_index: int,
        column_index: int,
        text: str,
        report: _DispatchReport,
    ) -> CellJob | None:
        try:
            address = f"{get_column_letter(column_index)}{row_index}"
        except ValueError as exc:
            report.issues.append(
                _cell_issue(
                    ErrorCode.E_CELL_ADDRESS,
                    f"Invalid coordinates row={row_index} column={column_index}: {exc}",
                    sheet,
                    None,
                    "dispatch",
                )
            )
            logger.warning(
                "vnfontkit | dispatch | sheet=%s | row=%d | column=%d | code=%s",
                sheet,
                row_index,
                column_index,
                ErrorCode.E_CELL_ADDRESS.value,
            )
            return None

        try:
            runs = document.get_styled_runs(sheet, address)
            style_font = document.get_cell_style_font(sheet, address)
        except Exception as exc:
            report.issues.append(
                _cell_issue(ErrorCode.E_CELL_READ, f"Failed to read cell: {exc}", sheet, address, "dispatch")
            )
            logger.warning(
                "vnfontkit | dispatch | sheet=%s | cell=%s | code=%s | detail=%s",
                sheet,
                address,
                ErrorCode.E_CELL_READ.value,
                exc,
            )
            return None

        if runs:
            runs = [_inherit_font(run, style_font) for run in runs]
        else:
            base = style_font or StyledRun(text="")
            runs = [base.model_copy(update={"text": text})]

        logger.debug(
            "vnfontkit | dispatch | sheet=%s | cell=%s | runs=%d | fonts=%s",
            sheet,
            address,
            len(runs),
            [run.font_name for run in runs],
        )
        return CellJob(sheet_name=sheet, cell_address=address, runs=runs)

    # -- workers -------------------------------------------------------

    def _work(self, jobs: queue.Queue, results: queue.Queue) -> None:
        while True:
            job = jobs.get()
            if job is _CLOSED:
                return
            results.put(self._convert(job))

    def _convert(self, job: CellJob) -> ConversionResult:
        try:
            detailed = self._transformer.transform_detailed(job.runs)
        except Exception as exc:
            logger.warning(
                "vnfontkit | convert | sheet=%s | cell=%s | code=%s | detail=%s",
                job.sheet_name,
                job.cell_address,
                ErrorCode.E_CELL_CONVERT.value,
                exc,
            )
            return ConversionResult(
                job=job,
                error=_cell_issue(
                    ErrorCode.E_CELL_CONVERT,
                    f"Conversion failed: {exc}",
                    job.sheet_name,
                    job.cell_address,
                    "convert",
                ),
            )
        return ConversionResult(
            job=job,
            new_runs=[run for run, _ in detailed],
            encodings=[encoding for _, encoding in detailed],
        )

    # -- collector -----------------------------------------------------

    def _collect(
        self,
        document: SpreadsheetDocument,
        handoff: threading.Lock,
        results: queue.Queue,
        progress: ProgressCallback | None,
        cancel_event: threading.Event,
    ) -> _CollectReport:
        report = _CollectReport()
        closed = False
        try:
            while True:
                item = results.get()
                if item is _CLOSED:
                    closed = True
                    break
                self._write_back(document, handoff, item, report, progress)
        except BaseException:
            cancel_event.set()
            if not closed:
                _drain(results)
            raise
        return report

    def _write_back(
        self,
        document: SpreadsheetDocument,
        handoff: threading.Lock,
        result: ConversionResult,
        report: _CollectReport,
        progress: ProgressCallback | None,
    ) -> None:
        job = result.job
        if result.error is not None:
            report.failed += 1
            report.issues.append(result.error)
            return

        try:
            with handoff:
                document.set_styled_runs(job.sheet_name, job.cell_address, result.new_runs)
        except Exception as exc:
            report.failed += 1
            report.issues.append(
                _cell_issue(
                    ErrorCode.E_CELL_WRITE,
                    f"Failed to write cell: {exc}",
                    job.sheet_name,
                    job.cell_address,
                    "collect",
                )
            )
            logger.warning(
                "vnfontkit | collect | sheet=%s | cell=%s | code=%s | detail=%s",
                job.sheet_name,
                job.cell_address,
                ErrorCode.E_CELL_WRITE.value,
                exc,
            )
            return

        report.processed += 1
        if result.converted:
            report.converted += 1
        if self._config.log_cell_text:
            logger.debug(
                "vnfontkit | collect | sheet=%s | cell=%s | before=%r | after=%r",
                job.sheet_name,
                job.cell_address,
                "".join(run.text for run in job.runs),
                "".join(run.text for run in result.new_runs),
            )
        if progress is not None:
            progress(report.processed)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _close_when_done(workers: list[Future], results: queue.Queue) -> None:
    wait(workers)
    results.put(_CLOSED)


def _drain(results: queue.Queue) -> None:
    while results.get() is not _CLOSED:
        pass


def _inherit_font(run: StyledRun, style_font: StyledRun | None) -> StyledRun:
    """Give a rich-text segment without a font the cell's style font name."""
    if run.font_name or style_font is None or not style_font.font_name:
        return run
    return run.model_copy(update={"font_name": style_font.font_name})


def _cell_issue(
    code: ErrorCode,
    message: str,
    sheet_name: str,
    cell_address: str | None,
    stage: str,
) -> ConversionIssue:
    return ConversionIssue(
        code=code,
        message=message,
        sheet_name=sheet_name,
        cell_address=cell_address,
        stage=stage,
        recoverable=True,
    )


# ---------------------------------------------------------------------------
# Output naming
# ---------------------------------------------------------------------------


def derive_output_path(
    input_path: str,
    config: ConverterConfig | None = None,
    now: datetime | None = None,
) -> str:
    """Return ``<base><infix><timestamp><ext>`` for *input_path*.

    With default config, ``report.xlsx`` becomes
    ``report_output_2024_01_31_09_05_00.xlsx``.
    """
    config = config or ConverterConfig()
    base, ext = os.path.splitext(input_path)
    timestamp = (now or datetime.now()).strftime(config.output_timestamp_format)
    return f"{base}{config.output_infix}{timestamp}{ext}"


# ---------------------------------------------------------------------------
# Factory and entry point
# ---------------------------------------------------------------------------


def create_default_processor(**overrides) -> WorkbookProcessor:
    """Create a WorkbookProcessor backed by openpyxl.

    Convenience factory.  All defaults can be overridden via keyword
    arguments:

    - ``opener``: DocumentOpener (default: ``OpenpyxlDocument.open``)
    - ``transformer``: RunTransformer (default: built from the config)
    - ``config``: ConverterConfig (default: ConverterConfig())

    Any other keyword arguments are applied as ConverterConfig fields.

    Returns
    -------
    WorkbookProcessor
        A processor ready for ``run()`` calls.
    """
    processor_keys = {"opener", "transformer", "config"}
    processor_kwargs = {k: v for k, v in overrides.items() if k in processor_keys}
    config_kwargs = {k: v for k, v in overrides.items() if k not in processor_keys}

    config = processor_kwargs.pop("config", None)
    if config is None:
        config = ConverterConfig(**config_kwargs)
    elif config_kwargs:
        config = ConverterConfig(**{**config.model_dump(), **config_kwargs})

    return WorkbookProcessor(
        config=config,
        opener=processor_kwargs.get("opener"),
        transformer=processor_kwargs.get("transformer"),
    )


def convert_workbook(
    input_path: str,
    sheet_name: str | None = None,
    *,
    config: ConverterConfig | None = None,
    progress: ProgressCallback | None = None,
    cancel_event: threading.Event | None = None,
) -> str:
    """Convert *input_path* and return the path of the saved copy.

    Raises
    ------
    ConversionError
        On any fatal condition; per-cell failures are only logged.
    """
    processor = create_default_processor(config=config)
    result = processor.run(
        input_path,
        sheet_name=sheet_name,
        progress=progress,
        cancel_event=cancel_event,
    )
    return result.output_path
