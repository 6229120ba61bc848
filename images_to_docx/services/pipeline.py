"""ImagePipeline: codec -> normalize -> layout -> assemble for one batch of files."""
from __future__ import annotations

import asyncio
from typing import List, Optional, Sequence

from ..config import Settings
from ..document import assemble
from ..errors import ImagesToDocxError, RenderError
from ..image_io import CodecGateway
from ..image_processing import normalize
from ..layout import layout
from ..logs import debug, log
from ..models import DocumentArtifact, Footprint, NormalizedImage, RawImageInput
from ..progress import ProgressTracker


class ImagePipeline:
    """Runs the whole conversion for one batch.

    Files go through the gateway and the normalizer strictly one at a time so
    progress is linear and at most one decoded raster is alive. Any render
    failure aborts the batch: there is no partial document.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        gateway: Optional[CodecGateway] = None,
        progress: Optional[ProgressTracker] = None,
        quiet: bool = False,
    ):
        self.settings = settings or Settings()
        self.quiet = quiet
        self.gateway = gateway or CodecGateway(quiet=quiet, debug=self.settings.debug)
        self.progress = progress or ProgressTracker()

    def _debug(self, msg: str) -> None:
        debug("PIPELINE_DEBUG", msg, force=self.settings.debug)

    async def _normalize_one(self, file: RawImageInput, footprint: Footprint) -> NormalizedImage:
        source = await asyncio.to_thread(self.gateway.resolve, file)
        with source:
            return await asyncio.to_thread(
                normalize,
                source,
                footprint,
                self.settings.image_max_size,
                self.settings.image_quality,
            )

    async def run_async(
        self,
        files: Sequence[RawImageInput],
        footprint: Optional[Footprint] = None,
        columns: Optional[int] = None,
    ) -> Optional[DocumentArtifact]:
        """Build the document for ``files``; ``None`` when there is nothing to convert."""
        footprint = footprint or self.settings.footprint
        columns = self.settings.columns if columns is None else columns
        if columns < 1:
            raise ValueError(f"columns must be >= 1, got {columns}")
        if not files:
            log("Nothing to do: no images provided.", self.quiet)
            return None

        total = len(files)
        log(f"Converting {total} file(s), footprint {footprint.width}x{footprint.height}, {columns} columns", self.quiet)
        normalized: List[NormalizedImage] = []
        try:
            self.progress.start(total)
            for idx, file in enumerate(files, start=1):
                try:
                    item = await self._normalize_one(file, footprint)
                except RenderError:
                    raise
                except ImagesToDocxError as e:
                    raise RenderError(file.name, str(e)) from e
                normalized.append(item)
                self.progress.advance()
                log(f"[{idx}/{total}] {file.name}", self.quiet)
                self._debug(f"{file.name}: {len(item.data)} bytes after re-encode")

            rows = layout(normalized, columns)
            self._debug(f"layout: {len(rows)} row(s) x {columns}")
            artifact = await asyncio.to_thread(assemble, rows, self.settings.output_filename)
        except ImagesToDocxError as e:
            log(f"Aborted: {e}", self.quiet)
            raise
        finally:
            self.progress.reset()

        log(f"Document ready: {artifact.filename} ({len(artifact.data)} bytes)", self.quiet)
        return artifact

    def run(
        self,
        files: Sequence[RawImageInput],
        footprint: Optional[Footprint] = None,
        columns: Optional[int] = None,
    ) -> Optional[DocumentArtifact]:
        return asyncio.run(self.run_async(files, footprint, columns))
