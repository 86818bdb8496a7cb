from __future__ import annotations

"""
Shadow Tree Builder.

Processes discovered packages one at a time, in discovery order:

    discovered -> skipped_private
               -> skipped_existing        (proxy descriptor already present)
               -> materialized -> written

A proxy descriptor is never overwritten, which makes reruns no-ops for every
package that was completed before.
"""

import logging
import os
from typing import Iterable, List

from pkgshadow.core.materializer import materialize_directory
from pkgshadow.core.synthesizer import synthesize_descriptor
from pkgshadow.domain.config import ShadowConfig
from pkgshadow.domain.models import (
    STATE_SKIPPED_EXISTING,
    STATE_SKIPPED_PRIVATE,
    STATE_WRITTEN,
    PackageOutcome,
    PackageRecord,
)
from pkgshadow.infra.executor import Executor
from pkgshadow.infra.fs import dump_json

logger = logging.getLogger(__name__)


class ShadowTreeBuilder:
    """
    Writes one proxy descriptor per public package below the destination root.

    Args:
        config: Resolved run configuration.
        executor: Performs (or plans) every mutation and records it.
    """

    def __init__(self, config: ShadowConfig, executor: Executor) -> None:
        self.config = config
        self.executor = executor

    def build(self, records: Iterable[PackageRecord]) -> List[PackageOutcome]:
        """Process every record; the first fatal error aborts the whole build."""
        outcomes = [self.process(record) for record in records]
        written = sum(1 for o in outcomes if o.state == STATE_WRITTEN)
        logger.info(f"Shadow tree: {written} proxy descriptor(s) written of {len(outcomes)} package(s)")
        return outcomes

    def process(self, record: PackageRecord) -> PackageOutcome:
        rel = record.relative_path

        if record.is_private(self.config.private_prefix):
            logger.debug(f"Skipping private package '{rel}'")
            return PackageOutcome(rel, STATE_SKIPPED_PRIVATE)

        shadow_dir = self.shadow_dir(record)
        if not self.executor.is_dir(shadow_dir):
            materialize_directory(self.config.destination_root, rel, self.executor)

        proxy_path = os.path.join(shadow_dir, self.config.descriptor_filename)
        if self.executor.exists(proxy_path):
            logger.info(f"Skipping '{rel}': proxy descriptor already exists")
            return PackageOutcome(rel, STATE_SKIPPED_EXISTING, proxy_path)

        proxy = synthesize_descriptor(
            record.absolute_path,
            rel,
            record.descriptor,
            self.config.package_root_offset,
        )
        self.executor.create_file(proxy_path, dump_json(proxy))
        return PackageOutcome(rel, STATE_WRITTEN, proxy_path)

    def shadow_dir(self, record: PackageRecord) -> str:
        return os.path.join(self.config.destination_root, *record.segments)
